"""Document Normalization Module
=============================

Pure transforms that make an SVG's coordinate frame, font declarations and
output canvas deterministic before it is handed to the renderer.
"""

from .models import ScalingTransform, SvgDocument
from .normalizer import DocumentNormalizer
from .transforms import (
    build_font_face_block,
    infer_view_box,
    inject_font_faces,
    normalize_canvas,
    prepare_fonts,
    tag_text_elements,
)

__all__ = [
    "DocumentNormalizer",
    "ScalingTransform",
    "SvgDocument",
    "build_font_face_block",
    "infer_view_box",
    "inject_font_faces",
    "normalize_canvas",
    "prepare_fonts",
    "tag_text_elements",
]
