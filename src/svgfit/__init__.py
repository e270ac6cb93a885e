"""svgfit
======

Font resolution and SVG normalization for fixed-size PDF rendering.

The font pipeline detects the families an SVG references, downloads missing
ones from Google Fonts and maintains the ImageMagick typemap; the document
normalizer injects a viewBox and @font-face rules and fits the drawing into a
fixed square canvas. Rendering itself is left to an external tool.
"""

__version__ = "0.1.0"

from .core.config import AppConfig, FontsConfig, NormalizerConfig
from .core.exceptions import SvgfitError
from .core.models import FontReport, NormalizationReport, ResolutionResult, ResolutionStatus
from .document import DocumentNormalizer, SvgDocument
from .fonts import FontManager, FontMapWriter, RemoteFontResolver, extract_fonts

__all__ = [
    "AppConfig",
    "DocumentNormalizer",
    "FontManager",
    "FontMapWriter",
    "FontReport",
    "FontsConfig",
    "NormalizationReport",
    "NormalizerConfig",
    "RemoteFontResolver",
    "ResolutionResult",
    "ResolutionStatus",
    "SvgDocument",
    "SvgfitError",
    "extract_fonts",
]
