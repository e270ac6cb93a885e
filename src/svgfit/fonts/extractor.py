"""
Font Extraction
===============

Detects the font families an SVG document references.

Extraction is a set of independent regular-expression passes over the raw
markup rather than a parser. Every pass is a pure function returning raw
captures in document order; ``extract_fonts`` merges them, keeps only the
primary family of each fallback chain and drops duplicates while preserving
first-seen order. Any captured string is accepted as a family name.
"""

import logging
import re
from pathlib import Path

from .utils import primary_family

logger = logging.getLogger(__name__)

_STYLE_PROPERTY = re.compile(r"font-family\s*:\s*['\"]?([^'\",;]+)['\"]?")
_FONT_ATTRIBUTE = re.compile(r"font-family\s*=\s*[\"']([^\"']+)[\"']")
_STYLE_BLOCK = re.compile(r"<style[^>]*>([\s\S]*?)</style>")
_TSPAN_ELEMENT = re.compile(r"<tspan[^>]*font-family\s*=\s*[\"']([^\"']+)[\"'][^>]*>")
_TEXT_ELEMENT = re.compile(r"<text[^>]*font-family\s*=\s*[\"']([^\"']+)[\"'][^>]*>")
_FONT_FACE_RULE = re.compile(
    r"@font-face\s*{[^}]*?font-family\s*:\s*['\"]?([^'\",;]+)['\"]?[^}]*?}"
)


def scan_style_properties(text: str) -> list[str]:
    """``font-family: Name`` declarations anywhere in the document."""
    return [m.group(1) for m in _STYLE_PROPERTY.finditer(text)]


def scan_font_attributes(text: str) -> list[str]:
    """``font-family="Name"`` XML attributes."""
    return [m.group(1) for m in _FONT_ATTRIBUTE.finditer(text)]


def scan_style_blocks(text: str) -> list[str]:
    """``font-family`` properties inside embedded <style> blocks."""
    found = []
    for block in _STYLE_BLOCK.finditer(text):
        found.extend(scan_style_properties(block.group(1)))
    return found


def scan_text_elements(text: str) -> list[str]:
    """``font-family`` attributes on <tspan> and <text> opening tags."""
    found = [m.group(1) for m in _TSPAN_ELEMENT.finditer(text)]
    found.extend(m.group(1) for m in _TEXT_ELEMENT.finditer(text))
    return found


def scan_font_face_rules(text: str) -> list[str]:
    """Families declared by ``@font-face`` rules."""
    return [m.group(1) for m in _FONT_FACE_RULE.finditer(text)]


SCAN_PASSES = (
    scan_style_properties,
    scan_font_attributes,
    scan_style_blocks,
    scan_text_elements,
    scan_font_face_rules,
)


def extract_fonts(text: str) -> list[str]:
    """
    Extract primary font family names from SVG markup.

    Args:
        text: Raw SVG document text

    Returns:
        Family names in first-seen order without duplicates; empty when the
        document references no fonts
    """
    families: dict[str, None] = {}
    for scan in SCAN_PASSES:
        for raw in scan(text):
            family = primary_family(raw.strip())
            if family:
                families.setdefault(family, None)
    return list(families)


def extract_fonts_from_file(svg_path: str | Path) -> list[str]:
    """Read an SVG file as UTF-8 and extract its font families."""
    svg_text = Path(svg_path).read_text(encoding="utf-8")
    fonts = extract_fonts(svg_text)
    logger.debug(f"Detected fonts in {svg_path}: {fonts}")
    return fonts
