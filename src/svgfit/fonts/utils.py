"""
Font Utilities
==============

Name normalization and the filename heuristics used to label font files.

No font binary is ever opened here. Weight, style and the descriptive suffix
are inferred from hyphen-prefixed tokens in the filename only, because the
typemap consumed by the renderer is defined in terms of these same labels.
"""

import re
from pathlib import Path

from .models import STYLE_ITALIC, STYLE_NORMAL, LocalFontFile

TRUETYPE_EXTENSION = ".ttf"

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WHITESPACE = re.compile(r"\s+")


def normalize_font_name(name: str) -> str:
    """Lower-case and strip everything that is not a letter or digit."""
    return _NON_ALNUM.sub("", name.lower())


def compact_family(name: str) -> str:
    """Family name with whitespace removed, as used in font filenames."""
    return _WHITESPACE.sub("", name)


def primary_family(value: str) -> str:
    """First entry of a CSS fallback chain, without quotes."""
    return value.split(",")[0].strip().strip("'\"").strip()


def is_truetype(path: str | Path) -> bool:
    return str(path).lower().endswith(TRUETYPE_EXTENSION)


def _suffix_for(
    *,
    bold: bool,
    semibold: bool,
    medium: bool,
    light: bool,
    extrabold: bool,
    italic: bool,
    regular: bool,
) -> str:
    if bold and italic:
        return "Bold Italic"
    if bold:
        return "Bold"
    if semibold and italic:
        return "SemiBold Italic"
    if semibold:
        return "SemiBold"
    if medium and italic:
        return "Medium Italic"
    if medium:
        return "Medium"
    if light and italic:
        return "Light Italic"
    if light:
        return "Light"
    if italic:
        return "Italic"
    if regular:
        return "Regular"
    if extrabold and italic:
        return "ExtraBold Italic"
    if extrabold:
        return "ExtraBold"
    return "Regular"


def infer_variant(path: str | Path) -> LocalFontFile:
    """
    Describe a font file from its name.

    Args:
        path: Font file path, e.g. ``fonts/OpenSans-SemiBoldItalic.ttf``

    Returns:
        LocalFontFile with weight (400 unless a token says otherwise),
        style (Normal or Italic) and descriptive suffix
    """
    path = Path(path)
    lowered = path.name.lower()

    italic = "-italic" in lowered or "-bolditalic" in lowered
    bold = "-bold" in lowered or "-bolditalic" in lowered
    semibold = "-semibold" in lowered
    medium = "-medium" in lowered
    light = "-light" in lowered
    regular = "-regular" in lowered
    extrabold = "-extrabold" in lowered

    # Later tokens override earlier ones
    weight = 400
    if bold:
        weight = 700
    if semibold:
        weight = 600
    if medium:
        weight = 500
    if light:
        weight = 300
    if extrabold:
        weight = 800

    suffix = _suffix_for(
        bold=bold,
        semibold=semibold,
        medium=medium,
        light=light,
        extrabold=extrabold,
        italic=italic,
        regular=regular,
    )

    return LocalFontFile(
        path=path,
        weight=weight,
        style=STYLE_ITALIC if italic else STYLE_NORMAL,
        suffix=suffix,
    )


def family_from_filename(filename: str) -> str:
    """Guess a display family from a file name: ``OpenSans-Bold.ttf`` -> ``Open Sans``."""
    stem = Path(filename).stem
    stem = re.sub(r"-.*$", "", stem)
    return re.sub(r"(?<!^)([A-Z])", r" \1", stem).strip()


def names_overlap(a: str, b: str) -> bool:
    """Case-insensitive equality or containment in either direction."""
    a_lower = a.lower()
    b_lower = b.lower()
    if not a_lower or not b_lower:
        return False
    return a_lower == b_lower or a_lower in b_lower or b_lower in a_lower
