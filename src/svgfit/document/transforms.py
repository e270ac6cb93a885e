"""
Document Transforms
===================

Pure ``SvgDocument -> SvgDocument`` rewrites applied before rendering.

Each transform returns the document unchanged when its precondition already
holds, so applying it twice gives the same text as applying it once.
"""

import logging
import os
import re
from pathlib import Path

from ..core.exceptions import MissingRootElementError
from ..fonts.models import STYLE_NORMAL, FontMapEntry
from ..fonts.utils import family_from_filename, is_truetype, names_overlap, normalize_font_name
from .models import (
    TEXT_ELEMENT_PATTERN,
    TEXT_OPEN_TAG_PATTERN,
    ScalingTransform,
    SvgDocument,
    attribute_pattern,
    element_font_family,
    format_number,
    get_attribute,
)

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

RENDERING_HINTS = 'text-rendering="geometricPrecision" shape-rendering="geometricPrecision"'
_CARRIED_ROOT_ATTRIBUTES = ("text-rendering", "shape-rendering")

_FONT_FACE_STYLE_BLOCK = re.compile(
    r"\n?<style[^>]*>(?:(?!</style>)[\s\S])*?@font-face[\s\S]*?</style>", re.IGNORECASE
)
_NAMESPACE_DECLARATION = re.compile(r"\s(xmlns:[\w.-]+)\s*=\s*([\"'])(.*?)\2")
_CLOSING_ROOT = re.compile(r"</svg\s*>", re.IGNORECASE)


def _add_root_attributes(document: SvgDocument, attributes: str) -> SvgDocument:
    root_tag = document.root_tag
    if root_tag.endswith("/>"):
        new_tag = f"{root_tag[:-2].rstrip()} {attributes}/>"
    else:
        new_tag = f"{root_tag[:-1].rstrip()} {attributes}>"
    start, end = document.root_match.span()
    return document.with_text(document.text[:start] + new_tag + document.text[end:])


# Coordinate frame


def infer_view_box(document: SvgDocument) -> SvgDocument:
    """
    Add ``viewBox="0 0 W H"`` to a root element that declares none.

    Only applies when both width and height parse as positive numbers (unit
    suffixes are ignored); otherwise the document is returned unchanged.
    """
    if document.root_tag is None or document.view_box is not None:
        return document

    width, height = document.width, document.height
    if width is None or height is None:
        logger.debug("No usable width/height on root element, leaving viewBox unset")
        return document

    view_box = f"0 0 {format_number(width)} {format_number(height)}"
    logger.info(f"Added viewBox: {view_box}")
    return _add_root_attributes(document, f'viewBox="{view_box}"')


# Font faces


def _entry_preference(entry: FontMapEntry) -> int:
    if entry.name == entry.family:
        return 0
    if entry.weight == "400" and entry.style == STYLE_NORMAL:
        return 1
    return 2


def find_mapping(family: str, entries: list[FontMapEntry]) -> FontMapEntry | None:
    """Exact family match first (preferring the default row), then a substring match."""
    exact = [e for e in entries if e.family.lower() == family.lower()]
    if exact:
        return min(exact, key=_entry_preference)
    return next((e for e in entries if names_overlap(e.family, family)), None)


def find_local_truetype(family: str, fonts_dir: str | Path | None) -> Path | None:
    """A ``.ttf`` in ``fonts_dir`` whose guessed family resembles ``family``."""
    if fonts_dir is None:
        return None
    try:
        names = sorted(os.listdir(fonts_dir))
    except OSError as e:
        logger.warning(f"Could not list fonts in {fonts_dir}: {e}")
        return None

    wanted = normalize_font_name(family)
    for name in names:
        if is_truetype(name) and names_overlap(
            normalize_font_name(family_from_filename(name)), wanted
        ):
            return Path(fonts_dir).resolve() / name
    return None


def font_face_rule(family: str, source: str | None) -> str:
    lines = [
        "@font-face {",
        f"  font-family: '{family}';",
        "  font-style: normal;",
        "  font-weight: normal;",
    ]
    if source:
        lines.append(f'  src: url("{source}") format("truetype");')
    lines.append("}")
    return "\n".join(lines) + "\n"


def build_font_face_block(
    families: list[str], entries: list[FontMapEntry], fonts_dir: str | Path | None = None
) -> str:
    """A <style> element with one @font-face rule per family."""
    rules = []
    for family in families:
        mapping = find_mapping(family, entries)
        if mapping:
            source = mapping.glyphs
            logger.info(f"Added @font-face for {family} using type.xml mapping to {source}")
        else:
            local_file = find_local_truetype(family, fonts_dir)
            source = str(local_file).replace("\\", "/") if local_file else None
            if source:
                logger.info(f"Added @font-face for {family} pointing to {local_file.name}")
            else:
                logger.info(f"No matching TTF font found for {family}")
        rules.append(font_face_rule(family, source))
    return '<style type="text/css">\n' + "".join(rules) + "</style>"


def inject_font_faces(
    document: SvgDocument, entries: list[FontMapEntry], fonts_dir: str | Path | None = None
) -> SvgDocument:
    """
    Replace any @font-face style block with one built from the typemap.

    Families come from text elements only. Each resolves to a mapped glyph
    file, else a similar local ``.ttf``, else a name-only rule so the
    document still declares the family and the renderer falls back to a
    system font.
    """
    families = document.text_font_families
    if not families or document.root_tag is None:
        return document

    block = build_font_face_block(families, entries, fonts_dir)
    stripped = document.with_text(_FONT_FACE_STYLE_BLOCK.sub("", document.text))
    if stripped.root_tag is None:
        raise MissingRootElementError()

    position = stripped.root_match.end()
    text = stripped.text[:position] + "\n" + block + stripped.text[position:]
    return document.with_text(text)


def _family_declaration(family: str, attribute_quote: str) -> str:
    quote = '"' if attribute_quote == "'" else "'"
    return f"font-family: {quote}{family}{quote}, sans-serif; text-rendering: geometricPrecision;"


def _merge_style(open_tag: str, family: str) -> str:
    pattern = attribute_pattern("style")
    match = pattern.search(open_tag)
    if match is None:
        declaration = _family_declaration(family, '"')
        return f'<text style="{declaration}"' + open_tag[len("<text"):]

    quote, existing = match.group(1), match.group(2)
    # Family quotes must differ from the attribute delimiter
    declaration = _family_declaration(family, quote)
    if declaration in existing:
        return open_tag
    merged = f"{existing.rstrip().rstrip(';')}; {declaration}" if existing.strip() else declaration
    start, end = match.span()
    return f"{open_tag[:start]} style={quote}{merged}{quote}{open_tag[end:]}"


def _tag_text_element(element: str) -> str:
    open_match = TEXT_OPEN_TAG_PATTERN.match(element)
    open_tag = open_match.group(0)
    new_tag = open_tag

    # Defaults only when neither is declared
    if "font-weight" not in open_tag and "font-style" not in open_tag:
        new_tag = '<text font-weight="normal" font-style="normal"' + new_tag[len("<text"):]

    family = element_font_family(element)
    if family:
        new_tag = _merge_style(new_tag, family)

    return new_tag + element[open_match.end():]


def tag_text_elements(document: SvgDocument) -> SvgDocument:
    """
    Give every <text> weight/style defaults and an inline family.

    Defaults are added only to elements declaring neither font-weight nor
    font-style. The family declaration is appended to any inline style
    rather than replacing it.
    """
    text = TEXT_ELEMENT_PATTERN.sub(lambda m: _tag_text_element(m.group(0)), document.text)
    return document.with_text(text)


def add_rendering_hints(document: SvgDocument) -> SvgDocument:
    """Ask for geometric precision on the root when the document has text."""
    if document.root_tag is None or not document.text_elements:
        return document
    if get_attribute(document.root_tag, "text-rendering") is not None:
        return document
    logger.debug("Added rendering attributes to SVG for better text handling")
    return _add_root_attributes(document, RENDERING_HINTS)


def prepare_fonts(
    document: SvgDocument,
    entries: list[FontMapEntry],
    fonts_dir: str | Path | None = None,
    enhance_text: bool = True,
) -> SvgDocument:
    """Font-face injection followed, optionally, by the text element rewrites."""
    document = inject_font_faces(document, entries, fonts_dir)
    if enhance_text:
        document = tag_text_elements(add_rendering_hints(document))
    return document


# Canvas


def canvas_dimensions(
    document: SvgDocument, default_width: float, default_height: float
) -> tuple[float, float]:
    """Root width/height, or the default pair unless both parse."""
    width, height = document.width, document.height
    if width is None or height is None:
        logger.debug(f"Using default dimensions {default_width} x {default_height}")
        return default_width, default_height
    return width, height


def is_normalized(document: SvgDocument, target: float) -> bool:
    size = f"{format_number(target)}pt"
    return (
        document.root_attribute("width") == size
        and document.root_attribute("height") == size
        and document.view_box == f"0 0 {format_number(target)} {format_number(target)}"
    )


def _canvas_root_tag(document: SvgDocument, target: float) -> str:
    size = format_number(target)
    attributes = [
        f'width="{size}pt"',
        f'height="{size}pt"',
        f'viewBox="0 0 {size} {size}"',
        f'xmlns="{SVG_NAMESPACE}"',
        f'xmlns:xlink="{XLINK_NAMESPACE}"',
    ]
    for match in _NAMESPACE_DECLARATION.finditer(document.root_tag):
        if match.group(1) != "xmlns:xlink":
            attributes.append(f'{match.group(1)}="{match.group(3)}"')
    for name in _CARRIED_ROOT_ATTRIBUTES:
        value = get_attribute(document.root_tag, name)
        if value is not None:
            attributes.append(f'{name}="{value}"')
    return "<svg " + " ".join(attributes) + ">"


def normalize_canvas(
    document: SvgDocument, target: float, default_width: float, default_height: float
) -> SvgDocument:
    """
    Fit the drawing into a ``target`` x ``target`` point canvas.

    The root element is replaced by one declaring the target size and frame,
    and all previous content is wrapped in a group that scales it by
    ``target / max(width, height)`` and centres it. Namespace declarations
    and rendering hints of the old root are kept.

    Raises:
        MissingRootElementError: If the document has no <svg> element
    """
    if document.root_tag is None:
        raise MissingRootElementError()
    if is_normalized(document, target):
        return document

    width, height = canvas_dimensions(document, default_width, default_height)
    transform = ScalingTransform(target=target, width=width, height=height)
    logger.info(
        f"Scale factor: {transform.scale:.4f} ({round(transform.scale * 100)}%) "
        f"for {format_number(width)} x {format_number(height)}"
    )

    start, end = document.root_match.span()
    prolog = document.text[:start]
    if document.root_tag.endswith("/>"):
        body, trailer = "", ""
    else:
        rest = document.text[end:]
        closings = list(_CLOSING_ROOT.finditer(rest))
        if closings:
            body, trailer = rest[: closings[-1].start()], rest[closings[-1].end():]
        else:
            body, trailer = rest, ""

    text = (
        prolog
        + _canvas_root_tag(document, target)
        + f'<g transform="{transform.to_svg()}">'
        + body
        + "</g></svg>"
        + trailer
    )
    logger.info(f"Modified SVG to {format_number(target)}pt x {format_number(target)}pt")
    return document.with_text(text)
