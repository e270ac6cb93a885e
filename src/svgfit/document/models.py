"""
Document data models.

SvgDocument wraps raw markup and exposes the few facts the normalization
transforms need. It is immutable: transforms return a new instance.
"""

import re
from dataclasses import dataclass
from functools import cached_property

from ..fonts.utils import primary_family

ROOT_TAG_PATTERN = re.compile(r"<svg\b[^>]*>", re.IGNORECASE)
TEXT_ELEMENT_PATTERN = re.compile(r"<text\b[^>]*>[\s\S]*?</text>", re.IGNORECASE)
TEXT_OPEN_TAG_PATTERN = re.compile(r"<text\b[^>]*>", re.IGNORECASE)

_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_FAMILY_PROPERTY = re.compile(r"font-family\s*:\s*([^;]*)", re.IGNORECASE)


def attribute_pattern(name: str) -> re.Pattern:
    """Match ``name="value"`` preceded by whitespace, so ``width`` never hits ``stroke-width``."""
    return re.compile(rf"\s{re.escape(name)}\s*=\s*([\"'])(.*?)\1", re.IGNORECASE | re.DOTALL)


def get_attribute(tag: str, name: str) -> str | None:
    match = attribute_pattern(name).search(tag)
    return match.group(2) if match else None


def parse_length(value: str | None) -> float | None:
    """Leading number of an SVG length (``"200px"`` -> 200.0); None unless positive."""
    if value is None:
        return None
    match = _NUMBER.match(value)
    if not match:
        return None
    number = float(match.group(1))
    return number if number > 0 else None


def format_number(value: float) -> str:
    """Shortest text for a number: ``200.0`` -> ``200``, ``0.5`` -> ``0.5``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


_FAMILY_ATTRIBUTE = attribute_pattern("font-family")
_STYLE_ATTRIBUTE = attribute_pattern("style")


def element_font_family(element: str) -> str | None:
    """
    Primary family of a text element, from an attribute or inline style.

    Values are read up to the attribute's own closing quote, so either quote
    character may delimit the attribute.
    """
    match = _FAMILY_ATTRIBUTE.search(element)
    if match:
        return primary_family(match.group(2)) or None
    for style in _STYLE_ATTRIBUTE.finditer(element):
        match = _FAMILY_PROPERTY.search(style.group(2))
        if match:
            return primary_family(match.group(1)) or None
    return None


@dataclass(frozen=True)
class SvgDocument:
    """Raw SVG markup plus derived views of its root element and text."""

    text: str

    def with_text(self, text: str) -> "SvgDocument":
        return SvgDocument(text)

    @cached_property
    def root_match(self) -> re.Match | None:
        return ROOT_TAG_PATTERN.search(self.text)

    @property
    def root_tag(self) -> str | None:
        return self.root_match.group(0) if self.root_match else None

    def root_attribute(self, name: str) -> str | None:
        return get_attribute(self.root_tag, name) if self.root_tag else None

    @property
    def width(self) -> float | None:
        return parse_length(self.root_attribute("width"))

    @property
    def height(self) -> float | None:
        return parse_length(self.root_attribute("height"))

    @property
    def view_box(self) -> str | None:
        return self.root_attribute("viewBox")

    @property
    def text_elements(self) -> list[str]:
        return TEXT_ELEMENT_PATTERN.findall(self.text)

    @property
    def text_font_families(self) -> list[str]:
        """Primary families used by text elements, first-seen order."""
        families: dict[str, None] = {}
        for element in self.text_elements:
            family = element_font_family(element)
            if family:
                families.setdefault(family, None)
        return list(families)


@dataclass(frozen=True)
class ScalingTransform:
    """Proportional fit of a width x height drawing into a target square."""

    target: float
    width: float
    height: float

    @property
    def scale(self) -> float:
        return self.target / max(self.width, self.height)

    @property
    def offset_x(self) -> float:
        return (self.target - self.width * self.scale) / 2

    @property
    def offset_y(self) -> float:
        return (self.target - self.height * self.scale) / 2

    def to_svg(self) -> str:
        """Value for a ``transform`` attribute: translate then scale."""
        return (
            f"translate({format_number(self.offset_x)}, {format_number(self.offset_y)}) "
            f"scale({format_number(self.scale)})"
        )
