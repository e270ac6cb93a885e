"""
Font data models and types.
"""

from dataclasses import asdict, dataclass
from pathlib import Path

STYLE_NORMAL = "Normal"
STYLE_ITALIC = "Italic"


@dataclass
class LocalFontFile:
    """A true-type file in the font directory, described by its filename."""

    path: Path
    weight: int  # 100-900
    style: str  # Normal, Italic
    suffix: str  # Regular, Bold, SemiBold Italic, ...

    @property
    def filename(self) -> str:
        """Get the font filename."""
        return self.path.name

    @property
    def is_regular(self) -> bool:
        return "-regular" in self.filename.lower()

    def __str__(self) -> str:
        return f"{self.suffix} {self.weight} ({self.filename})"


@dataclass
class FontMapEntry:
    """One <type /> row of the typemap file."""

    name: str
    fullname: str
    family: str
    style: str
    weight: str
    glyphs: str
    stretch: str = STYLE_NORMAL

    @property
    def key(self) -> tuple[str, str, str, str]:
        """Identity of a row inside the mapping."""
        return (self.name, self.family, self.style, self.weight)

    def to_attributes(self) -> dict[str, str]:
        """Attributes in the order the renderer expects them."""
        data = asdict(self)
        return {
            field: data[field]
            for field in ("name", "fullname", "family", "style", "stretch", "weight", "glyphs")
        }


@dataclass
class RemoteFontRecord:
    """A catalog hit, valid for one resolution call only."""

    family: str
    source_url: str
    truetype_url: str
