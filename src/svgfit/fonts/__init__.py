"""Font Resolution Module
======================

Detects the fonts an SVG document references, finds or downloads them, and
maintains the typemap the external renderer uses to locate glyph files.
"""

from .extractor import extract_fonts, extract_fonts_from_file
from .local import LocalFontIndex, font_exists_locally
from .manager import ConsoleFontCallback, FontManager, FontProgressCallback
from .models import FontMapEntry, LocalFontFile, RemoteFontRecord
from .remote import SYSTEM_FONTS, RemoteFontResolver
from .typemap import FontMapWriter, TypemapStore, load_entries

__all__ = [
    "SYSTEM_FONTS",
    "ConsoleFontCallback",
    "FontManager",
    "FontMapEntry",
    "FontMapWriter",
    "FontProgressCallback",
    "LocalFontFile",
    "LocalFontIndex",
    "RemoteFontRecord",
    "RemoteFontResolver",
    "TypemapStore",
    "extract_fonts",
    "extract_fonts_from_file",
    "font_exists_locally",
    "load_entries",
]
