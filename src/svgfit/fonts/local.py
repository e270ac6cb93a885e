"""
Local Font Index
================

Answers whether a font family is already present in the local font directory.

Matching is loose: both the query and each file stem are
normalized (lower-case, alphanumerics only) and a file matches when its stem
*contains* the query, so ``Roboto`` finds ``Roboto-Bold.ttf``.
"""

import logging
import os
from pathlib import Path

from .utils import normalize_font_name

logger = logging.getLogger(__name__)


def find_font_files(font_name: str, fonts_dir: str | Path) -> list[Path]:
    """
    List files in ``fonts_dir`` whose normalized stem contains ``font_name``.

    Raises:
        OSError: If the directory cannot be read
    """
    query = normalize_font_name(font_name)
    if not query:
        return []

    fonts_dir = Path(fonts_dir)
    matches = []
    for entry in sorted(os.listdir(fonts_dir)):
        stem = os.path.splitext(entry)[0]
        if query in normalize_font_name(stem):
            matches.append(fonts_dir / entry)
    return matches


def font_exists_locally(font_name: str, fonts_dir: str | Path) -> bool:
    """
    Check if a font exists in the local fonts directory.

    Args:
        font_name: Font family name as referenced by the document
        fonts_dir: Directory holding font files

    Returns:
        True if a file matches; False when nothing matches or the directory
        cannot be read
    """
    try:
        return bool(find_font_files(font_name, fonts_dir))
    except OSError as e:
        logger.error(f"Error checking if font exists locally: {e}")
        return False


class LocalFontIndex:
    """Font lookups bound to one font directory."""

    def __init__(self, fonts_dir: str | Path):
        self.fonts_dir = Path(fonts_dir)

    def exists(self, font_name: str) -> bool:
        return font_exists_locally(font_name, self.fonts_dir)

    def files_for(self, font_name: str) -> list[Path]:
        """Matching files, or an empty list when the directory is unreadable."""
        try:
            return find_font_files(font_name, self.fonts_dir)
        except OSError as e:
            logger.warning(f"Could not list {self.fonts_dir}: {e}")
            return []
