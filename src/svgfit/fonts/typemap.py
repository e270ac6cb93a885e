"""
Typemap Writer
==============

Maintains the ``type.xml`` font mapping consumed by the external renderer.

The mapping is handled as an explicit store with a load, merge and save
contract. ``register`` replaces every row of a family with rows derived from
the true-type files currently on disk, so running it twice for the same
family yields the same rows. Saves go through a temporary file and an atomic
rename, serialized per mapping path inside the process.
"""

import logging
import os
import tempfile
import threading
import xml.etree.ElementTree as ET
from pathlib import Path

from ..core.exceptions import FontMapError, InvalidTypemapError
from .models import STYLE_NORMAL, FontMapEntry, LocalFontFile
from .utils import compact_family, infer_variant, is_truetype

logger = logging.getLogger(__name__)

DEFAULT_MAPPING_FILENAME = "type.xml"
EMPTY_TYPEMAP = '<?xml version="1.0"?>\n<typemap>\n</typemap>'

_ROOT_TAG = "typemap"
_ROW_TAG = "type"

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


def glyphs_path(path: Path) -> str:
    """Absolute path with forward slashes, as the renderer expects."""
    return str(path.resolve()).replace("\\", "/")


def entry_from_element(element: ET.Element) -> FontMapEntry:
    attrs = element.attrib
    return FontMapEntry(
        name=attrs.get("name", ""),
        fullname=attrs.get("fullname", ""),
        family=attrs.get("family", ""),
        style=attrs.get("style", STYLE_NORMAL),
        weight=attrs.get("weight", "400"),
        glyphs=attrs.get("glyphs", ""),
        stretch=attrs.get("stretch", STYLE_NORMAL),
    )


class TypemapStore:
    """Load, merge and save a typemap file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load_tree(self) -> ET.ElementTree:
        """
        Parse the mapping file, starting from an empty typemap when absent.

        Raises:
            InvalidTypemapError: If the file is not a <typemap> document
        """
        if not self.path.exists():
            return ET.ElementTree(ET.fromstring(EMPTY_TYPEMAP))

        try:
            tree = ET.parse(self.path)
        except ET.ParseError as e:
            raise InvalidTypemapError(str(self.path), str(e)) from e

        if tree.getroot().tag != _ROOT_TAG:
            raise InvalidTypemapError(str(self.path), f"root element is <{tree.getroot().tag}>")
        return tree

    def load(self) -> list[FontMapEntry]:
        """All rows currently in the mapping file."""
        root = self.load_tree().getroot()
        return [entry_from_element(element) for element in root.iter(_ROW_TAG)]

    def ensure_exists(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(EMPTY_TYPEMAP, encoding="utf-8")
            logger.info(f"Created empty typemap at {self.path}")

    def replace_family(self, family: str, entries: list[FontMapEntry]) -> list[FontMapEntry]:
        """
        Drop every row of ``family`` and append ``entries`` in one save.

        Other rows and non-row elements are kept as they are. Rows sharing
        a (name, family, style, weight) key are collapsed to the last one.
        """
        with _lock_for(self.path):
            self.ensure_exists()
            tree = self.load_tree()
            root = tree.getroot()

            stale = [
                element
                for element in root.findall(_ROW_TAG)
                if element.get("family", "").lower() == family.lower()
            ]
            for element in stale:
                root.remove(element)
            if stale:
                logger.debug(f"Removed {len(stale)} existing typemap rows for {family}")

            for entry in entries:
                ET.SubElement(root, _ROW_TAG, entry.to_attributes())

            self._collapse_duplicates(root)
            self._save(tree)
            return [entry_from_element(element) for element in root.findall(_ROW_TAG)]

    @staticmethod
    def _collapse_duplicates(root: ET.Element) -> None:
        last_seen: dict[tuple[str, str, str, str], ET.Element] = {}
        duplicates = []
        for element in root.findall(_ROW_TAG):
            key = entry_from_element(element).key
            if key in last_seen:
                duplicates.append(last_seen[key])
            last_seen[key] = element
        for element in duplicates:
            root.remove(element)

    def _save(self, tree: ET.ElementTree) -> None:
        ET.indent(tree, space="  ")
        with tempfile.NamedTemporaryFile(
            dir=self.path.parent, delete=False, suffix=".tmp", prefix=".typemap-"
        ) as temp_file:
            temp_path = Path(temp_file.name)

        try:
            with temp_path.open("wb") as f:
                f.write(b'<?xml version="1.0"?>\n')
                tree.write(f, encoding="utf-8", xml_declaration=False)
                f.write(b"\n")
            os.replace(temp_path, self.path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise


def entries_for_files(family: str, files: list[LocalFontFile]) -> list[FontMapEntry]:
    """
    Build typemap rows for one family.

    One row per file named ``<family> <suffix>``, followed by a default row
    named after the bare family that points at the regular file (or the
    first file) to help fuzzy lookups in the renderer.
    """
    entries = []
    for font_file in files:
        label = f"{family} {font_file.suffix}"
        entries.append(
            FontMapEntry(
                name=label,
                fullname=label,
                family=family,
                style=font_file.style,
                weight=str(font_file.weight),
                glyphs=glyphs_path(font_file.path),
            )
        )

    default_file = next((f for f in files if f.is_regular), files[0])
    entries.append(
        FontMapEntry(
            name=family,
            fullname=f"{family} Regular",
            family=family,
            style=STYLE_NORMAL,
            weight="400",
            glyphs=glyphs_path(default_file.path),
        )
    )
    return entries


def family_font_files(family: str, fonts_dir: str | Path) -> list[LocalFontFile]:
    """True-type files in ``fonts_dir`` whose name starts with the compacted family."""
    prefix = compact_family(family).lower()
    fonts_dir = Path(fonts_dir)
    return [
        infer_variant(fonts_dir / name)
        for name in sorted(os.listdir(fonts_dir))
        if name.lower().startswith(prefix) and is_truetype(name)
    ]


class FontMapWriter:
    """Registers downloaded families in the typemap of a font directory."""

    def __init__(self, mapping_filename: str = DEFAULT_MAPPING_FILENAME):
        self.mapping_filename = mapping_filename

    def mapping_path(self, fonts_dir: str | Path) -> Path:
        return Path(fonts_dir) / self.mapping_filename

    def register(self, family: str, fonts_dir: str | Path) -> list[FontMapEntry]:
        """
        Update the typemap with every true-type file of ``family``.

        Args:
            family: Font family as referenced by documents
            fonts_dir: Directory holding the font files and the typemap

        Returns:
            Rows written for the family; empty when no file was found or
            the mapping could not be updated
        """
        try:
            files = family_font_files(family, fonts_dir)
            if not files:
                logger.warning(f"No TTF font files found for {family}, cannot update type.xml")
                return []

            logger.info(
                f"Found {len(files)} TTF font files for {family}, updating type.xml mappings"
            )
            entries = entries_for_files(family, files)
            for entry in entries:
                logger.debug(f"Adding mapping: {entry.name} -> {entry.glyphs}")

            store = TypemapStore(self.mapping_path(fonts_dir))
            store.replace_family(family, entries)
            logger.info(f"Updated {store.path} with {family} mappings ({len(files)} variants)")
            return entries
        except (OSError, FontMapError) as e:
            logger.error(f"Error updating type.xml: {e}")
            return []

    def load_entries(self, fonts_dir: str | Path) -> list[FontMapEntry]:
        """Rows of the typemap, or an empty list when it is missing or invalid."""
        path = self.mapping_path(fonts_dir)
        if not path.exists():
            return []
        try:
            entries = TypemapStore(path).load()
        except (OSError, FontMapError) as e:
            logger.warning(f"Could not read font mappings from {path}: {e}")
            return []
        logger.debug(f"Found {len(entries)} font mappings in {path}")
        return entries


def load_entries(mapping_path: str | Path) -> list[FontMapEntry]:
    """Parse a typemap file at an explicit path."""
    mapping_path = Path(mapping_path)
    return FontMapWriter(mapping_path.name).load_entries(mapping_path.parent)
