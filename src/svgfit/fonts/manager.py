"""
Font Management System
======================

Central entry point that makes every font referenced by an SVG document
available to the renderer: extraction, local lookup, remote resolution and
typemap registration, reported once as an aggregate FontReport.
"""

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path

from ..core.config import FontsConfig
from ..core.models import FontReport, ResolutionResult, ResolutionStatus
from .extractor import extract_fonts
from .local import LocalFontIndex
from .models import FontMapEntry
from .remote import RemoteFontResolver
from .typemap import FontMapWriter

logger = logging.getLogger(__name__)


class FontProgressCallback:
    """Base class for font resolution progress callbacks."""

    def on_status(self, message: str) -> None:
        """Called with a human readable status line."""

    def on_font_resolved(self, result: ResolutionResult) -> None:
        """Called after a missing font went through the remote resolver."""

    def on_complete(self, report: FontReport) -> None:
        """Called once with the final report."""


class ConsoleFontCallback(FontProgressCallback):
    """Console-based callback printing status lines."""

    def on_status(self, message: str) -> None:
        print(message)

    def on_font_resolved(self, result: ResolutionResult) -> None:
        status = "✓" if result.ok else "✗"
        detail = f" - {result.reason}" if result.reason else ""
        print(f"{status} {result.family}: {result.status.value}{detail}")

    def on_complete(self, report: FontReport) -> None:
        print(report.summary())


class _FunctionCallback(FontProgressCallback):
    def __init__(self, func: Callable[[str], None]):
        self.func = func

    def on_status(self, message: str) -> None:
        self.func(message)


StatusCallback = FontProgressCallback | Callable[[str], None] | None


class FontManager:
    """
    Font resolution pipeline bound to one font directory.

    Fonts are processed sequentially. A failure for one family is recorded
    in the report and never stops the others; documents then fall back to a
    system font for that family at render time.
    """

    def __init__(
        self,
        config: FontsConfig | None = None,
        resolver: RemoteFontResolver | None = None,
    ):
        self.config = config or FontsConfig()
        self.fonts_dir = Path(self.config.fonts_dir)
        self.index = LocalFontIndex(self.fonts_dir)
        self.map_writer = FontMapWriter(self.config.mapping_filename)
        self.resolver = resolver or RemoteFontResolver(self.config, map_writer=self.map_writer)

        logger.info(f"FontManager initialized for {self.fonts_dir}")

    @property
    def mapping_path(self) -> Path:
        return self.map_writer.mapping_path(self.fonts_dir)

    @staticmethod
    def _as_callback(callback: StatusCallback) -> FontProgressCallback:
        if callback is None:
            return FontProgressCallback()
        if isinstance(callback, FontProgressCallback):
            return callback
        return _FunctionCallback(callback)

    def ensure_fonts_available(
        self, svg_path: str | Path, status_callback: StatusCallback = None
    ) -> FontReport:
        """
        Ensure all fonts referenced by an SVG file are available locally.

        Args:
            svg_path: Path to the SVG document
            status_callback: Optional callable taking a status string, or a
                FontProgressCallback

        Returns:
            FontReport; errors reading the document are recorded in
            ``errors`` rather than raised
        """
        callback = self._as_callback(status_callback)
        callback.on_status("Analyzing SVG for font requirements...")

        try:
            svg_text = Path(svg_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            message = f"Error ensuring fonts available: {e}"
            logger.error(message)
            callback.on_status(message)
            report = FontReport(errors=[message])
            callback.on_complete(report)
            return report

        return self.ensure_fonts_for_text(svg_text, callback)

    def ensure_fonts_for_text(
        self, svg_text: str, status_callback: StatusCallback = None
    ) -> FontReport:
        """Same as ``ensure_fonts_available`` for in-memory document text."""
        callback = self._as_callback(status_callback)
        report = FontReport(detected=extract_fonts(svg_text))

        if not report.detected:
            logger.info("No fonts detected in SVG")
            callback.on_status(report.summary())
            callback.on_complete(report)
            return report

        callback.on_status(f"Found {len(report.detected)} font(s): {', '.join(report.detected)}")
        logger.info(f"Detected fonts in SVG: {', '.join(report.detected)}")

        for font_name in report.detected:
            self._process_font(font_name, report, callback)

        callback.on_status(report.summary())
        callback.on_complete(report)
        return report

    def _process_font(
        self, font_name: str, report: FontReport, callback: FontProgressCallback
    ) -> None:
        if self.index.exists(font_name):
            logger.info(f'Font "{font_name}" already exists locally')
            callback.on_status(f'"{font_name}" found locally')
            report.found_locally.append(font_name)
            return

        logger.info(f'Font "{font_name}" not found locally, attempting to download...')
        callback.on_status(f'"{font_name}" not found locally - downloading from Google Fonts...')

        result = self.resolver.resolve(font_name, self.fonts_dir)
        report.results.append(result)
        callback.on_font_resolved(result)

        if result.status == ResolutionStatus.DOWNLOADED:
            callback.on_status(f'Successfully downloaded "{font_name}" from Google Fonts')
            report.downloaded.append(font_name)
            return

        if result.status == ResolutionStatus.SKIPPED:
            report.skipped.append(font_name)
        else:
            report.errors.append(f'Download failed for "{font_name}": {result.reason}')
        # Skipped system fonts were not obtained either; the renderer uses its own copy
        report.failed.append(font_name)
        callback.on_status(f'Failed to download "{font_name}" - will use system fallback')

    def load_mappings(self) -> list[FontMapEntry]:
        return self.map_writer.load_entries(self.fonts_dir)

    def renderer_environment(self, base_env: Mapping[str, str] | None = None) -> dict[str, str]:
        """
        Environment for the external renderer.

        Points fontconfig and ImageMagick at the font directory and typemap
        while keeping every variable of ``base_env`` (default: os.environ).
        """
        env = dict(os.environ if base_env is None else base_env)
        fonts_path = str(self.fonts_dir.resolve())
        env["XDG_DATA_DIRS"] = f"{fonts_path}:{env.get('XDG_DATA_DIRS', '')}"
        env["FONTCONFIG_PATH"] = fonts_path
        env["MAGICK_TYPEMAP"] = str(self.mapping_path.resolve())
        return env
