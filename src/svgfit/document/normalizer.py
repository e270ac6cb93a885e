"""
Document Normalizer
===================

Runs the coordinate frame, font-face and canvas transforms over an SVG
document in that fixed order and reports the outcome of each step.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from ..core.config import FontsConfig, NormalizerConfig
from ..core.exceptions import DocumentNotFoundError, DocumentReadError, NormalizationError
from ..core.models import NormalizationReport, StepResult, StepStatus
from ..fonts.models import FontMapEntry
from ..fonts.typemap import FontMapWriter
from .models import SvgDocument
from .transforms import infer_view_box, normalize_canvas, prepare_fonts

logger = logging.getLogger(__name__)

STEP_VIEW_BOX = "view_box"
STEP_FONT_FACES = "font_faces"
STEP_CANVAS = "canvas"


class DocumentNormalizer:
    """
    Makes an SVG document's dimensions and font declarations deterministic.

    A step that raises is logged and skipped, and the next step works on
    the document as it was before the failure. With ``strict`` enabled the
    first failure raises NormalizationError instead.
    """

    def __init__(
        self,
        config: NormalizerConfig | None = None,
        fonts_config: FontsConfig | None = None,
        map_writer: FontMapWriter | None = None,
    ):
        self.config = config or NormalizerConfig()
        self.fonts_config = fonts_config or FontsConfig()
        self.map_writer = map_writer or FontMapWriter(self.fonts_config.mapping_filename)

    @property
    def fonts_dir(self) -> Path:
        return Path(self.fonts_config.fonts_dir)

    def load_mappings(self) -> list[FontMapEntry]:
        return self.map_writer.load_entries(self.fonts_dir)

    def steps(
        self, entries: list[FontMapEntry]
    ) -> list[tuple[str, Callable[[SvgDocument], SvgDocument]]]:
        return [
            (STEP_VIEW_BOX, infer_view_box),
            (
                STEP_FONT_FACES,
                lambda doc: prepare_fonts(
                    doc, entries, self.fonts_dir, enhance_text=self.config.enhance_text
                ),
            ),
            (
                STEP_CANVAS,
                lambda doc: normalize_canvas(
                    doc,
                    self.config.target_size,
                    self.config.default_width,
                    self.config.default_height,
                ),
            ),
        ]

    def normalize(
        self,
        document: SvgDocument | str,
        entries: list[FontMapEntry] | None = None,
    ) -> tuple[SvgDocument, NormalizationReport]:
        """
        Normalize a document.

        Args:
            document: SvgDocument or raw SVG text
            entries: Typemap rows; read from the font directory when omitted

        Returns:
            The normalized document and a per-step report

        Raises:
            NormalizationError: If a step fails and ``strict`` is enabled
        """
        if isinstance(document, str):
            document = SvgDocument(document)
        if entries is None:
            entries = self.load_mappings()

        report = NormalizationReport()
        for name, step in self.steps(entries):
            try:
                result = step(document)
            except Exception as e:
                logger.error(f"Error in normalization step {name}: {e}")
                if self.config.strict:
                    raise NormalizationError(name, str(e)) from e
                report.steps.append(StepResult(name=name, status=StepStatus.FAILED, error=str(e)))
                continue

            status = StepStatus.APPLIED if result.text != document.text else StepStatus.UNCHANGED
            report.steps.append(StepResult(name=name, status=status))
            document = result

        return document, report

    def normalize_file(
        self, svg_path: str | Path, output_path: str | Path | None = None
    ) -> NormalizationReport:
        """
        Normalize an SVG file, in place unless ``output_path`` is given.

        Raises:
            DocumentNotFoundError: If ``svg_path`` does not exist
            DocumentReadError: If ``svg_path`` is not readable UTF-8 text
        """
        svg_path = Path(svg_path)
        if not svg_path.exists():
            raise DocumentNotFoundError(str(svg_path))

        logger.info(f"Preprocessing SVG: {svg_path}")
        try:
            document = SvgDocument(svg_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(str(svg_path), str(e)) from e
        normalized, report = self.normalize(document)

        target = Path(output_path) if output_path else svg_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(normalized.text, encoding="utf-8")
        logger.info(f"Wrote normalized SVG to {target}")
        return report
