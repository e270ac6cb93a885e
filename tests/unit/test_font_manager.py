"""Tests for Font Management System
================================

Unit tests for report aggregation, status callbacks and the renderer
environment.
"""

from unittest.mock import Mock

import pytest

from svgfit.core.config import FontsConfig
from svgfit.core.models import FailureKind, FontReport, ResolutionResult
from svgfit.fonts import FontManager, FontProgressCallback, RemoteFontResolver


@pytest.fixture
def resolver():
    """Resolver double answering per family."""
    outcomes = {
        "Roboto": lambda d: ResolutionResult.downloaded("Roboto", str(d / "Roboto-Regular.ttf")),
        "Arial": lambda d: ResolutionResult.skipped("Arial", "Arial is a system font"),
        "Nope": lambda d: ResolutionResult.failed(
            "Nope", "not in catalog", FailureKind.CATALOG_MISS
        ),
    }
    mock = Mock(spec=RemoteFontResolver)
    mock.resolve.side_effect = lambda name, fonts_dir: outcomes[name](fonts_dir)
    return mock


class TestFontReport:
    """Test FontReport aggregation."""

    def test_empty_report(self):
        report = FontReport()

        assert report.all_available
        assert report.summary() == "No custom fonts detected - using system defaults"

    def test_partial_availability(self):
        report = FontReport(
            detected=["Lato", "Roboto", "Arial"],
            found_locally=["Lato"],
            downloaded=["Roboto"],
            skipped=["Arial"],
            failed=["Arial"],
        )

        assert report.available_count == 2
        assert not report.all_available
        assert report.summary() == "2/3 fonts available - 1 will use fallbacks"
        assert report.to_dict()["skipped"] == ["Arial"]


class TestFontManager:
    """Test FontManager orchestration."""

    def test_no_fonts(self, fonts_config, write_svg, resolver):
        svg = write_svg('<svg width="10" height="10"><rect/></svg>')
        messages = []

        report = FontManager(fonts_config, resolver=resolver).ensure_fonts_available(
            svg, messages.append
        )

        assert report.detected == []
        assert report.all_available
        assert "No custom fonts detected - using system defaults" in messages
        resolver.resolve.assert_not_called()

    def test_local_font_is_not_resolved(self, fonts_config, write_svg, font_files, resolver):
        font_files("OpenSans-Regular.ttf")
        svg = write_svg('<svg><text font-family="Open Sans">a</text></svg>')

        report = FontManager(fonts_config, resolver=resolver).ensure_fonts_available(svg)

        assert report.found_locally == ["Open Sans"]
        assert report.all_available
        resolver.resolve.assert_not_called()

    def test_mixed_outcomes(self, fonts_config, fonts_dir, write_svg, font_files, resolver):
        font_files("Lato-Regular.ttf")
        svg = write_svg(
            "<svg>"
            '<text font-family="Lato">a</text>'
            '<text font-family="Roboto">b</text>'
            '<text font-family="Arial">c</text>'
            '<text font-family="Nope">d</text>'
            "</svg>"
        )

        report = FontManager(fonts_config, resolver=resolver).ensure_fonts_available(svg)

        assert report.detected == ["Lato", "Roboto", "Arial", "Nope"]
        assert report.found_locally == ["Lato"]
        assert report.downloaded == ["Roboto"]
        assert report.skipped == ["Arial"]
        assert report.failed == ["Arial", "Nope"]
        assert report.errors == ['Download failed for "Nope": not in catalog']
        assert len(report.results) == 3
        assert report.available_count + len(report.failed) == len(report.detected)
        resolver.resolve.assert_any_call("Roboto", fonts_dir)

    def test_unreadable_document_is_recorded(self, fonts_config, tmp_path, resolver):
        report = FontManager(fonts_config, resolver=resolver).ensure_fonts_available(
            tmp_path / "missing.svg"
        )

        assert report.detected == []
        assert len(report.errors) == 1
        assert report.errors[0].startswith("Error ensuring fonts available")

    def test_download_failure_is_reported_not_raised(self, tmp_path, roboto_session):
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")
        config = FontsConfig(fonts_dir=blocked, api_key="test-key")
        resolver = RemoteFontResolver(config, session=roboto_session)

        report = FontManager(config, resolver=resolver).ensure_fonts_for_text(
            '<svg><text font-family="Roboto">x</text></svg>'
        )

        assert report.failed == ["Roboto"]
        assert report.results[0].error_kind == FailureKind.TRANSPORT

    def test_callback_object(self, fonts_config, resolver):
        callback = Mock(spec=FontProgressCallback)

        report = FontManager(fonts_config, resolver=resolver).ensure_fonts_for_text(
            '<text font-family="Roboto">a</text>', callback
        )

        callback.on_font_resolved.assert_called_once_with(report.results[0])
        callback.on_complete.assert_called_once_with(report)
        assert callback.on_status.call_count >= 3

    def test_renderer_environment(self, fonts_config, fonts_dir):
        manager = FontManager(fonts_config)

        env = manager.renderer_environment({"XDG_DATA_DIRS": "/usr/share", "HOME": "/root"})

        fonts_path = str(fonts_dir.resolve())
        assert env["XDG_DATA_DIRS"] == f"{fonts_path}:/usr/share"
        assert env["FONTCONFIG_PATH"] == fonts_path
        assert env["MAGICK_TYPEMAP"] == str((fonts_dir / "type.xml").resolve())
        assert env["HOME"] == "/root"

    def test_renderer_environment_defaults_to_os_environ(self, fonts_config, monkeypatch):
        monkeypatch.setenv("SVGFIT_TEST_MARKER", "1")

        env = FontManager(fonts_config).renderer_environment()

        assert env["SVGFIT_TEST_MARKER"] == "1"
        assert "MAGICK_TYPEMAP" in env
