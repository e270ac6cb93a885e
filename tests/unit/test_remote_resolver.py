"""Tests for Remote Font Resolution
================================

Unit tests for the catalog lookup, TTF probe and download steps. All HTTP
traffic goes through mocked sessions.
"""

from unittest.mock import Mock

import pytest
import requests

from conftest import catalog, make_response
from svgfit.core.config import FontsConfig
from svgfit.core.exceptions import (
    CatalogError,
    CatalogRequestError,
    FontDownloadError,
    FontNotInCatalogError,
    MissingApiKeyError,
    NoRegularVariantError,
    TrueTypeUnavailableError,
)
from svgfit.core.models import FailureKind, ResolutionStatus
from svgfit.fonts.models import RemoteFontRecord
from svgfit.fonts.remote import (
    SYSTEM_FONTS,
    RemoteFontResolver,
    font_filename,
    is_system_font,
    truetype_candidate,
)
from svgfit.fonts.typemap import FontMapWriter


class TestHelpers:
    def test_truetype_candidate(self):
        assert truetype_candidate("https://x/Roboto.woff2") == "https://x/Roboto.ttf"
        assert truetype_candidate("https://x/Roboto.woff") == "https://x/Roboto.ttf"
        assert truetype_candidate("https://x/Roboto.ttf") == "https://x/Roboto.ttf"

    def test_font_filename(self):
        assert font_filename("Open Sans") == "OpenSans-Regular.ttf"

    def test_system_fonts(self):
        assert len(SYSTEM_FONTS) == 13
        assert is_system_font("Times New Roman")
        assert not is_system_font("Roboto")


class TestCatalog:
    """Catalog query and lookup."""

    def test_missing_api_key(self, fonts_dir, mock_session):
        resolver = RemoteFontResolver(
            FontsConfig(fonts_dir=fonts_dir, api_key=None), session=mock_session
        )

        with pytest.raises(MissingApiKeyError):
            resolver.fetch_catalog()
        mock_session.get.assert_not_called()

    def test_query_carries_key_and_timeout(self, fonts_config, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(json_data=catalog("Roboto"))
        resolver = RemoteFontResolver(fonts_config, session=mock_session)

        items = resolver.fetch_catalog()

        assert items[0]["family"] == "Roboto"
        mock_session.get.assert_called_once_with(
            fonts_config.api_url, params={"key": "test-key"}, timeout=5.0
        )

    def test_http_error(self, fonts_config, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(status_code=403)

        with pytest.raises(CatalogRequestError, match="HTTP error: 403"):
            RemoteFontResolver(fonts_config, session=mock_session).fetch_catalog()

    def test_transport_error(self, fonts_config, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(CatalogRequestError, match="boom"):
            RemoteFontResolver(fonts_config, session=mock_session).fetch_catalog()

    @pytest.mark.parametrize("body", [ValueError("no json"), {"kind": "x"}, ["Roboto"]])
    def test_invalid_body(self, fonts_config, mock_session, body):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(json_data=body)

        with pytest.raises(CatalogError):
            RemoteFontResolver(fonts_config, session=mock_session).fetch_catalog()

    def test_lookup_is_case_insensitive(self, fonts_config, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(json_data=catalog("Open Sans"))

        record = RemoteFontResolver(fonts_config, session=mock_session).lookup("open sans")

        assert record.family == "Open Sans"
        assert record.source_url.endswith(".woff2")
        assert record.truetype_url.endswith("opensans.ttf")

    def test_lookup_miss(self, fonts_config, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(json_data=catalog("Lato"))

        with pytest.raises(FontNotInCatalogError):
            RemoteFontResolver(fonts_config, session=mock_session).lookup("Roboto")

    def test_lookup_without_regular_variant(self, fonts_config, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(
            json_data={"items": [{"family": "Roboto", "files": {"700": "https://x/b.ttf"}}]}
        )

        with pytest.raises(NoRegularVariantError):
            RemoteFontResolver(fonts_config, session=mock_session).lookup("Roboto")


class TestProbeAndDownload:
    """TTF probe and streaming download."""

    @pytest.fixture
    def record(self):
        return RemoteFontRecord(
            family="Roboto",
            source_url="https://x/roboto.woff2",
            truetype_url="https://x/roboto.ttf",
        )

    def test_probe_not_found(self, fonts_config, mock_session, record):
        mock_session.head.side_effect = None
        mock_session.head.return_value = make_response(status_code=404)

        with pytest.raises(TrueTypeUnavailableError):
            RemoteFontResolver(fonts_config, session=mock_session).verify_truetype(record)
        mock_session.head.assert_called_once_with("https://x/roboto.ttf", timeout=5.0)

    def test_probe_transport_error(self, fonts_config, mock_session, record):
        mock_session.head.side_effect = requests.Timeout("slow")

        with pytest.raises(TrueTypeUnavailableError):
            RemoteFontResolver(fonts_config, session=mock_session).verify_truetype(record)

    def test_download_writes_file(self, fonts_config, fonts_dir, mock_session, record):
        mock_session.get.side_effect = None
        response = make_response(content=b"font-bytes", headers={"content-length": "10"})
        mock_session.get.return_value = response

        path = RemoteFontResolver(fonts_config, session=mock_session).download(
            record, "Roboto", fonts_dir
        )

        assert path == fonts_dir / "Roboto-Regular.ttf"
        assert path.read_bytes() == b"font-bytes"
        assert not (fonts_dir / "Roboto-Regular.ttf.part").exists()
        response.close.assert_called_once()

    def test_download_http_error(self, fonts_config, fonts_dir, mock_session, record):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(status_code=500)

        with pytest.raises(FontDownloadError, match="500"):
            RemoteFontResolver(fonts_config, session=mock_session).download(
                record, "Roboto", fonts_dir
            )
        assert list(fonts_dir.iterdir()) == []

    def test_download_interrupted_stream_removes_partial_file(
        self, fonts_config, fonts_dir, mock_session, record
    ):
        def chunks(chunk_size):
            yield b"partial"
            raise requests.ConnectionError("reset")

        response = make_response()
        response.iter_content.side_effect = chunks
        mock_session.get.side_effect = None
        mock_session.get.return_value = response

        with pytest.raises(FontDownloadError, match="reset"):
            RemoteFontResolver(fonts_config, session=mock_session).download(
                record, "Roboto", fonts_dir
            )
        assert list(fonts_dir.iterdir()) == []

    @pytest.mark.parametrize("length", ["abc", "-5", ""])
    def test_download_ignores_malformed_content_length(
        self, fonts_config, fonts_dir, mock_session, record, length
    ):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(
            content=b"font-bytes", headers={"content-length": length}
        )

        path = RemoteFontResolver(fonts_config, session=mock_session).download(
            record, "Roboto", fonts_dir
        )

        assert path.read_bytes() == b"font-bytes"

    def test_download_into_unusable_directory(self, fonts_config, tmp_path, mock_session, record):
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")

        with pytest.raises(FontDownloadError):
            RemoteFontResolver(fonts_config, session=mock_session).download(
                record, "Roboto", blocked
            )
        mock_session.get.assert_not_called()


class TestResolve:
    """End-to-end resolve outcomes."""

    def test_system_font_is_skipped_without_network(self, fonts_config, fonts_dir, mock_session):
        map_writer = Mock(spec=FontMapWriter)
        resolver = RemoteFontResolver(fonts_config, session=mock_session, map_writer=map_writer)

        result = resolver.resolve("Arial", fonts_dir)

        assert result.status == ResolutionStatus.SKIPPED
        assert "system font" in result.reason
        mock_session.get.assert_not_called()
        mock_session.head.assert_not_called()
        map_writer.register.assert_not_called()

    def test_missing_key_is_configuration_failure(self, fonts_dir, mock_session):
        resolver = RemoteFontResolver(
            FontsConfig(fonts_dir=fonts_dir, api_key=None), session=mock_session
        )

        result = resolver.resolve("Roboto", fonts_dir)

        assert result.status == ResolutionStatus.FAILED
        assert result.error_kind == FailureKind.CONFIGURATION
        assert "GOOGLE_FONTS_API_KEY" in result.reason

    def test_catalog_miss(self, fonts_config, fonts_dir, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(json_data=catalog("Lato"))

        result = RemoteFontResolver(fonts_config, session=mock_session).resolve(
            "Roboto", fonts_dir
        )

        assert result.status == ResolutionStatus.FAILED
        assert result.error_kind == FailureKind.CATALOG_MISS
        mock_session.head.assert_not_called()

    def test_truetype_unavailable(self, fonts_config, fonts_dir, mock_session):
        mock_session.get.side_effect = None
        mock_session.get.return_value = make_response(json_data=catalog("Roboto"))
        mock_session.head.side_effect = None
        mock_session.head.return_value = make_response(status_code=404)

        result = RemoteFontResolver(fonts_config, session=mock_session).resolve(
            "Roboto", fonts_dir
        )

        assert result.error_kind == FailureKind.FORMAT_UNAVAILABLE
        assert mock_session.get.call_count == 1
        assert list(fonts_dir.iterdir()) == []

    def test_catalog_transport_failure(self, fonts_config, fonts_dir, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("down")

        result = RemoteFontResolver(fonts_config, session=mock_session).resolve(
            "Roboto", fonts_dir
        )

        assert result.error_kind == FailureKind.TRANSPORT

    def test_download_registers_family(self, fonts_config, fonts_dir, roboto_session):
        resolver = RemoteFontResolver(fonts_config, session=roboto_session)

        result = resolver.resolve("Roboto", fonts_dir)

        assert result.status == ResolutionStatus.DOWNLOADED
        assert result.ok
        assert result.path == str(fonts_dir / "Roboto-Regular.ttf")
        names = {e.name for e in resolver.map_writer.load_entries(fonts_dir)}
        assert names == {"Roboto Regular", "Roboto"}

    def test_unusable_font_directory_is_transport_failure(
        self, fonts_config, tmp_path, roboto_session
    ):
        blocked = tmp_path / "blocked"
        blocked.write_text("not a directory")

        result = RemoteFontResolver(fonts_config, session=roboto_session).resolve(
            "Roboto", blocked
        )

        assert result.status == ResolutionStatus.FAILED
        assert result.error_kind == FailureKind.TRANSPORT

    def test_malformed_content_length_still_downloads(self, fonts_config, fonts_dir, mock_session):
        def get(url, **kwargs):
            if kwargs.get("stream"):
                return make_response(content=b"ttf", headers={"content-length": "abc"})
            return make_response(json_data=catalog("Roboto"))

        mock_session.get.side_effect = get
        mock_session.head.side_effect = None
        mock_session.head.return_value = make_response()

        result = RemoteFontResolver(fonts_config, session=mock_session).resolve(
            "Roboto", fonts_dir
        )

        assert result.status == ResolutionStatus.DOWNLOADED

    def test_session_user_agent(self, fonts_config):
        resolver = RemoteFontResolver(fonts_config)

        assert resolver.session.headers["User-Agent"] == fonts_config.user_agent
        resolver.close()
