"""
Pytest configuration and fixtures for svgfit tests.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from svgfit.core.config import FontsConfig, NormalizerConfig

SAMPLE_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" width="200" height="100">
  <rect x="0" y="0" width="200" height="100" stroke-width="3" fill="#eee"/>
  <text x="10" y="50" font-family="Roboto, sans-serif">Hello</text>
</svg>
"""

SYSTEM_FONT_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="300" height="150">
  <text x="10" y="50" style="font-family: Arial; font-size: 12px">Plain</text>
</svg>
"""

PLAIN_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <circle cx="50" cy="50" r="40"/>
</svg>
"""


def make_response(status_code=200, json_data=None, content=b"", headers=None):
    """Build a mocked requests.Response."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.headers = headers or {}
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    response.iter_content.return_value = [content] if content else []
    return response


def catalog(*families, regular_url="https://fonts.gstatic.com/s/{name}/v1/{name}.woff2"):
    """Catalog body listing ``families`` with a regular WOFF2 variant each."""
    return {
        "items": [
            {
                "family": family,
                "files": {"regular": regular_url.format(name=family.replace(" ", "").lower())},
            }
            for family in families
        ]
    }


@pytest.fixture
def fonts_dir(tmp_path):
    """Empty font directory."""
    path = tmp_path / "fonts"
    path.mkdir()
    return path


@pytest.fixture
def fonts_config(fonts_dir):
    """Fonts configuration pointing at the temporary font directory."""
    return FontsConfig(fonts_dir=fonts_dir, api_key="test-key", timeout_seconds=5.0)


@pytest.fixture
def normalizer_config():
    """Normalizer configuration with the default target canvas."""
    return NormalizerConfig()


@pytest.fixture
def mock_session():
    """HTTP session that fails loudly unless a test configures it."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = AssertionError("unexpected GET")
    session.head.side_effect = AssertionError("unexpected HEAD")
    return session


@pytest.fixture
def roboto_session(mock_session):
    """Session serving a catalog with Roboto, a working TTF probe and a font body."""

    def get(url, **kwargs):
        if kwargs.get("stream"):
            return make_response(content=b"\x00\x01\x00\x00ttf-bytes")
        return make_response(json_data=catalog("Roboto", "Open Sans"))

    mock_session.get.side_effect = get
    mock_session.head.side_effect = None
    mock_session.head.return_value = make_response()
    return mock_session


@pytest.fixture
def write_svg(tmp_path):
    """Write SVG text to a file in tmp_path and return the path."""

    def _write(text: str, name: str = "input.svg") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def font_files(fonts_dir):
    """Create empty true-type files in the font directory."""

    def _create(*names: str) -> list[Path]:
        paths = []
        for name in names:
            path = fonts_dir / name
            path.write_bytes(b"\x00\x01\x00\x00")
            paths.append(path)
        return paths

    return _create
