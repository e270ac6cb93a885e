"""
Remote Font Resolver
====================

Fetches fonts missing from the local directory from the Google Fonts catalog.

Only the true-type container is acceptable. The catalog usually lists a
WOFF/WOFF2 reference for the regular variant; the resolver rewrites its
extension to ``.ttf`` and confirms with a HEAD probe that the candidate
exists before downloading anything.
"""

import logging
import os
import re
from pathlib import Path

import requests
from tqdm import tqdm

from ..core.config import FontsConfig
from ..core.exceptions import (
    CatalogError,
    CatalogRequestError,
    FontDownloadError,
    FontNotInCatalogError,
    FontResolutionError,
    MissingApiKeyError,
    NoRegularVariantError,
    TrueTypeUnavailableError,
)
from ..core.models import FailureKind, ResolutionResult
from .models import RemoteFontRecord
from .typemap import FontMapWriter
from .utils import compact_family

logger = logging.getLogger(__name__)

# Fonts every renderer host is expected to provide; never fetched remotely
SYSTEM_FONTS = (
    "Arial",
    "Helvetica",
    "Times",
    "Times New Roman",
    "Courier",
    "Courier New",
    "Verdana",
    "Georgia",
    "Palatino",
    "Garamond",
    "Bookman",
    "Tahoma",
    "Trebuchet MS",
)

_WEB_FONT_EXTENSION = re.compile(r"\.woff2$|\.woff$")

_FAILURE_KINDS: dict[type, FailureKind] = {
    MissingApiKeyError: FailureKind.CONFIGURATION,
    FontNotInCatalogError: FailureKind.CATALOG_MISS,
    CatalogError: FailureKind.CATALOG,
    NoRegularVariantError: FailureKind.FORMAT_UNAVAILABLE,
    TrueTypeUnavailableError: FailureKind.FORMAT_UNAVAILABLE,
    CatalogRequestError: FailureKind.TRANSPORT,
    FontDownloadError: FailureKind.TRANSPORT,
}


def is_system_font(font_name: str) -> bool:
    return font_name in SYSTEM_FONTS


def truetype_candidate(url: str) -> str:
    """Rewrite a WOFF/WOFF2 URL to its TTF sibling. Other URLs are returned unchanged."""
    return _WEB_FONT_EXTENSION.sub(".ttf", url)


def font_filename(font_name: str) -> str:
    return f"{compact_family(font_name)}-Regular.ttf"


def content_length(headers) -> int:
    """Declared body size, or 0 when the header is missing or malformed."""
    try:
        return max(int(headers.get("content-length") or 0), 0)
    except (TypeError, ValueError):
        return 0


class DownloadProgress:
    """Progress tracker for font downloads."""

    def __init__(self, total_size: int, description: str, enabled: bool = True):
        self.downloaded = 0
        self.pbar = tqdm(
            total=total_size or None,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=description,
            disable=not enabled,
        )

    def update(self, chunk_size: int):
        self.downloaded += chunk_size
        self.pbar.update(chunk_size)

    def close(self):
        self.pbar.close()


class RemoteFontResolver:
    """
    Resolves a font family against the remote catalog and stores it locally.

    Each call queries the catalog once; nothing is cached between calls.
    Failures never raise out of ``resolve``: they come back as a FAILED
    ResolutionResult carrying the failure category and message.
    """

    def __init__(
        self,
        config: FontsConfig | None = None,
        session: requests.Session | None = None,
        map_writer: FontMapWriter | None = None,
    ):
        self.config = config or FontsConfig()
        self.session = session or self._create_session()
        self.map_writer = map_writer or FontMapWriter(self.config.mapping_filename)

    def _create_session(self) -> requests.Session:
        """Create HTTP session with appropriate configuration."""
        session = requests.Session()
        session.headers.update({"User-Agent": self.config.user_agent})
        return session

    def resolve(self, font_name: str, fonts_dir: str | Path) -> ResolutionResult:
        """
        Download ``font_name`` into ``fonts_dir`` and register it in the typemap.

        Args:
            font_name: Family name as referenced by the document
            fonts_dir: Target font directory

        Returns:
            DOWNLOADED with the file path, SKIPPED for system fonts, or
            FAILED with a reason
        """
        logger.info(f"Attempting to download font: {font_name}")

        if is_system_font(font_name):
            logger.info(f"{font_name} is a system font, skipping download.")
            return ResolutionResult.skipped(font_name, f"{font_name} is a system font")

        try:
            record = self.lookup(font_name)
            self.verify_truetype(record)
            path = self.download(record, font_name, Path(fonts_dir))
        except (MissingApiKeyError, FontResolutionError) as e:
            logger.error(f"Error downloading Google Font {font_name}: {e}")
            return ResolutionResult.failed(font_name, str(e), self._failure_kind(e))

        self.map_writer.register(font_name, fonts_dir)
        logger.info(f"Successfully downloaded TTF font: {font_name}")
        return ResolutionResult.downloaded(font_name, str(path))

    @staticmethod
    def _failure_kind(error: Exception) -> FailureKind:
        for error_type, kind in _FAILURE_KINDS.items():
            if isinstance(error, error_type):
                return kind
        return FailureKind.TRANSPORT

    def fetch_catalog(self) -> list[dict]:
        """
        Query the catalog and return its item list.

        Raises:
            MissingApiKeyError: If no API key is configured
            CatalogRequestError: On transport errors or non-200 responses
            CatalogError: If the body is not a JSON object with an items list
        """
        if not self.config.api_key:
            raise MissingApiKeyError()

        logger.info("Fetching font information from Google Fonts API")
        try:
            response = self.session.get(
                self.config.api_url,
                params={"key": self.config.api_key},
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise CatalogRequestError(str(e)) from e

        if response.status_code != 200:
            raise CatalogRequestError(f"HTTP error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError("body is not JSON") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise CatalogError("missing items list")
        return items

    def lookup(self, font_name: str) -> RemoteFontRecord:
        """Find ``font_name`` in the catalog (case-insensitive exact family match)."""
        wanted = font_name.lower()
        for item in self.fetch_catalog():
            if not isinstance(item, dict) or str(item.get("family", "")).lower() != wanted:
                continue

            logger.info(f'Found font "{font_name}" in Google Fonts API')
            files = item.get("files") or {}
            regular = files.get("regular") if isinstance(files, dict) else None
            if not regular:
                raise NoRegularVariantError(font_name)

            return RemoteFontRecord(
                family=item["family"],
                source_url=regular,
                truetype_url=truetype_candidate(regular),
            )

        raise FontNotInCatalogError(font_name)

    def verify_truetype(self, record: RemoteFontRecord) -> None:
        """
        Probe the derived TTF URL with a HEAD request.

        Raises:
            TrueTypeUnavailableError: Unless the probe answers HTTP 200
        """
        logger.info(f"Checking if TTF format is available: {record.truetype_url}")
        try:
            response = self.session.head(record.truetype_url, timeout=self.config.timeout_seconds)
        except requests.RequestException as e:
            raise TrueTypeUnavailableError(record.family) from e

        if response.status_code != 200:
            raise TrueTypeUnavailableError(record.family)
        logger.info(f"TTF format available for {record.family}")

    def download(self, record: RemoteFontRecord, font_name: str, fonts_dir: Path) -> Path:
        """
        Stream the TTF binary to ``<Name>-Regular.ttf`` inside ``fonts_dir``.

        The body is written to a ``.part`` file first and moved into place
        once complete; the partial file is removed on any error.

        Raises:
            FontDownloadError: On transport errors, non-200 responses or write errors
        """
        target_path = fonts_dir / font_filename(font_name)
        temp_path = target_path.with_name(target_path.name + ".part")
        try:
            fonts_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FontDownloadError(font_name, str(e)) from e

        logger.info(f"Downloading TTF font: {record.truetype_url}")
        try:
            response = self.session.get(
                record.truetype_url, stream=True, timeout=self.config.timeout_seconds
            )
        except requests.RequestException as e:
            raise FontDownloadError(font_name, str(e)) from e

        try:
            if response.status_code != 200:
                raise FontDownloadError(
                    font_name, f"Failed to download font: {response.status_code}"
                )

            total_size = content_length(response.headers)
            progress = DownloadProgress(
                total_size, f"Downloading {target_path.name}", enabled=self.config.show_progress
            )
            try:
                with temp_path.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=self.config.chunk_size):
                        if chunk:
                            f.write(chunk)
                            progress.update(len(chunk))
            finally:
                progress.close()

            os.replace(temp_path, target_path)
        except (requests.RequestException, OSError) as e:
            raise FontDownloadError(font_name, str(e)) from e
        finally:
            response.close()
            if temp_path.exists():
                temp_path.unlink()

        logger.info(f"Downloaded {target_path.name} ({progress.downloaded} bytes)")
        return target_path

    def close(self):
        """Cleanup resolver resources."""
        if hasattr(self, "session"):
            self.session.close()
