"""Custom exceptions for the svgfit font and document pipeline."""

from typing import Any


class SvgfitError(Exception):
    """Base exception for all svgfit errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ValidationError(SvgfitError):
    """Exception raised for input validation errors."""


class ConfigurationError(SvgfitError):
    """Exception raised for configuration errors."""


class FontResolutionError(SvgfitError):
    """Exception raised while resolving a font from the remote catalog."""


class FontMapError(SvgfitError):
    """Exception raised for mapping file read, parse or write errors."""


class DocumentError(SvgfitError):
    """Exception raised for document loading or rewriting errors."""


# Specific exception classes for TRY003 compliance
class MissingApiKeyError(ConfigurationError):
    """Exception raised when no catalog API key is configured."""

    def __init__(self):
        super().__init__(
            "Google Fonts API key not configured - set GOOGLE_FONTS_API_KEY environment variable"
        )


class CatalogError(FontResolutionError):
    """Exception raised when the catalog response is unusable."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid response from Google Fonts API: {reason}")


class CatalogRequestError(FontResolutionError):
    """Exception raised when the catalog query fails in transport."""

    def __init__(self, error: str):
        super().__init__(f"Google Fonts API request failed: {error}")


class FontNotInCatalogError(FontResolutionError):
    """Exception raised when the catalog has no matching family."""

    def __init__(self, family: str):
        super().__init__(
            f'Font "{family}" not found in Google Fonts catalog - '
            "check spelling or try a different font"
        )


class NoRegularVariantError(FontResolutionError):
    """Exception raised when a catalog record exposes no regular variant."""

    def __init__(self, family: str):
        super().__init__(f"No files information available for {family}")


class TrueTypeUnavailableError(FontResolutionError):
    """Exception raised when the derived TTF URL does not exist."""

    def __init__(self, family: str):
        super().__init__(
            f'TTF format not available for "{family}" - '
            "Google Fonts may only provide WOFF/WOFF2 for this font"
        )


class FontDownloadError(FontResolutionError):
    """Exception raised when streaming a font binary fails."""

    def __init__(self, family: str, error: str):
        super().__init__(f"Error downloading TTF font {family}: {error}")


class InvalidTypemapError(FontMapError):
    """Exception raised when the mapping file is not a valid typemap."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Invalid type.xml format in {path}: {error}")


class DocumentNotFoundError(DocumentError):
    """Exception raised when the input document does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Input document not found: {path}")


class DocumentReadError(DocumentError):
    """Exception raised when the input document cannot be read as UTF-8 text."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Could not read document {path}: {error}")


class MissingRootElementError(DocumentError):
    """Exception raised when a document has no <svg> opening tag."""

    def __init__(self):
        super().__init__("Could not find SVG opening tag")


class NormalizationError(DocumentError):
    """Exception raised when a normalization step fails in strict mode."""

    def __init__(self, step: str, error: str):
        super().__init__(f"Normalization step '{step}' failed: {error}")


class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")


class InvalidEndpointUrlError(ValueError):
    """Exception raised for invalid endpoint URLs."""

    def __init__(self):
        super().__init__("Endpoint URL must start with https:// or http://")


class InvalidLogLevelError(ValueError):
    """Exception raised for unknown log level names."""

    def __init__(self, level: str):
        super().__init__(f"Unknown log level: {level}")
