"""Configuration management for the svgfit font and document pipeline."""

import logging
from pathlib import Path

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    EmptyConfigFileError,
    InvalidEndpointUrlError,
    InvalidLogLevelError,
    InvalidYamlError,
)

GOOGLE_FONTS_API_URL = "https://www.googleapis.com/webfonts/v1/webfonts"

# Default output canvas in points (72 DPI, 1pt == 1px)
DEFAULT_TARGET_SIZE = 102.0
DEFAULT_DOCUMENT_SIZE = 151.1712


class FontsConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FONTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
    """Font directory and remote catalog configuration."""

    fonts_dir: Path = Field(Path("./fonts"), description="Local font directory")
    mapping_filename: str = Field("type.xml", description="Typemap file inside fonts_dir")

    # Catalog access
    api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("GOOGLE_FONTS_API_KEY", "FONTS_API_KEY", "api_key"),
        description="Google Fonts Web API key",
    )
    api_url: str = Field(GOOGLE_FONTS_API_URL, description="Catalog endpoint")
    user_agent: str = Field("svgfit/0.1.0", description="HTTP User-Agent header")

    # Transfer settings
    timeout_seconds: float = Field(30.0, gt=0.0, description="Per-request timeout")
    chunk_size: int = Field(8192, ge=1024, description="Download chunk size in bytes")
    show_progress: bool = Field(False, description="Show a progress bar while downloading")

    @field_validator("api_key")
    @classmethod
    def blank_key_is_missing(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v):
        """Validate endpoint URL format."""
        if not v.startswith(("https://", "http://")):
            raise InvalidEndpointUrlError()
        return v

    @property
    def mapping_path(self) -> Path:
        return self.fonts_dir / self.mapping_filename

    def __repr__(self) -> str:
        """Custom repr that masks the API key."""
        key = "***" if self.api_key else None
        return (
            f"FontsConfig(fonts_dir='{self.fonts_dir}', "
            f"mapping_filename='{self.mapping_filename}', "
            f"api_url='{self.api_url}', api_key={key!r})"
        )

    def to_safe_dict(self) -> dict:
        """Export configuration with the API key masked."""
        config_dict = self.model_dump()
        if config_dict.get("api_key"):
            config_dict["api_key"] = "***MASKED***"
        return config_dict


class NormalizerConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="NORMALIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Document normalization configuration."""

    target_size: float = Field(DEFAULT_TARGET_SIZE, gt=0.0, description="Output canvas in pt")
    default_width: float = Field(DEFAULT_DOCUMENT_SIZE, gt=0.0, description="Fallback width")
    default_height: float = Field(DEFAULT_DOCUMENT_SIZE, gt=0.0, description="Fallback height")
    strict: bool = Field(False, description="Raise on the first failed normalization step")
    enhance_text: bool = Field(True, description="Add rendering hints to text elements")


class AppConfig(BaseSettings):
    """Main application configuration that loads from multiple sources."""

    model_config = SettingsConfigDict(
        env_prefix="SVGFIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="Application log level")

    fonts: FontsConfig = Field(default_factory=FontsConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise InvalidLogLevelError(v)
        return level

    @classmethod
    def load_from_env(cls, env_file: str | Path | None = ".env") -> "AppConfig":
        """Load configuration from environment variables and .env file."""
        if env_file:
            env_file = Path(env_file)
            if env_file.exists():
                return cls(_env_file=env_file)
        return cls()


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e

    if config_data is None:
        raise EmptyConfigFileError(str(config_path))

    try:
        # YAML-based configs must not pick up values from a stray .env file
        class TempConfig(config_class):
            model_config = SettingsConfigDict(
                env_file=None,
                case_sensitive=False,
                extra="ignore",
                populate_by_name=True,
            )

        return TempConfig(**config_data)
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [FontsConfig, NormalizerConfig, AppConfig]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
