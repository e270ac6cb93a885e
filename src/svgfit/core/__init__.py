"""Core components for the svgfit pipeline."""

from .config import AppConfig, FontsConfig, NormalizerConfig
from .exceptions import (
    ConfigurationError,
    DocumentError,
    FontMapError,
    FontResolutionError,
    NormalizationError,
    SvgfitError,
    ValidationError,
)
from .models import (
    FailureKind,
    FontReport,
    NormalizationReport,
    ResolutionResult,
    ResolutionStatus,
    StepResult,
    StepStatus,
)

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "DocumentError",
    "FailureKind",
    "FontMapError",
    "FontReport",
    "FontResolutionError",
    "FontsConfig",
    "NormalizationError",
    "NormalizationReport",
    "NormalizerConfig",
    "ResolutionResult",
    "ResolutionStatus",
    "StepResult",
    "StepStatus",
    "SvgfitError",
    "ValidationError",
]
