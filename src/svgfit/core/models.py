"""Pydantic models for pipeline results and reports."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ResolutionStatus(Enum):
    """Outcome of a single remote font resolution."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailureKind(Enum):
    """Why a font resolution failed."""

    CONFIGURATION = "configuration"
    CATALOG = "catalog"
    CATALOG_MISS = "catalog_miss"
    FORMAT_UNAVAILABLE = "format_unavailable"
    TRANSPORT = "transport"


class ResolutionResult(BaseModel):
    """Result of resolving one font family against the remote catalog."""

    family: str = Field(..., min_length=1, description="Requested font family")
    status: ResolutionStatus
    path: str | None = Field(None, description="Downloaded font file")
    reason: str | None = Field(None, description="Human readable explanation")
    error_kind: FailureKind | None = Field(None, description="Failure category")

    @property
    def ok(self) -> bool:
        return self.status == ResolutionStatus.DOWNLOADED

    @classmethod
    def downloaded(cls, family: str, path: str) -> "ResolutionResult":
        return cls(family=family, status=ResolutionStatus.DOWNLOADED, path=path)

    @classmethod
    def skipped(cls, family: str, reason: str) -> "ResolutionResult":
        return cls(family=family, status=ResolutionStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, family: str, reason: str, kind: FailureKind) -> "ResolutionResult":
        return cls(family=family, status=ResolutionStatus.FAILED, reason=reason, error_kind=kind)


class FontReport(BaseModel):
    """Aggregate outcome of making every font of a document available."""

    detected: list[str] = Field(default_factory=list)
    found_locally: list[str] = Field(default_factory=list)
    downloaded: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    results: list[ResolutionResult] = Field(default_factory=list)

    @property
    def available_count(self) -> int:
        return len(self.found_locally) + len(self.downloaded)

    @property
    def all_available(self) -> bool:
        return self.available_count == len(self.detected)

    def summary(self) -> str:
        """One line summary for logs and status callbacks."""
        total = len(self.detected)
        if total == 0:
            return "No custom fonts detected - using system defaults"
        if self.all_available:
            return f"All {total} font(s) are available for conversion"
        return (
            f"{self.available_count}/{total} fonts available - "
            f"{len(self.failed)} will use fallbacks"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "detected": self.detected,
            "found_locally": self.found_locally,
            "downloaded": self.downloaded,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": self.errors,
        }


class StepStatus(Enum):
    """Outcome of a single normalization step."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class StepResult(BaseModel):
    """Result of one document transform."""

    name: str = Field(..., min_length=1)
    status: StepStatus
    error: str | None = None


class NormalizationReport(BaseModel):
    """Per-step outcome of a document normalization run."""

    steps: list[StepResult] = Field(default_factory=list)

    @property
    def failed_steps(self) -> list[str]:
        return [step.name for step in self.steps if step.status == StepStatus.FAILED]

    @property
    def success(self) -> bool:
        return not self.failed_steps

    def status_of(self, name: str) -> StepStatus | None:
        for step in self.steps:
            if step.name == name:
                return step.status
        return None
