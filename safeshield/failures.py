"""Canonical results for analyses that could not be completed."""

from __future__ import annotations

from enum import Enum

from .constants import CommonSharedStatus, Severity
from .models import AnalysisResult


class ErrorType(str, Enum):
    RECIPIENT = "RECIPIENT"
    CONTRACT = "CONTRACT"
    THREAT = "THREAT"


_ERROR_TITLES = {
    ErrorType.RECIPIENT: "Recipient analysis failed",
    ErrorType.CONTRACT: "Contract analysis failed",
    ErrorType.THREAT: "Threat analysis failed",
}


def get_error_info(error_type: ErrorType, error: str | None = None) -> AnalysisResult:
    """Return the WARN/FAILED result shown when an analysis source fails."""
    title = _ERROR_TITLES[ErrorType(error_type)]
    return AnalysisResult(
        severity=Severity.WARN,
        type=CommonSharedStatus.FAILED,
        title=title,
        description=f"{title}. Review before processing.",
        error=error,
    )
