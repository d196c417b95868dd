"""Primary-result selection by severity."""

from __future__ import annotations

from typing import Iterable, Optional

from ..constants import SEVERITY_RANK, Severity
from ..models import AnalysisResult

# Unknown severities sort after OK
_UNRANKED = len(SEVERITY_RANK)


def severity_rank(severity: Severity | str | None) -> int:
    """Rank of a severity; lower is more severe."""
    if not isinstance(severity, Severity):
        severity = Severity.from_string(severity)
    if severity is None:
        return _UNRANKED
    return SEVERITY_RANK[severity]


def sort_by_severity(results: Iterable[AnalysisResult]) -> list[AnalysisResult]:
    """Most severe first. Ties keep their input order."""
    return sorted(results, key=lambda result: severity_rank(result.severity))


def get_primary_result(results: Iterable[AnalysisResult]) -> Optional[AnalysisResult]:
    """Return the first most-severe result, or None for no results."""
    primary = None
    best_rank = _UNRANKED + 1
    for result in results:
        rank = severity_rank(result.severity)
        if rank < best_rank:
            primary = result
            best_rank = rank
    return primary
