"""Aggregation of analysis results into verdicts and summaries."""

from .consolidation import consolidate_analysis_results
from .overall import get_overall_status
from .primary import get_primary_result, severity_rank, sort_by_severity

__all__ = [
    "consolidate_analysis_results",
    "get_overall_status",
    "get_primary_result",
    "severity_rank",
    "sort_by_severity",
]
