"""SafeShield: pre-signature transaction risk analysis."""

from .analysis import consolidate_analysis_results, get_overall_status, get_primary_result, sort_by_severity
from .constants import SEVERITY_TO_TITLE, Severity, StatusGroup
from .models import AnalysisResult, OverallStatus
from .similarity import detect_similar_addresses

__all__ = [
    "AnalysisResult",
    "OverallStatus",
    "SEVERITY_TO_TITLE",
    "Severity",
    "StatusGroup",
    "consolidate_analysis_results",
    "detect_similar_addresses",
    "get_overall_status",
    "get_primary_result",
    "sort_by_severity",
]

__version__ = "0.1.0"
