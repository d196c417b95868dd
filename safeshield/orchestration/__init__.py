"""Stateful units that decide when to (re-)issue remote analyses."""

from .hypernative import HypernativeAssessmentTracker
from .hypernative_batch import HypernativeBatchTracker
from .origin import parse_origin
from .threat_analysis import ThreatAnalysisTracker, is_nonce_only_change
from .typed_data import generate_typed_data

__all__ = [
    "HypernativeAssessmentTracker",
    "HypernativeBatchTracker",
    "ThreatAnalysisTracker",
    "generate_typed_data",
    "is_nonce_only_change",
    "parse_origin",
]
