"""Remote analysis providers and response normalization."""

from .gateway import ThreatAnalysisGateway, parse_threat_analysis_response
from .hypernative_client import (
    HypernativeClient,
    build_assessment_request,
    build_batch_request,
    is_valid_tx_hash,
)
from .hypernative_mapping import map_balance_changes, map_hypernative_response

__all__ = [
    "HypernativeClient",
    "ThreatAnalysisGateway",
    "build_assessment_request",
    "build_batch_request",
    "is_valid_tx_hash",
    "map_balance_changes",
    "map_hypernative_response",
    "parse_threat_analysis_response",
]
