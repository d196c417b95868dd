"""Overall transaction verdict across every analysis source."""

from __future__ import annotations

import logging
from typing import Iterator, Mapping, Optional

from ..constants import SEVERITY_TO_TITLE, CommonSharedStatus, Severity, ThreatStatus
from ..models import AnalysisResult, OverallStatus, coerce_result, is_threat_analysis_result
from .primary import get_primary_result

logger = logging.getLogger(__name__)

SIMULATION_FAILED_DESCRIPTION = "Tenderly simulation failed"
AUTH_REQUIRED_TITLE = "Authentication required"
AUTH_REQUIRED_DESCRIPTION = "Hypernative Guardian is active. Please login to continue."


def _with_severity_title(result: AnalysisResult) -> AnalysisResult:
    return result.replace(title=SEVERITY_TO_TITLE[result.severity])


def iter_grouped_results(grouped: Optional[Mapping]) -> Iterator[AnalysisResult]:
    """Yield every result of an address -> group -> [results] map.

    Non-list group values (display names, logos, flags) are skipped.
    """
    if not grouped:
        return
    for address, address_results in grouped.items():
        if not isinstance(address_results, Mapping):
            logger.debug(f"Skipping non-mapping results for {address}")
            continue
        for group, group_results in address_results.items():
            if not isinstance(group_results, list):
                continue
            for raw in group_results:
                result = coerce_result(raw)
                if result is not None:
                    yield result


def iter_threat_results(threat_results: Optional[Mapping]) -> Iterator[AnalysisResult]:
    """Yield threat results, skipping anything not shaped like a result.

    Threat maps mix result lists with scalar fields such as a request id and
    with balance-change records, so each value is checked structurally.
    """
    if not threat_results:
        return
    for key, entry in threat_results.items():
        if isinstance(entry, Mapping):
            candidates = list(entry.values())
        elif isinstance(entry, list):
            candidates = list(entry)
        else:
            continue

        for candidate in candidates:
            nested = candidate if isinstance(candidate, list) else [candidate]
            for item in nested:
                if not is_threat_analysis_result(item):
                    continue
                result = coerce_result(item)
                if result is not None:
                    yield result


def get_overall_status(
    recipient_results: Optional[Mapping] = None,
    contract_results: Optional[Mapping] = None,
    threat_results: Optional[Mapping] = None,
    has_simulation_error: bool = False,
    auth_required: bool = False,
) -> Optional[OverallStatus]:
    """
    Compute a single severity and title across all analysis results.

    Contract, recipient and threat results are flattened and the most severe
    one wins; its title is replaced by the widget title for its severity. A
    failed simulation adds a WARN result and a pending guard login adds an
    INFO result, so login is overridden by any real finding.

    Returns None when no input is provided at all.
    """
    if not (recipient_results or contract_results or threat_results or has_simulation_error or auth_required):
        return None

    all_results: list[AnalysisResult] = []

    for grouped in (contract_results, recipient_results):
        all_results.extend(_with_severity_title(r) for r in iter_grouped_results(grouped))

    all_results.extend(_with_severity_title(r) for r in iter_threat_results(threat_results))

    if has_simulation_error:
        all_results.append(
            AnalysisResult(
                severity=Severity.WARN,
                type=CommonSharedStatus.FAILED,
                title=SEVERITY_TO_TITLE[Severity.WARN],
                description=SIMULATION_FAILED_DESCRIPTION,
            )
        )

    if auth_required:
        all_results.append(
            AnalysisResult(
                severity=Severity.INFO,
                type=ThreatStatus.HYPERNATIVE_GUARD,
                title=AUTH_REQUIRED_TITLE,
                description=AUTH_REQUIRED_DESCRIPTION,
            )
        )

    primary = get_primary_result(all_results)
    if primary is None:
        return None

    return OverallStatus(
        severity=primary.severity,
        title=primary.title or SEVERITY_TO_TITLE[primary.severity],
    )
