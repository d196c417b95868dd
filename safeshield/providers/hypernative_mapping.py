"""Normalize Hypernative assessments into SafeShield threat results."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..analysis.primary import sort_by_severity
from ..constants import BALANCE_CHANGE_KEY, ZERO_ADDRESS, Severity, StatusGroup, ThreatStatus
from ..models import AnalysisResult, BalanceAsset, BalanceChange
from .hypernative_types import (
    ANALYSIS_FAILED_DESCRIPTION,
    ANALYSIS_FAILED_TITLE,
    CUSTOM_CHECKS,
    FULL_REPORT_SUFFIX,
    NO_CUSTOM_CHECKS_DESCRIPTION,
    NO_CUSTOM_CHECKS_TITLE,
    NO_THREAT_DESCRIPTION,
    NO_THREAT_TITLE,
    RISK_DESCRIPTION_MAP,
    RISK_SEVERITY_MAP,
    RISK_TITLE_MAP,
    RISK_TYPE_MAP,
    THREAT_ANALYSIS,
)

logger = logging.getLogger(__name__)


def is_failed_response(response: Any) -> bool:
    """True for the provider's `{error, errorCode, success: false}` envelope."""
    return (
        isinstance(response, Mapping)
        and "error" in response
        and "assessmentData" not in response
        and not isinstance(response.get("error"), Mapping)
    )


def map_hypernative_response(
    response: Mapping,
    safe_address: str,
    risk_types: Optional[Mapping[str, object]] = None,
) -> dict:
    """
    Map a Hypernative assessment to threat results.

    Args:
        response: Either the assessment payload (`safeTxHash`, `status`,
            `assessmentData`) or a failure envelope.
        safe_address: The Safe whose balance changes are reported.
        risk_types: safeCheckId -> type table, defaults to RISK_TYPE_MAP.

    Returns:
        Dict keyed by StatusGroup.THREAT and StatusGroup.CUSTOM_CHECKS, plus
        BALANCE_CHANGE when the Safe has balance deltas.

    Raises:
        ValueError: If the response carries no assessment data at all.
    """
    if is_failed_response(response):
        return _failed_result(response.get("error"))

    if not isinstance(response, Mapping) or not isinstance(response.get("assessmentData"), Mapping):
        raise ValueError("Hypernative response has no assessment data")

    assessment = response["assessmentData"]
    findings = assessment.get("findings") or {}
    type_map = RISK_TYPE_MAP if risk_types is None else risk_types

    results: dict[Any, Any] = {
        StatusGroup.THREAT: _map_finding(
            findings.get(THREAT_ANALYSIS), type_map, NO_THREAT_TITLE, NO_THREAT_DESCRIPTION
        ),
        StatusGroup.CUSTOM_CHECKS: _map_finding(
            findings.get(CUSTOM_CHECKS), type_map, NO_CUSTOM_CHECKS_TITLE, NO_CUSTOM_CHECKS_DESCRIPTION
        ),
    }

    raw_balance_changes = assessment.get("balanceChanges")
    if raw_balance_changes:
        balance_changes = map_balance_changes(safe_address, raw_balance_changes)
        if balance_changes:
            results[BALANCE_CHANGE_KEY] = balance_changes

    return results


def _failed_result(error: Optional[str]) -> dict:
    # An empty error string is passed through as-is
    description = ANALYSIS_FAILED_DESCRIPTION if error is None else str(error)
    return {
        StatusGroup.THREAT: [
            AnalysisResult(
                severity=Severity.CRITICAL,
                type=ThreatStatus.HYPERNATIVE_GUARD,
                title=ANALYSIS_FAILED_TITLE,
                description=description,
            )
        ]
    }


def _map_finding(
    finding: Optional[Mapping],
    type_map: Mapping[str, object],
    empty_title: str,
    empty_description: str,
) -> list[AnalysisResult]:
    risks = finding.get("risks") if isinstance(finding, Mapping) else None
    if not risks:
        return [
            AnalysisResult(
                severity=Severity.OK,
                type=ThreatStatus.NO_THREAT,
                title=empty_title,
                description=empty_description,
            )
        ]

    results = []
    for risk in risks:
        if not isinstance(risk, Mapping):
            logger.debug(f"Skipping malformed Hypernative risk: {risk!r}")
            continue
        results.append(map_risk(risk, type_map))
    return sort_by_severity(results)


def map_risk(risk: Mapping, type_map: Mapping[str, object] = RISK_TYPE_MAP) -> AnalysisResult:
    """Map one Hypernative risk to a result."""
    mapped_type = type_map.get(risk.get("safeCheckId"), ThreatStatus.HYPERNATIVE_GUARD)
    # Mastercopy results need before/after addresses the provider does not send
    if mapped_type == ThreatStatus.MASTERCOPY_CHANGE:
        mapped_type = ThreatStatus.HYPERNATIVE_GUARD

    severity = RISK_SEVERITY_MAP.get(risk.get("severity"), Severity.INFO)

    risk_title = risk.get("title") or ""
    mapped_title = RISK_TITLE_MAP.get(mapped_type) or RISK_TITLE_MAP.get(severity)
    title = mapped_title or risk_title

    details = RISK_DESCRIPTION_MAP.get(mapped_type)
    if details is None:
        details = risk_title if mapped_title else (risk.get("details") or "")
    if details and not details.endswith("."):
        details = f"{details}."

    description = f"{details} {FULL_REPORT_SUFFIX}" if details else FULL_REPORT_SUFFIX

    return AnalysisResult(severity=severity, type=mapped_type, title=title, description=description)


def map_balance_changes(safe_address: str, balance_changes: Mapping) -> list[BalanceChange]:
    """
    Group the Safe's own balance deltas by token.

    Address keys and token addresses are compared lowercased. Native asset
    deltas carry no token address and are grouped under the zero address.
    """
    normalized = {
        str(address).lower(): changes for address, changes in balance_changes.items()
    }
    safe_changes = normalized.get(safe_address.lower()) or []

    by_token: dict[str, BalanceChange] = {}
    for change in safe_changes:
        if not isinstance(change, Mapping):
            logger.debug(f"Skipping malformed balance change: {change!r}")
            continue

        token_address = change.get("tokenAddress")
        key = (token_address or ZERO_ADDRESS).lower()

        entry = by_token.get(key)
        if entry is None:
            if token_address:
                asset = BalanceAsset(type="ERC20", symbol=change.get("tokenSymbol"), address=key)
            else:
                asset = BalanceAsset(type="NATIVE", symbol=change.get("tokenSymbol"))
            entry = by_token[key] = BalanceChange(asset=asset)

        amount = str(change.get("amount", ""))
        if change.get("changeType") == "receive":
            entry.incoming.append(amount)
        else:
            entry.outgoing.append(amount)

    return [entry for entry in by_token.values() if not entry.is_empty]
