"""Lookup tables translating Hypernative vocabulary into SafeShield types."""

from __future__ import annotations

from ..constants import ContractStatus, Severity, ThreatStatus

RISK_SEVERITY_MAP: dict[str, Severity] = {
    "accept": Severity.OK,
    "warn": Severity.WARN,
    "deny": Severity.CRITICAL,
}

# Hypernative safeCheckId -> result type
RISK_TYPE_MAP: dict[str, object] = {
    "F-33095": ThreatStatus.MASTERCOPY_CHANGE,
    "F-33063": ThreatStatus.OWNERSHIP_CHANGE,
    "F-33053": ThreatStatus.OWNERSHIP_CHANGE,
    "F-33083": ThreatStatus.MODULE_CHANGE,
    "F-33084": ThreatStatus.MODULE_CHANGE,
    "F-33073": ThreatStatus.MODULE_CHANGE,
    "F-33042": ContractStatus.UNOFFICIAL_FALLBACK_HANDLER,
}

# Types a Hypernative risk may be mapped to
ALLOWED_RISK_TYPES = frozenset({
    ThreatStatus.MASTERCOPY_CHANGE,
    ThreatStatus.OWNERSHIP_CHANGE,
    ThreatStatus.MODULE_CHANGE,
    ContractStatus.UNOFFICIAL_FALLBACK_HANDLER,
    ThreatStatus.HYPERNATIVE_GUARD,
    ThreatStatus.NO_THREAT,
})

# Looked up by type first, then by severity
RISK_TITLE_MAP: dict[object, str] = {
    ThreatStatus.MASTERCOPY_CHANGE: "Mastercopy change",
    ThreatStatus.OWNERSHIP_CHANGE: "Ownership change",
    ThreatStatus.MODULE_CHANGE: "Modules change",
    ContractStatus.UNOFFICIAL_FALLBACK_HANDLER: "Unofficial fallback handler",
    Severity.CRITICAL: "Malicious threat detected",
    Severity.WARN: "Moderate threat detected",
    Severity.OK: "No threat detected",
}

RISK_DESCRIPTION_MAP: dict[object, str] = {
    ThreatStatus.MASTERCOPY_CHANGE: "Verify this change as it may overwrite account ownership.",
    ThreatStatus.OWNERSHIP_CHANGE: "Verify this change before proceeding as it will change the Safe's ownership.",
    ThreatStatus.MODULE_CHANGE: "Verify this change before proceeding as it will change Safe modules.",
    ContractStatus.UNOFFICIAL_FALLBACK_HANDLER: "Verify the fallback handler is trusted and secure before proceeding.",
}

FULL_REPORT_SUFFIX = "The full threat report is available in your Hypernative account."

ANALYSIS_FAILED_TITLE = "Hypernative analysis failed"
ANALYSIS_FAILED_DESCRIPTION = "The threat analysis failed."

NO_THREAT_TITLE = "No threats detected"
NO_THREAT_DESCRIPTION = "Threat analysis found no issues."
NO_CUSTOM_CHECKS_TITLE = "Custom checks"
NO_CUSTOM_CHECKS_DESCRIPTION = "Custom checks found no issues."

# Finding groups in an assessment
THREAT_ANALYSIS = "THREAT_ANALYSIS"
CUSTOM_CHECKS = "CUSTOM_CHECKS"

# Batch item statuses
STATUS_OK = "OK"
STATUS_NOT_FOUND = "NOT_FOUND"
STATUS_FAILED = "FAILED"
