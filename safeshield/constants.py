"""Centralized taxonomy for SafeShield.

This module contains the severity scale, the status groups and the closed set
of result types each group admits. Everything above it (aggregation,
consolidation, provider mapping) reduces to comparisons on these values.
"""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Severity of a single analysis result."""

    OK = "OK"  # No issues detected
    INFO = "INFO"  # Informational notice
    WARN = "WARN"  # Potential risk requiring attention
    CRITICAL = "CRITICAL"  # High-risk situation requiring immediate review
    ERROR = "ERROR"  # Error occurred while fetching analysis

    @classmethod
    def from_string(cls, value: str | None) -> "Severity | None":
        """Convert a raw severity string to the enum, or None if unknown."""
        if not value:
            return None
        try:
            return cls(str(value).upper())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


# Lower rank wins. WARN and ERROR share a rank.
SEVERITY_RANK: dict[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.WARN: 1,
    Severity.ERROR: 1,
    Severity.INFO: 2,
    Severity.OK: 3,
}

# Widget title for each severity
SEVERITY_TO_TITLE: dict[Severity, str] = {
    Severity.CRITICAL: "Risk detected",
    Severity.WARN: "Issues found",
    Severity.INFO: "Review details",
    Severity.OK: "Checks passed",
    Severity.ERROR: "Checks unavailable",
}


class StatusGroup(str, Enum):
    """What kind of check produced a result."""

    COMMON = "COMMON"
    ADDRESS_BOOK = "ADDRESS_BOOK"
    RECIPIENT_ACTIVITY = "RECIPIENT_ACTIVITY"
    RECIPIENT_INTERACTION = "RECIPIENT_INTERACTION"
    BRIDGE = "BRIDGE"
    CONTRACT_VERIFICATION = "CONTRACT_VERIFICATION"
    CONTRACT_INTERACTION = "CONTRACT_INTERACTION"
    DELEGATECALL = "DELEGATECALL"
    FALLBACK_HANDLER = "FALLBACK_HANDLER"
    THREAT = "THREAT"
    CUSTOM_CHECKS = "CUSTOM_CHECKS"


class RecipientStatus(str, Enum):
    KNOWN_RECIPIENT = "KNOWN_RECIPIENT"
    UNKNOWN_RECIPIENT = "UNKNOWN_RECIPIENT"
    LOW_ACTIVITY = "LOW_ACTIVITY"
    NEW_RECIPIENT = "NEW_RECIPIENT"
    RECURRING_RECIPIENT = "RECURRING_RECIPIENT"


class BridgeStatus(str, Enum):
    INCOMPATIBLE_SAFE = "INCOMPATIBLE_SAFE"
    MISSING_OWNERSHIP = "MISSING_OWNERSHIP"
    UNSUPPORTED_NETWORK = "UNSUPPORTED_NETWORK"
    DIFFERENT_SAFE_SETUP = "DIFFERENT_SAFE_SETUP"


class ContractStatus(str, Enum):
    VERIFIED = "VERIFIED"
    NOT_VERIFIED = "NOT_VERIFIED"
    NOT_VERIFIED_BY_SAFE = "NOT_VERIFIED_BY_SAFE"
    VERIFICATION_UNAVAILABLE = "VERIFICATION_UNAVAILABLE"
    NEW_CONTRACT = "NEW_CONTRACT"
    KNOWN_CONTRACT = "KNOWN_CONTRACT"
    UNEXPECTED_DELEGATECALL = "UNEXPECTED_DELEGATECALL"
    UNOFFICIAL_FALLBACK_HANDLER = "UNOFFICIAL_FALLBACK_HANDLER"


class ThreatStatus(str, Enum):
    MALICIOUS = "MALICIOUS"
    MODERATE = "MODERATE"
    NO_THREAT = "NO_THREAT"
    CUSTOM_CHECKS_FAILED = "CUSTOM_CHECKS_FAILED"
    MASTERCOPY_CHANGE = "MASTERCOPY_CHANGE"
    OWNERSHIP_CHANGE = "OWNERSHIP_CHANGE"
    MODULE_CHANGE = "MODULE_CHANGE"
    HYPERNATIVE_GUARD = "HYPERNATIVE_GUARD"  # Safes with the Hypernative guard installed


class CommonSharedStatus(str, Enum):
    FAILED = "FAILED"


class SafeStatus(str, Enum):
    """Safe-level status (distinct from transaction-level threats)."""

    UNTRUSTED = "UNTRUSTED"


STATUS_ENUMS = (RecipientStatus, BridgeStatus, ContractStatus, ThreatStatus, CommonSharedStatus)

# Allow-list of result types per status group
STATUS_GROUP_TYPES: dict[StatusGroup, frozenset] = {
    StatusGroup.COMMON: frozenset({CommonSharedStatus.FAILED}),
    StatusGroup.ADDRESS_BOOK: frozenset({
        RecipientStatus.KNOWN_RECIPIENT,
        RecipientStatus.UNKNOWN_RECIPIENT,
    }),
    StatusGroup.RECIPIENT_ACTIVITY: frozenset({
        RecipientStatus.LOW_ACTIVITY,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.RECIPIENT_INTERACTION: frozenset({
        RecipientStatus.NEW_RECIPIENT,
        RecipientStatus.RECURRING_RECIPIENT,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.BRIDGE: frozenset({
        BridgeStatus.INCOMPATIBLE_SAFE,
        BridgeStatus.MISSING_OWNERSHIP,
        BridgeStatus.UNSUPPORTED_NETWORK,
        BridgeStatus.DIFFERENT_SAFE_SETUP,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.CONTRACT_VERIFICATION: frozenset({
        ContractStatus.VERIFIED,
        ContractStatus.NOT_VERIFIED,
        ContractStatus.NOT_VERIFIED_BY_SAFE,
        ContractStatus.VERIFICATION_UNAVAILABLE,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.CONTRACT_INTERACTION: frozenset({
        ContractStatus.KNOWN_CONTRACT,
        ContractStatus.NEW_CONTRACT,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.DELEGATECALL: frozenset({
        ContractStatus.UNEXPECTED_DELEGATECALL,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.FALLBACK_HANDLER: frozenset({
        ContractStatus.UNOFFICIAL_FALLBACK_HANDLER,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.THREAT: frozenset({
        ThreatStatus.MALICIOUS,
        ThreatStatus.MODERATE,
        ThreatStatus.NO_THREAT,
        ThreatStatus.MASTERCOPY_CHANGE,
        ThreatStatus.OWNERSHIP_CHANGE,
        ThreatStatus.MODULE_CHANGE,
        ThreatStatus.HYPERNATIVE_GUARD,
        # Guard risks mapped to contract-level types still land under THREAT
        ContractStatus.UNOFFICIAL_FALLBACK_HANDLER,
        CommonSharedStatus.FAILED,
    }),
    StatusGroup.CUSTOM_CHECKS: frozenset({
        ThreatStatus.NO_THREAT,
        ThreatStatus.CUSTOM_CHECKS_FAILED,
        ThreatStatus.HYPERNATIVE_GUARD,
        ThreatStatus.OWNERSHIP_CHANGE,
        ThreatStatus.MODULE_CHANGE,
        ContractStatus.UNOFFICIAL_FALLBACK_HANDLER,
    }),
}

# Key under which the provider mapping stores balance deltas
BALANCE_CHANGE_KEY = "BALANCE_CHANGE"
REQUEST_ID_KEY = "request_id"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def parse_status(value) -> Enum | None:
    """Resolve a raw type string to the status enum member that owns it."""
    if isinstance(value, Enum):
        return value
    if not value:
        return None
    for enum_cls in STATUS_ENUMS:
        try:
            return enum_cls(str(value))
        except ValueError:
            continue
    return None


def parse_group(value) -> StatusGroup | None:
    if isinstance(value, StatusGroup):
        return value
    try:
        return StatusGroup(str(value))
    except ValueError:
        return None


def validate_group_type(group: StatusGroup, status) -> None:
    """Assert that a result type is admitted by its status group."""
    allowed = STATUS_GROUP_TYPES.get(group)
    if allowed is None:
        raise ValueError(f"Unknown status group: {group}")
    if status not in allowed:
        raise ValueError(f"{status} is not a valid result type for {group.value}")
