"""Result data models."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .constants import (
    ContractStatus,
    SafeStatus,
    Severity,
    ThreatStatus,
    parse_status,
)

logger = logging.getLogger(__name__)


@dataclass
class AddressInfo:
    """An address implicated by a result, with optional display details."""

    address: str
    name: Optional[str] = None
    logo_url: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"address": self.address}
        if self.name is not None:
            data["name"] = self.name
        if self.logo_url is not None:
            data["logoUrl"] = self.logo_url
        return data

    @classmethod
    def from_value(cls, value) -> "AddressInfo":
        if isinstance(value, AddressInfo):
            return value
        if isinstance(value, str):
            return cls(address=value)
        if isinstance(value, dict) and isinstance(value.get("address"), str):
            return cls(
                address=value["address"],
                name=value.get("name"),
                logo_url=value.get("logoUrl", value.get("logo_url")),
            )
        raise ValueError(f"Not an address entry: {value!r}")


@dataclass
class FallbackHandlerDetails:
    """Fallback handler flagged by an UNOFFICIAL_FALLBACK_HANDLER result."""

    address: str
    name: Optional[str] = None
    logo_url: Optional[str] = None

    def to_address_info(self) -> AddressInfo:
        return AddressInfo(address=self.address, name=self.name, logo_url=self.logo_url)

    def to_dict(self) -> dict:
        return self.to_address_info().to_dict()


@dataclass
class ThreatIssue:
    description: str
    address: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"description": self.description}
        if self.address is not None:
            data["address"] = self.address
        return data


@dataclass
class AnalysisResult:
    """
    One finding from one check.

    The `type` field is the discriminant for the two extended variants:
    - MASTERCOPY_CHANGE carries `before`/`after` implementation addresses
    - MALICIOUS / MODERATE may carry `issues` grouped by severity
    UNOFFICIAL_FALLBACK_HANDLER may additionally carry `fallback_handler`.
    Variant fields on any other type are rejected at construction.
    """

    severity: Severity
    type: Enum
    title: str
    description: str
    addresses: Optional[list[AddressInfo]] = None
    error: Optional[str] = None

    before: Optional[str] = None
    after: Optional[str] = None
    issues: Optional[dict[Severity, list[ThreatIssue]]] = None
    fallback_handler: Optional[FallbackHandlerDetails] = None

    def __post_init__(self):
        severity = Severity.from_string(self.severity) if not isinstance(self.severity, Severity) else self.severity
        if severity is None:
            raise ValueError(f"Invalid severity: {self.severity!r}")
        self.severity = severity

        status = parse_status(self.type)
        if status is None:
            raise ValueError(f"Invalid result type: {self.type!r}")
        self.type = status

        if status == ThreatStatus.MASTERCOPY_CHANGE:
            if not self.before or not self.after:
                raise ValueError("MASTERCOPY_CHANGE results require before and after addresses")
        elif self.before is not None or self.after is not None:
            raise ValueError(f"{status.value} results cannot carry before/after addresses")

        if self.issues is not None and status not in (ThreatStatus.MALICIOUS, ThreatStatus.MODERATE):
            raise ValueError(f"{status.value} results cannot carry issues")

        if self.fallback_handler is not None and status != ContractStatus.UNOFFICIAL_FALLBACK_HANDLER:
            raise ValueError(f"{status.value} results cannot carry a fallback handler")

    def replace(self, **changes) -> "AnalysisResult":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "severity": self.severity.value,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
        }
        if self.addresses is not None:
            data["addresses"] = [a.to_dict() for a in self.addresses]
        if self.error is not None:
            data["error"] = self.error
        if self.before is not None:
            data["before"] = self.before
            data["after"] = self.after
        if self.issues is not None:
            data["issues"] = {
                sev.value: [issue.to_dict() for issue in items] for sev, items in self.issues.items()
            }
        if self.fallback_handler is not None:
            data["fallbackHandler"] = self.fallback_handler.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        """Build a result from its JSON shape. Raises ValueError if malformed."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping, got {type(data).__name__}")

        title = data.get("title")
        description = data.get("description")
        if not isinstance(title, str) or not isinstance(description, str):
            raise ValueError("title and description must be strings")

        addresses = None
        if data.get("addresses") is not None:
            raw_addresses = data["addresses"]
            if not isinstance(raw_addresses, list):
                raise ValueError("addresses must be a list")
            addresses = [AddressInfo.from_value(entry) for entry in raw_addresses]

        issues = None
        if data.get("issues") is not None:
            raw_issues = data["issues"]
            if not isinstance(raw_issues, dict):
                raise ValueError("issues must be a mapping")
            issues = {}
            for raw_severity, items in raw_issues.items():
                severity = Severity.from_string(raw_severity)
                if severity is None or not isinstance(items, list):
                    continue
                issues[severity] = [
                    ThreatIssue(description=str(item.get("description", "")), address=item.get("address"))
                    for item in items
                    if isinstance(item, dict)
                ]

        fallback_handler = None
        raw_handler = data.get("fallbackHandler", data.get("fallback_handler"))
        if isinstance(raw_handler, dict) and isinstance(raw_handler.get("address"), str):
            fallback_handler = FallbackHandlerDetails(
                address=raw_handler["address"],
                name=raw_handler.get("name"),
                logo_url=raw_handler.get("logoUrl", raw_handler.get("logo_url")),
            )

        return cls(
            severity=data.get("severity"),
            type=data.get("type"),
            title=title,
            description=description,
            addresses=addresses,
            error=data.get("error"),
            before=data.get("before"),
            after=data.get("after"),
            issues=issues,
            fallback_handler=fallback_handler,
        )


def coerce_result(value) -> Optional[AnalysisResult]:
    """Return an AnalysisResult for a result-shaped value, or None if malformed."""
    if isinstance(value, AnalysisResult):
        return value
    if not isinstance(value, dict):
        return None
    try:
        return AnalysisResult.from_dict(value)
    except (ValueError, TypeError) as e:
        logger.debug(f"Skipping malformed analysis result: {e}")
        return None


def is_threat_analysis_result(value) -> bool:
    """Structural check used to tell threat results apart from stray fields."""
    if isinstance(value, AnalysisResult):
        return True
    if not isinstance(value, dict):
        return False
    return (
        Severity.from_string(value.get("severity")) is not None
        and parse_status(value.get("type")) is not None
        and isinstance(value.get("title"), str)
        and isinstance(value.get("description"), str)
    )


@dataclass
class SafeAnalysisResult:
    """Safe-level finding (e.g. an untrusted Safe)."""

    severity: Severity
    type: SafeStatus
    title: str
    description: str


@dataclass
class OverallStatus:
    severity: Severity
    title: str

    def to_dict(self) -> dict:
        return {"severity": self.severity.value, "title": self.title}


@dataclass
class BalanceAsset:
    type: str  # NATIVE | ERC20
    symbol: Optional[str] = None
    address: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type, "symbol": self.symbol}
        if self.address is not None:
            data["address"] = self.address
        return data


@dataclass
class BalanceChange:
    """Incoming and outgoing raw amounts for one asset."""

    asset: BalanceAsset
    incoming: list[str] = field(default_factory=list)
    outgoing: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.incoming and not self.outgoing

    def to_dict(self) -> dict:
        return {
            "asset": self.asset.to_dict(),
            "in": [{"value": value} for value in self.incoming],
            "out": [{"value": value} for value in self.outgoing],
        }


@dataclass
class SafeTransaction:
    """
    A Safe transaction awaiting signatures.

    `data` holds the SafeTx fields (to, value, data, operation, safeTxGas,
    baseGas, gasPrice, gasToken, refundReceiver, nonce).
    """

    data: dict
    signatures: dict = field(default_factory=dict)

    def without_nonce(self) -> dict:
        return {key: value for key, value in self.data.items() if key != "nonce"}


def is_safe_transaction(value) -> bool:
    return isinstance(value, SafeTransaction) and isinstance(value.data, dict)


@dataclass
class SimilarityGroup:
    bucket_key: str
    addresses: list[str] = field(default_factory=list)


# (value, error, loading)
AsyncResult = tuple[Optional[Any], Optional[BaseException], bool]
