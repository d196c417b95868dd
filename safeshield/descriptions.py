"""Pluralized descriptions for consolidated multi-address results.

Each formatter receives the number of matching addresses and the total number
of analyzed addresses. Types mapped to None keep the first result's own
description.
"""

from __future__ import annotations

from typing import Callable, Optional

from .constants import BridgeStatus, ContractStatus, RecipientStatus
from .utils.strings import capitalise, format_count, pluralise

DescriptionFormatter = Callable[[int, Optional[int]], str]


def _is_are(number: int) -> str:
    return "is" if number == 1 else "are"


def _has_have(number: int) -> str:
    return "has" if number == 1 else "have"


MULTI_RESULT_DESCRIPTION: dict[object, Optional[DescriptionFormatter]] = {
    RecipientStatus.KNOWN_RECIPIENT: lambda number, total=None: (
        f"{capitalise(format_count(number, 'address', total, 'addresses'))} {_is_are(number)} "
        "in your address book or a Safe you own."
    ),
    RecipientStatus.UNKNOWN_RECIPIENT: lambda number, total=None: (
        f"{capitalise(format_count(number, 'address', total, 'addresses'))} {_is_are(number)} "
        "not in your address book or a Safe you own."
    ),
    RecipientStatus.LOW_ACTIVITY: lambda number, total=None: (
        f"{capitalise(format_count(number, 'address', total, 'addresses'))} {_has_have(number)} "
        "few transactions."
    ),
    RecipientStatus.NEW_RECIPIENT: lambda number, total=None: (
        f"You are interacting with {format_count(number, 'address', total, 'addresses')} for the first time."
    ),
    RecipientStatus.RECURRING_RECIPIENT: lambda number, total=None: (
        f"You have interacted with {format_count(number, 'address', total, 'addresses')} before."
    ),
    BridgeStatus.INCOMPATIBLE_SAFE: lambda number, total=None: (
        f"{capitalise(format_count(number, 'Safe account', total))} cannot be created on the destination "
        "chain. You will not be able to claim ownership of the same address. Funds sent may be inaccessible."
    ),
    BridgeStatus.MISSING_OWNERSHIP: lambda number, total=None: (
        f"{capitalise(format_count(number, 'Safe account', total))} {_is_are(number)} not activated on the "
        f"target chain. First, create the {pluralise(number, 'Safe')}, execute a test transaction, and then "
        "proceed with bridging. Funds sent may be inaccessible."
    ),
    BridgeStatus.UNSUPPORTED_NETWORK: lambda number, total=None: (
        f"app.safe.global does not support the network for {format_count(number, 'recipient', total)}. "
        "Unless you have a wallet deployed there, we recommend not to bridge. Funds sent may be inaccessible."
    ),
    BridgeStatus.DIFFERENT_SAFE_SETUP: lambda number, total=None: (
        f"Your Safe exists on the target chain for {format_count(number, 'recipient', total)} but with a "
        "different configuration. Review carefully before proceeding. Funds sent may be inaccessible if the "
        "setup is incorrect."
    ),
    ContractStatus.VERIFIED: lambda number, total=None: (
        f"{capitalise(format_count(number, 'contract', total))} {_is_are(number)} verified."
    ),
    ContractStatus.NOT_VERIFIED: lambda number, total=None: (
        f"{capitalise(format_count(number, 'contract', total))} {_is_are(number)} not verified yet."
    ),
    ContractStatus.NEW_CONTRACT: lambda number, total=None: (
        f"You are interacting with {format_count(number, 'contract', total)} for the first time."
    ),
    ContractStatus.KNOWN_CONTRACT: lambda number, total=None: (
        f"You have interacted with {format_count(number, 'contract', total)} before."
    ),
    ContractStatus.UNEXPECTED_DELEGATECALL: lambda number, total=None: (
        f"{capitalise(format_count(number, 'unexpected delegateCall'))} detected."
    ),
    ContractStatus.NOT_VERIFIED_BY_SAFE: lambda number, total=None: (
        f"{capitalise(format_count(number, 'contract', total))} {_has_have(number)} not been interacted with "
        f"on Safe{{Wallet}}. If verified, {'it' if number == 1 else 'they'} will be marked as such after the "
        "first transaction."
    ),
    ContractStatus.VERIFICATION_UNAVAILABLE: None,
    ContractStatus.UNOFFICIAL_FALLBACK_HANDLER: lambda number, total=None: (
        f"Verify {format_count(number, 'fallback handler', total, None, 'all')} {_is_are(number)} "
        "trusted and secure before proceeding."
    ),
}


def describe_multiple(status, number: int, total: int | None, fallback: str) -> str:
    """Render the count-aware description for a status, or fall back."""
    formatter = MULTI_RESULT_DESCRIPTION.get(status)
    if formatter is None:
        return fallback
    return formatter(number, total)
