"""EIP-712 typed data for Safe transactions."""

from __future__ import annotations

import re
from typing import Any, Optional

from ..models import SafeTransaction, is_safe_transaction

SAFE_TX_TYPES = {
    "SafeTx": [
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "data", "type": "bytes"},
        {"name": "operation", "type": "uint8"},
        {"name": "safeTxGas", "type": "uint256"},
        {"name": "baseGas", "type": "uint256"},
        {"name": "gasPrice", "type": "uint256"},
        {"name": "gasToken", "type": "address"},
        {"name": "refundReceiver", "type": "address"},
        {"name": "nonce", "type": "uint256"},
    ]
}

# Safes before 1.3.0 sign without a chainId in the domain
CHAIN_ID_DOMAIN_SINCE = (1, 3, 0)


def _version_tuple(version: str) -> tuple[int, ...]:
    core = version.split("+", 1)[0]
    return tuple(int(part) for part in re.findall(r"\d+", core)[:3])


def generate_typed_data(
    data: SafeTransaction | dict,
    safe_address: str,
    chain_id: str,
    safe_version: Optional[str] = None,
) -> dict:
    """
    Build the typed data the gateway analyzes.

    Typed messages are passed through unchanged; Safe transactions become a
    SafeTx payload bound to the Safe's domain.
    """
    if not is_safe_transaction(data):
        return dict(data)

    domain: dict[str, Any] = {"verifyingContract": safe_address}
    if not safe_version or _version_tuple(safe_version) >= CHAIN_ID_DOMAIN_SINCE:
        domain["chainId"] = int(chain_id)

    message = {field["name"]: data.data.get(field["name"]) for field in SAFE_TX_TYPES["SafeTx"]}
    return {
        "domain": domain,
        "primaryType": "SafeTx",
        "types": SAFE_TX_TYPES,
        "message": message,
    }
