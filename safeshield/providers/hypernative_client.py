"""Hypernative guard API client."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Optional

import httpx

from ..constants import ZERO_ADDRESS
from ..exceptions import APIError, ConfigurationError
from ..models import SafeTransaction

logger = logging.getLogger(__name__)

TX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

# (safe_address, chain_id, tx_data, safe_version) -> safeTxHash, or None on failure
SafeTxHashCalculator = Callable[[str, str, dict, str], Optional[str]]


def is_valid_tx_hash(value: Any) -> bool:
    """True for a 0x-prefixed 32-byte hex string."""
    return isinstance(value, str) and bool(TX_HASH_PATTERN.match(value))


def build_batch_request(safe_tx_hashes: Iterable[str]) -> Optional[dict]:
    """Build the batch payload from valid hashes, or None if none are valid."""
    valid = []
    for tx_hash in safe_tx_hashes or []:
        if not is_valid_tx_hash(tx_hash):
            logger.debug(f"Dropping invalid safeTxHash from batch: {tx_hash!r}")
            continue
        if tx_hash not in valid:
            valid.append(tx_hash)
    if not valid:
        return None
    return {"safeTxHashes": valid}


def build_assessment_request(
    safe_address: str,
    chain_id: str,
    transaction: SafeTransaction,
    wallet_address: str,
    safe_version: str,
    hash_calculator: SafeTxHashCalculator,
    origin: Optional[str] = None,
) -> Optional[dict]:
    """
    Build the single-assessment payload for a Safe transaction.

    Returns None when the safeTxHash cannot be calculated.
    """
    tx_data = transaction.data
    try:
        safe_tx_hash = hash_calculator(safe_address, chain_id, tx_data, safe_version)
    except Exception as e:
        logger.warning(f"Could not calculate safeTxHash for {safe_address}: {e}")
        return None
    if not safe_tx_hash:
        return None

    payload: dict[str, Any] = {
        "safeAddress": safe_address,
        "safeTxHash": safe_tx_hash,
        "transaction": {
            "chain": str(chain_id),
            "input": tx_data.get("data") or "0x",
            "operation": str(tx_data.get("operation", 0)),
            "toAddress": tx_data.get("to"),
            "fromAddress": wallet_address,
            "safeTxGas": str(tx_data.get("safeTxGas", 0)),
            "value": str(tx_data.get("value", 0)),
            "baseGas": str(tx_data.get("baseGas", 0)),
            "gasPrice": str(tx_data.get("gasPrice", 0)),
            "gasToken": tx_data.get("gasToken") or ZERO_ADDRESS,
            "refundReceiver": tx_data.get("refundReceiver") or ZERO_ADDRESS,
            "nonce": str(tx_data.get("nonce", 0)),
        },
    }
    if origin:
        payload["url"] = origin
    return payload


class HypernativeClient:
    """
    Client for the Hypernative transaction assessment endpoints.

    Provider failure envelopes (`{error, errorCode, success: false}`) are
    returned as data so they can be mapped to results. Transport failures and
    non-envelope HTTP errors raise APIError.
    """

    assessment_path: str = "/safe/transaction/assessment"
    batch_path: str = "/safe/transaction/assessment/batch"
    user_agent: str = "SafeShield/1.0"

    def __init__(self, base_url: str, timeout_seconds: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                headers={"User-Agent": self.user_agent},
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _post_json(self, path: str, data: dict, auth_token: str) -> Any:
        if not auth_token:
            raise ConfigurationError("authToken is required")

        client = await self._get_client()
        url = f"{self.base_url}{path}"
        try:
            response = await client.post(
                url,
                json=data,
                headers={"Authorization": f"Bearer {auth_token}"},
            )
        except httpx.TimeoutException as e:
            raise APIError(0, "Request timed out") from e
        except httpx.HTTPError as e:
            raise APIError(0, f"Request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            # Envelopes carrying an error are handed back to the caller
            if isinstance(body, dict) and "error" in body:
                logger.warning(f"Hypernative returned {response.status_code} for {path}: {body.get('error')}")
                return body
            raise APIError(response.status_code, f"Hypernative request failed: {response.status_code}", response.text)

        if body is None:
            raise APIError(response.status_code, "Response is not JSON", response.text)
        return body

    async def assess_transaction(self, request: dict, auth_token: str) -> dict:
        """
        Request a fresh assessment for one transaction.

        Returns the assessment payload (`safeTxHash`, `status`,
        `assessmentData`) or the provider's failure envelope.
        """
        body = await self._post_json(self.assessment_path, request, auth_token)
        if isinstance(body, dict) and isinstance(body.get("data"), dict) and "error" not in body:
            return body["data"]
        return body

    async def get_batch_assessments(self, request: dict, auth_token: str) -> Any:
        """
        Fetch existing assessments for many transactions.

        Returns the list of `{safeTxHash, status, assessmentData}` items, or a
        batch-level error `{status: FAILED, error: {reason, message}}`.
        """
        body = await self._post_json(self.batch_path, request, auth_token)
        if isinstance(body, dict) and isinstance(body.get("data"), list):
            return body["data"]
        return body
