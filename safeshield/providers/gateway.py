"""Safe client gateway threat-analysis endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import aiohttp

from ..constants import BALANCE_CHANGE_KEY, REQUEST_ID_KEY, StatusGroup
from ..exceptions import APIError
from ..models import BalanceAsset, BalanceChange, coerce_result

logger = logging.getLogger(__name__)

RESULT_GROUPS = (StatusGroup.THREAT, StatusGroup.CUSTOM_CHECKS, StatusGroup.COMMON)


class ThreatAnalysisGateway:
    """Posts EIP-712 typed data to the gateway and returns its raw JSON."""

    def __init__(self, base_url: str, timeout_seconds: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def threat_analysis_url(self, chain_id: str, safe_address: str) -> str:
        return f"{self.base_url}/v1/chains/{chain_id}/security/{safe_address}/threat-analysis"

    async def analyze_threat(
        self,
        chain_id: str,
        safe_address: str,
        typed_data: Mapping,
        wallet_address: str,
        origin: Optional[str] = None,
    ) -> dict:
        """
        Run the gateway threat analysis for one transaction or message.

        Raises:
            APIError: On timeouts, transport errors or non-2xx responses.
        """
        url = self.threat_analysis_url(chain_id, safe_address)
        payload: dict[str, Any] = {"data": dict(typed_data), "walletAddress": wallet_address}
        if origin:
            payload["origin"] = origin

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(url, json=payload, timeout=self.timeout_seconds) as resp:
                    if resp.status >= 400:
                        body = await resp.text()
                        raise APIError(resp.status, f"Threat analysis request failed: {resp.status}", body)
                    data = await resp.json()
        except asyncio.TimeoutError as e:
            raise APIError(0, "Request timed out") from e
        except aiohttp.ClientError as e:
            raise APIError(0, f"Request failed: {e}") from e

        if not isinstance(data, dict):
            raise APIError(200, "Unexpected threat analysis response", str(data))

        logger.debug(f"Threat analysis for {safe_address} on chain {chain_id}: {list(data.keys())}")
        return data


def parse_balance_change(raw: Any) -> Optional[BalanceChange]:
    if not isinstance(raw, Mapping) or not isinstance(raw.get("asset"), Mapping):
        return None
    asset = raw["asset"]
    change = BalanceChange(
        asset=BalanceAsset(
            type=str(asset.get("type", "")),
            symbol=asset.get("symbol"),
            address=asset.get("address"),
        )
    )
    for direction, target in (("in", change.incoming), ("out", change.outgoing)):
        for diff in raw.get(direction) or []:
            if not isinstance(diff, Mapping):
                continue
            if diff.get("value") is not None:
                target.append(str(diff["value"]))
            elif diff.get("token_id") is not None:
                target.append(str(diff["token_id"]))
    return change


def parse_threat_analysis_response(data: Optional[Mapping]) -> Optional[dict]:
    """
    Coerce the gateway response into typed threat results.

    Malformed result entries are skipped. Returns None for an empty response.
    """
    if not data:
        return None

    results: dict[Any, Any] = {}
    for group in RESULT_GROUPS:
        raw_results = data.get(group.value)
        if raw_results is None:
            continue
        if not isinstance(raw_results, list):
            logger.debug(f"Skipping non-list {group.value} results in threat analysis response")
            continue
        results[group] = [r for r in (coerce_result(raw) for raw in raw_results) if r is not None]

    raw_changes = data.get(BALANCE_CHANGE_KEY)
    if isinstance(raw_changes, list):
        changes = [c for c in (parse_balance_change(raw) for raw in raw_changes) if c is not None]
        if changes:
            results[BALANCE_CHANGE_KEY] = changes

    request_id = data.get(REQUEST_ID_KEY)
    if isinstance(request_id, str):
        results[REQUEST_ID_KEY] = request_id

    return results
