"""Hypernative batch assessment tracker."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

from ..exceptions import APIError, AssessmentNotFoundError, ConfigurationError, SafeShieldError
from ..models import AsyncResult
from ..providers.hypernative_client import HypernativeClient, build_batch_request
from ..providers.hypernative_mapping import map_hypernative_response
from ..providers.hypernative_types import STATUS_FAILED, STATUS_NOT_FOUND, STATUS_OK

logger = logging.getLogger(__name__)

BATCH_FAILED_MESSAGE = "Failed to fetch Hypernative batch threat analysis"


def same_hash_set(previous: list[str], current: list[str]) -> bool:
    """Order- and duplicate-insensitive comparison of two hash lists."""
    return set(previous) == set(current)


def is_batch_error_response(response: Any) -> bool:
    return (
        isinstance(response, Mapping)
        and (response.get("status") == STATUS_FAILED or isinstance(response.get("error"), Mapping))
    )


def batch_error_message(response: Mapping) -> str:
    error = response.get("error")
    if isinstance(error, Mapping) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    return BATCH_FAILED_MESSAGE


class HypernativeBatchTracker:
    """
    Fetches existing Hypernative assessments for a set of Safe tx hashes.

    A new batch request is issued only when the set of hashes changes; the
    same hashes in another order reuse the previous request. `results` maps
    every requested hash to its own `(value, error, loading)` tuple.
    """

    def __init__(self, client: HypernativeClient, risk_types: Optional[Mapping[str, object]] = None):
        self.client = client
        self.risk_types = risk_types

        self._hashes: list[str] = []
        self._request: Optional[dict] = None
        self._sent_key: Optional[tuple] = None
        self._safe_address = ""
        self._auth_token: Optional[str] = None
        self._skip = False
        self._task: Optional[asyncio.Task] = None

        self._response: Any = None
        self._batch_error: Optional[BaseException] = None
        self._loading = False

    @property
    def requested_hashes(self) -> list[str]:
        return list(self._request["safeTxHashes"]) if self._request else []

    def update(
        self,
        safe_tx_hashes: Iterable[str],
        safe_address: str,
        auth_token: Optional[str] = None,
        skip: bool = False,
    ) -> Optional[asyncio.Task]:
        """React to a new hash list. Returns the scheduled batch task, if any."""
        self._skip = skip
        self._auth_token = auth_token
        self._safe_address = safe_address

        if skip:
            self._hashes = []
            self._request = None
            self._sent_key = None
            self._loading = False
            return None

        hashes = list(safe_tx_hashes or [])
        if not same_hash_set(self._hashes, hashes):
            self._hashes = hashes
            self._request = build_batch_request(hashes)

        if not self._request or not auth_token:
            return None

        key = (frozenset(self._request["safeTxHashes"]), auth_token)
        if key == self._sent_key:
            return None

        self._sent_key = key
        self._response = None
        self._batch_error = None
        self._loading = True

        logger.debug(f"Requesting {len(self._request['safeTxHashes'])} Hypernative assessments")
        self._task = asyncio.ensure_future(self._run(key, self._request, auth_token))
        return self._task

    async def _run(self, key: tuple, request: dict, auth_token: str) -> None:
        response: Any = None
        error: Optional[BaseException] = None

        try:
            response = await self.client.get_batch_assessments(request, auth_token)
        except APIError as e:
            logger.warning(f"Hypernative batch assessment failed: {e}")
            error = SafeShieldError(BATCH_FAILED_MESSAGE)
            error.__cause__ = e
        except Exception as e:
            logger.exception(f"Unexpected error fetching Hypernative batch assessments: {e}")
            error = SafeShieldError(BATCH_FAILED_MESSAGE)
            error.__cause__ = e
        else:
            if is_batch_error_response(response):
                error = SafeShieldError(batch_error_message(response))
                response = None
            elif not isinstance(response, list):
                logger.warning(f"Unexpected Hypernative batch response: {type(response).__name__}")
                error = SafeShieldError(BATCH_FAILED_MESSAGE)
                response = None

        if self._skip or key != self._sent_key:
            logger.debug("Dropping stale Hypernative batch response")
            return

        self._response = response
        self._batch_error = error
        self._loading = False

    @property
    def results(self) -> dict[str, AsyncResult]:
        if self._skip:
            return {}

        requested = self.requested_hashes

        if not self._auth_token:
            return {tx_hash: (None, ConfigurationError("authToken is required"), False) for tx_hash in requested}

        if self._batch_error is not None:
            return {tx_hash: (None, self._batch_error, False) for tx_hash in requested}

        if self._loading:
            return {tx_hash: (None, None, True) for tx_hash in requested}

        if self._response is None:
            return {tx_hash: (None, None, False) for tx_hash in requested}

        items = {
            str(item.get("safeTxHash", "")).lower(): item
            for item in self._response
            if isinstance(item, Mapping)
        }
        return {tx_hash: self._item_result(tx_hash, items.get(tx_hash.lower())) for tx_hash in requested}

    def _item_result(self, tx_hash: str, item: Optional[Mapping]) -> AsyncResult:
        if item is None:
            return None, AssessmentNotFoundError(tx_hash), False

        status = item.get("status")
        if status == STATUS_NOT_FOUND:
            # No assessment has been made for this transaction yet
            return None, None, False

        if status == STATUS_OK and item.get("assessmentData"):
            try:
                value = map_hypernative_response(
                    {
                        "safeTxHash": item.get("safeTxHash"),
                        "status": STATUS_OK,
                        "assessmentData": item["assessmentData"],
                    },
                    self._safe_address,
                    self.risk_types,
                )
            except Exception as e:
                logger.exception(f"Failed to map Hypernative assessment for {tx_hash}: {e}")
                return None, e, False
            return value, None, False

        return None, SafeShieldError(f"Unexpected status: {status}"), False
