"""Hypernative single-transaction assessment tracker."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional

from ..constants import StatusGroup
from ..exceptions import APIError, ConfigurationError
from ..failures import ErrorType, get_error_info
from ..models import AsyncResult, SafeTransaction, is_safe_transaction
from ..providers.hypernative_client import HypernativeClient, SafeTxHashCalculator, build_assessment_request
from ..providers.hypernative_mapping import map_hypernative_response
from .origin import parse_origin

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class HypernativeAssessmentTracker:
    """
    Keeps one caller's Hypernative assessment in sync with its input.

    Only Safe transactions are assessed. Input changes are debounced: each
    `update()` schedules a task that waits `debounce_seconds` and gives up if
    a newer `update()` arrived in the meantime. A bearer token is required;
    without one `snapshot` reports a ConfigurationError and nothing is sent.
    """

    def __init__(
        self,
        client: HypernativeClient,
        hash_calculator: SafeTxHashCalculator,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        risk_types: Optional[Mapping[str, object]] = None,
    ):
        self.client = client
        self.hash_calculator = hash_calculator
        self.debounce_seconds = debounce_seconds
        self.risk_types = risk_types

        self._data: SafeTransaction | dict | None = None
        self._generation = 0
        self._request_key: Optional[tuple] = None
        self._auth_token: Optional[str] = None
        self._skip = False
        self._task: Optional[asyncio.Task] = None

        self._value: Optional[dict] = None
        self._error: Optional[BaseException] = None
        self._loading = False

    @property
    def snapshot(self) -> AsyncResult:
        if self._skip:
            return None, None, False
        if not self._auth_token:
            return None, ConfigurationError("authToken is required"), False
        return self._value, self._error, self._loading

    def update(
        self,
        safe_address: str,
        chain_id: str,
        data: SafeTransaction | dict | None,
        wallet_address: str,
        origin: Optional[str] = None,
        safe_version: Optional[str] = None,
        auth_token: Optional[str] = None,
        skip: bool = False,
    ) -> Optional[asyncio.Task]:
        """React to new inputs. Returns the debounced request task, if any."""
        self._skip = skip
        self._auth_token = auth_token
        self._generation += 1

        if skip:
            self._request_key = None
            self._loading = False
            return None
        if not auth_token:
            return None

        self._task = asyncio.ensure_future(
            self._debounced(
                self._generation,
                safe_address=safe_address,
                chain_id=chain_id,
                data=data,
                wallet_address=wallet_address,
                origin=origin,
                safe_version=safe_version,
                auth_token=auth_token,
            )
        )
        return self._task

    async def _debounced(
        self,
        generation: int,
        safe_address: str,
        chain_id: str,
        data: SafeTransaction | dict | None,
        wallet_address: str,
        origin: Optional[str],
        safe_version: Optional[str],
        auth_token: str,
    ) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self._generation or self._skip:
            logger.debug("Hypernative assessment input superseded during debounce")
            return

        if not (is_safe_transaction(data) and is_safe_transaction(self._data) and data.data == self._data.data):
            self._data = data

        # Typed messages are not supported by the provider
        if not is_safe_transaction(self._data) or not safe_version or not wallet_address:
            return

        request = build_assessment_request(
            safe_address=safe_address,
            chain_id=chain_id,
            transaction=self._data,
            wallet_address=wallet_address,
            safe_version=safe_version,
            hash_calculator=self.hash_calculator,
            origin=parse_origin(origin),
        )
        if request is None:
            return

        key = (auth_token, request)
        if key == self._request_key:
            return

        self._request_key = key
        self._value = None
        self._error = None
        self._loading = True
        await self._run(key, request, safe_address, auth_token)

    async def _run(self, key: tuple, request: dict, safe_address: str, auth_token: str) -> None:
        value: Optional[dict] = None
        error: Optional[BaseException] = None

        try:
            response = await self.client.assess_transaction(request, auth_token)
        except APIError as e:
            logger.warning(f"Hypernative assessment failed for {safe_address}: {e}")
            error = e
            value = {StatusGroup.COMMON: [get_error_info(ErrorType.THREAT, e.message)]}
        except Exception as e:
            logger.exception(f"Unexpected error requesting Hypernative assessment: {e}")
            error = e
            value = {StatusGroup.COMMON: [get_error_info(ErrorType.THREAT, str(e))]}
        else:
            try:
                value = map_hypernative_response(response, safe_address, self.risk_types)
            except Exception as e:
                logger.exception(f"Failed to map Hypernative assessment for {safe_address}: {e}")
                error = e

        if self._skip or key != self._request_key:
            logger.debug(f"Dropping stale Hypernative assessment for {safe_address}")
            return

        self._value = value
        self._error = error
        self._loading = False
