"""Gateway threat analysis tracker."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from ..constants import StatusGroup
from ..exceptions import APIError
from ..failures import ErrorType, get_error_info
from ..models import AsyncResult, SafeTransaction, is_safe_transaction
from ..providers.gateway import ThreatAnalysisGateway, parse_threat_analysis_response
from .origin import parse_origin
from .typed_data import generate_typed_data

logger = logging.getLogger(__name__)

TypedDataGenerator = Callable[..., dict]


def is_nonce_only_change(previous: Any, current: Any) -> bool:
    """True when two Safe transactions differ at most in their nonce."""
    if not (is_safe_transaction(previous) and is_safe_transaction(current)):
        return False
    return previous.without_nonce() == current.without_nonce()


class ThreatAnalysisTracker:
    """
    Keeps one caller's gateway threat analysis in sync with its input.

    Call `update()` with the current inputs every time they may have changed.
    A request is only issued when the effective input differs from the one
    already analyzed; a Safe transaction whose nonce alone changed keeps the
    previous analysis. Read the outcome from `snapshot`.
    """

    def __init__(
        self,
        gateway: ThreatAnalysisGateway,
        typed_data_generator: TypedDataGenerator = generate_typed_data,
    ):
        self.gateway = gateway
        self.generate_typed_data = typed_data_generator

        self._data: SafeTransaction | dict | None = None
        self._request_key: Optional[tuple] = None
        self._skip = False
        self._task: Optional[asyncio.Task] = None

        self._value: Optional[dict] = None
        self._error: Optional[BaseException] = None
        self._loading = False

    @property
    def data(self) -> SafeTransaction | dict | None:
        """The input the current analysis was requested for."""
        return self._data

    @property
    def snapshot(self) -> AsyncResult:
        if self._skip:
            return None, None, False
        return self._value, self._error, self._loading

    def update(
        self,
        safe_address: str,
        chain_id: str,
        data: SafeTransaction | dict | None,
        wallet_address: str,
        origin: Optional[str] = None,
        safe_version: Optional[str] = None,
        skip: bool = False,
    ) -> Optional[asyncio.Task]:
        """
        React to new inputs. Returns the scheduled request task, if any.

        Must be called from a running event loop.
        """
        if not is_nonce_only_change(self._data, data):
            self._data = data

        self._skip = skip
        if skip:
            # Any in-flight response will be dropped
            self._request_key = None
            self._loading = False
            return None

        if self._data is None or not (chain_id and safe_address and wallet_address):
            return None

        typed_data = self.generate_typed_data(
            data=self._data,
            safe_address=safe_address,
            chain_id=chain_id,
            safe_version=safe_version,
        )
        parsed_origin = parse_origin(origin)

        key = (chain_id, safe_address, wallet_address, parsed_origin, typed_data)
        if key == self._request_key:
            return None

        self._request_key = key
        self._value = None
        self._error = None
        self._loading = True

        self._task = asyncio.ensure_future(
            self._run(key, chain_id, safe_address, typed_data, wallet_address, parsed_origin)
        )
        return self._task

    async def _run(
        self,
        key: tuple,
        chain_id: str,
        safe_address: str,
        typed_data: dict,
        wallet_address: str,
        origin: Optional[str],
    ) -> None:
        value: Optional[dict] = None
        error: Optional[BaseException] = None

        try:
            raw = await self.gateway.analyze_threat(
                chain_id=chain_id,
                safe_address=safe_address,
                typed_data=typed_data,
                wallet_address=wallet_address,
                origin=origin,
            )
            value = parse_threat_analysis_response(raw)
        except APIError as e:
            logger.warning(f"Threat analysis failed for {safe_address}: {e}")
            error = e
        except Exception as e:
            logger.exception(f"Unexpected error in threat analysis for {safe_address}: {e}")
            error = e

        if self._skip or key != self._request_key:
            logger.debug(f"Dropping stale threat analysis response for {safe_address}")
            return

        if error is not None:
            value = {StatusGroup.COMMON: [get_error_info(ErrorType.THREAT, str(error))]}

        self._value = value
        self._error = error
        self._loading = False
