"""Consolidation of per-address results into count-aware summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..constants import ContractStatus
from ..descriptions import describe_multiple
from ..models import AddressInfo, AnalysisResult, coerce_result
from .primary import get_primary_result, sort_by_severity

logger = logging.getLogger(__name__)


@dataclass
class _Match:
    result: AnalysisResult
    address: Optional[str]


def _display_index(addresses_results_map: Mapping) -> dict[str, Mapping]:
    """Lowercased address -> entry, for name/logo lookups."""
    index: dict[str, Mapping] = {}
    for address, entry in addresses_results_map.items():
        if isinstance(address, str) and isinstance(entry, Mapping):
            index[address.lower()] = entry
    return index


def _address_info(address: str, display: Mapping) -> AddressInfo:
    entry = display.get(address.lower()) or {}
    name = entry.get("name")
    logo_url = entry.get("logoUrl", entry.get("logo_url"))
    return AddressInfo(
        address=address,
        name=name if isinstance(name, str) else None,
        logo_url=logo_url if isinstance(logo_url, str) else None,
    )


def consolidate_analysis_results(
    addresses_results_map: Mapping,
    address_results: Optional[Sequence[Mapping]] = None,
) -> list[AnalysisResult]:
    """
    Merge the results of many addresses into one summary result per group.

    For every address and status group the primary result is bucketed by its
    type. Each type bucket becomes one result whose description embeds how many
    of the analyzed addresses matched, and whose addresses list carries every
    matching address (for unofficial fallback handlers, the flagged handler
    addresses rather than the contracts that use them). Only the most severe
    type is kept per group and the final list is sorted by severity.

    `address_results` is aligned by position with the keys of
    `addresses_results_map`; it defaults to the map's values.
    """
    if not addresses_results_map:
        return []

    addresses = list(addresses_results_map.keys())
    if address_results is None:
        address_results = list(addresses_results_map.values())
    total = len(address_results)
    display = _display_index(addresses_results_map)

    buckets: dict[object, dict[object, list[_Match]]] = {}
    for index, grouped in enumerate(address_results):
        if not isinstance(grouped, Mapping):
            continue
        address = addresses[index] if index < len(addresses) else None
        for group, group_results in grouped.items():
            if not isinstance(group_results, list):
                continue
            results = [r for r in (coerce_result(raw) for raw in group_results) if r is not None]
            primary = get_primary_result(results)
            if primary is None:
                continue
            buckets.setdefault(group, {}).setdefault(primary.type, []).append(
                _Match(result=primary, address=address)
            )

    consolidated: list[AnalysisResult] = []
    for group, types in buckets.items():
        group_results: list[AnalysisResult] = []
        for status, matches in types.items():
            if not matches:
                continue
            first = matches[0].result

            if status == ContractStatus.UNOFFICIAL_FALLBACK_HANDLER:
                infos = [
                    match.result.fallback_handler.to_address_info()
                    for match in matches
                    if match.result.fallback_handler is not None
                ]
            else:
                infos = [
                    _address_info(match.address, display)
                    for match in matches
                    if isinstance(match.address, str)
                ]

            group_results.append(
                AnalysisResult(
                    severity=first.severity,
                    type=first.type,
                    title=first.title,
                    description=describe_multiple(status, len(matches), total, first.description),
                    addresses=infos,
                )
            )

        primary = get_primary_result(group_results)
        if primary is not None:
            consolidated.append(primary)

    logger.debug(f"Consolidated {total} address results into {len(consolidated)} summaries")
    return sort_by_severity(consolidated)
