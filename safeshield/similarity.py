"""Address poisoning detection.

Attackers craft addresses whose first and last characters match an address
the victim already uses, hoping the victim only checks the ends. Addresses are
bucketed by prefix and suffix, and bucket members are kept only when their
middle sections are also close in Hamming distance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from rapidfuzz.distance import Hamming

from .models import SimilarityGroup

logger = logging.getLogger(__name__)


@dataclass
class SimilarityConfig:
    prefix_length: int = 6
    suffix_length: int = 4
    hamming_threshold: int = 10


DEFAULT_SIMILARITY_CONFIG = SimilarityConfig()


def _hex(address: str) -> str:
    address = address.lower()
    return address[2:] if address.startswith("0x") else address


def get_bucket_key(address: str, prefix_length: int, suffix_length: int) -> str:
    """Lowercased prefix and suffix of the hex part, joined by '_'."""
    hex_part = _hex(address)
    return f"{hex_part[:prefix_length]}_{hex_part[-suffix_length:]}"


def get_middle_section(address: str, prefix_length: int, suffix_length: int) -> str:
    """The hex part with prefix and suffix stripped."""
    return _hex(address)[prefix_length:-suffix_length]


def hamming_distance(first: str, second: str) -> int:
    """Differing positions; strings of different length count as fully different."""
    if len(first) != len(second):
        return max(len(first), len(second))
    return Hamming.distance(first, second)


@dataclass
class SimilarityResult:
    groups: list[SimilarityGroup] = field(default_factory=list)
    address_to_groups: dict[str, list[str]] = field(default_factory=dict)

    def is_flagged(self, address: str) -> bool:
        return address.lower() in self.address_to_groups

    def get_group(self, address: str) -> Optional[SimilarityGroup]:
        keys = self.address_to_groups.get(address.lower())
        if not keys:
            return None
        for group in self.groups:
            if group.bucket_key == keys[0]:
                return group
        return None


def _filter_by_hamming_distance(addresses: list[str], config: SimilarityConfig) -> list[str]:
    if len(addresses) < 2:
        return []

    middles = [get_middle_section(a, config.prefix_length, config.suffix_length) for a in addresses]
    similar: dict[str, None] = {}
    for i in range(len(addresses)):
        for j in range(i + 1, len(addresses)):
            if hamming_distance(middles[i], middles[j]) <= config.hamming_threshold:
                similar[addresses[i]] = None
                similar[addresses[j]] = None

    # Keep input order
    return [a for a in addresses if a in similar]


def detect_similar_addresses(
    addresses: Iterable[str],
    config: SimilarityConfig = DEFAULT_SIMILARITY_CONFIG,
) -> SimilarityResult:
    """
    Group addresses that look alike.

    Every address of a group is flagged, the legitimate one included, since
    there is no way to tell which of two look-alikes is the impostor.
    """
    normalized: list[str] = []
    seen: set[str] = set()
    for address in addresses or []:
        if not isinstance(address, str):
            logger.debug(f"Skipping non-string address: {address!r}")
            continue
        lowered = address.lower()
        if lowered not in seen:
            seen.add(lowered)
            normalized.append(lowered)

    buckets: dict[str, list[str]] = {}
    for address in normalized:
        key = get_bucket_key(address, config.prefix_length, config.suffix_length)
        buckets.setdefault(key, []).append(address)

    result = SimilarityResult()
    for bucket_key, members in buckets.items():
        if len(members) < 2:
            continue

        similar = _filter_by_hamming_distance(members, config)
        if len(similar) < 2:
            continue

        result.groups.append(SimilarityGroup(bucket_key=bucket_key, addresses=similar))
        for address in similar:
            result.address_to_groups.setdefault(address, []).append(bucket_key)

    if result.groups:
        logger.info(f"Found {len(result.groups)} groups of similar addresses among {len(normalized)} addresses")
    return result
