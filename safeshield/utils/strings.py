"""Count-aware phrasing helpers for consolidated descriptions."""

from __future__ import annotations


def capitalise(value: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    if not value:
        return value
    return value[0].upper() + value[1:]


def pluralise(count: float, singular: str, plural: str | None = None) -> str:
    if count == 1:
        return singular
    return plural or f"{singular}s"


def format_count(
    count: int,
    singular: str,
    total: int | None = None,
    plural: str | None = None,
    all_prefix: str = "all these",
) -> str:
    """
    Format "<count> <noun>", switching to "all these <nouns>" when every
    item matched and to "this <noun>" when the only item matched.
    """
    if total is not None and count == total:
        if total == 1:
            return f"this {singular}"
        return f"{all_prefix} {pluralise(count, singular, plural)}"
    return f"{count} {pluralise(count, singular, plural)}"
