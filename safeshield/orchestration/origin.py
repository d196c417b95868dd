"""Origin field parsing."""

from __future__ import annotations

import json
from typing import Optional


def parse_origin(origin: Optional[str]) -> Optional[str]:
    """
    Resolve the origin sent along with an analysis request.

    Apps pass either a bare URL or a JSON envelope such as
    `{"url": "https://app.example", "name": "App"}`. A JSON object yields its
    `url` only when that is a non-empty string, otherwise None. Anything that
    does not parse to a JSON object is returned unchanged.
    """
    if origin is None:
        return None

    try:
        parsed = json.loads(origin)
    except (TypeError, ValueError):
        return origin

    if not isinstance(parsed, dict):
        return origin

    url = parsed.get("url")
    if isinstance(url, str) and len(url) > 0:
        return url
    return None
