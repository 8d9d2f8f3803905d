"""
URL and query-string helpers used by the resource services.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional
from urllib.parse import quote

__all__ = ["build_query_string", "build_url"]

# Same unreserved set as JavaScript's encodeURIComponent.
_SAFE_CHARACTERS = "-_.!~*'()"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _encode(value: str) -> str:
    return quote(value, safe=_SAFE_CHARACTERS)


def build_query_string(params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Render ``params`` as ``?key=value&...``, skipping ``None`` values.

    Returns an empty string (not a bare ``?``) when nothing is left.
    """
    if not params:
        return ""
    entries = [(key, value) for key, value in params.items() if value is not None]
    if not entries:
        return ""
    return "?" + "&".join(
        f"{_encode(str(key))}={_encode(_stringify(value))}" for key, value in entries
    )


def build_url(*segments: Optional[str]) -> str:
    """
    Join URL segments with ``/``, dropping empty ones and trailing slashes.

    >>> build_url("https://api.example.com/", "api/v1/customers", "123")
    'https://api.example.com/api/v1/customers/123'
    """
    parts = []
    for segment in segments:
        if segment is None or segment == "":
            continue
        parts.append(segment[:-1] if segment.endswith("/") else segment)
    return "/".join(parts)
