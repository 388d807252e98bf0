from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote


def to_param_value(value: Any) -> str:
    """Coerce a scalar parameter value to the string that goes on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def percent_encode(value: Any) -> str:
    """
    RFC 3986 encoding: only A-Z a-z 0-9 - _ . ~ are left alone.

    Space becomes %20 (never "+") and "/" is encoded as well.
    """
    return quote(to_param_value(value), safe="~")


def canonicalize(params: Mapping[str, Any]) -> str:
    """
    Serialize params as key=value pairs joined by "&", sorted by key in
    codepoint order, values percent-encoded. Keys are used as-is.
    """
    return "&".join(
        f"{key}={percent_encode(params[key])}"
        for key in sorted(params)
    )
