"""Response envelope helpers.

IRIS endpoints are not consistent about where they put the payload:
``{"data": {"product": {...}}}``, ``{"product": {...}}``, ``{"data": {...}}``
and bare objects all occur. Resource APIs unwrap through these helpers
with an ordered list of candidate paths instead of repeating fallback
chains at every call site.
"""

from __future__ import annotations

from typing import Any

_MISSING = object()


def _lookup(response: Any, path: str) -> Any:
    current = response
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def extract_payload(response: Any, *paths: str, default: Any = _MISSING) -> Any:
    """Return the first non-None value found at one of the candidate paths.

    Args:
        response: Decoded JSON response
        *paths: Candidate keys, tried in order; dotted paths walk nested dicts
        default: Returned when no path matches (defaults to the response itself)

    Returns:
        The unwrapped payload

    Example:
        extract_payload(resp, "data.product", "product", "data")
    """
    for path in paths:
        value = _lookup(response, path)
        if value is not _MISSING and value is not None:
            return value
    return response if default is _MISSING else default


def extract_list(response: Any, *paths: str) -> list[Any]:
    """Like extract_payload but only accepts list values.

    Returns an empty list when no candidate path holds a list. A response
    that is itself a list is returned as-is.
    """
    if isinstance(response, list):
        return response
    for path in paths:
        value = _lookup(response, path)
        if isinstance(value, list):
            return value
    return []


def extract_meta(response: Any) -> dict[str, Any]:
    """Pagination metadata from either ``meta`` or a Laravel-style paginator."""
    meta = extract_payload(response, "meta", "data.meta", default=None)
    if isinstance(meta, dict):
        return meta

    paginator = extract_payload(response, "data", default=None)
    if isinstance(paginator, dict) and "current_page" in paginator:
        return {k: v for k, v in paginator.items() if k != "data"}
    if isinstance(response, dict) and "current_page" in response:
        return {k: v for k, v in response.items() if k != "data"}
    return {}
