"""Tolerant JSON decoding for upstream payloads.

Providers rename and reshape optional fields over time. Every field is
resolved by probing an ordered list of candidate keys against the raw
mapping; the first candidate whose value the parser accepts wins.
Candidates may be dotted paths ("extras.pool.name").
"""

import math
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from blockwatch.common.utils.date_utils import parse_iso_datetime

T = TypeVar("T")

_MISSING = object()

# Parsers signal rejection by raising one of these
PARSE_ERRORS = (TypeError, ValueError, KeyError, IndexError, ArithmeticError)


def lookup(payload: Any, path: str) -> Any:
    """Resolve a dotted path in nested mappings; returns _MISSING if absent."""
    current = payload
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def probe(
    payload: Any,
    candidates: Iterable[str],
    parser: Callable[[Any], T],
) -> T | None:
    """
    Return the first candidate value that parses, or None.

    None values and parser rejections both move on to the next candidate.
    """
    for key in candidates:
        raw = lookup(payload, key)
        if raw is _MISSING or raw is None:
            continue
        try:
            return parser(raw)
        except PARSE_ERRORS:
            continue
    return None


# =============================================================================
# Parsers
# =============================================================================


def as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if not isinstance(value, (int, float, str)):
        raise TypeError(f"Expected number, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Non-finite number {value!r}")
    return number


def as_int(value: Any) -> int:
    number = as_float(value)
    if not number.is_integer():
        raise ValueError(f"Expected integral number, got {value!r}")
    return int(number)


def as_str(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise TypeError("Expected non-empty string")
    return value


def as_float_list(value: Any) -> list[float]:
    if not isinstance(value, list):
        raise TypeError(f"Expected list, got {type(value).__name__}")
    return [as_float(item) for item in value]


def as_datetime(value: Any) -> datetime:
    if isinstance(value, str):
        return parse_iso_datetime(value)
    raise TypeError(f"Expected ISO timestamp, got {type(value).__name__}")


def as_mapping(value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"Expected object, got {type(value).__name__}")
    return value


def as_pool_name(value: Any) -> str:
    """Pool may be a bare string or an object carrying name/slug."""
    if isinstance(value, str):
        return as_str(value)
    name = probe(as_mapping(value), ("name", "slug"), as_str)
    if name is None:
        raise ValueError("Pool object has neither name nor slug")
    return name
