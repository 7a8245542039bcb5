"""Lenient readers for JSON documents written by older versions of the bot.

Each helper drops values of the wrong type instead of failing, so a single
bad field never costs the rest of a record.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

V = TypeVar("V")


def as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def as_count(value: Any) -> Optional[int]:
    """Accept non-negative integers, including integral floats (``3.0``)."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None


def list_of(value: Any, transform: Callable[[Any], Optional[V]]) -> Optional[list[V]]:
    if not isinstance(value, list):
        return None
    items = (transform(item) for item in value)
    return [item for item in items if item is not None]


def map_of(value: Any, transform: Callable[[Any], Optional[V]]) -> Optional[dict[str, V]]:
    if not isinstance(value, dict):
        return None
    result: dict[str, V] = {}
    for key, item in value.items():
        converted = transform(item)
        if converted is not None:
            result[str(key)] = converted
    return result
