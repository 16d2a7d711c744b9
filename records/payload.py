"""
records/payload.py

Named accessors over the open-ended record payload.

A payload maps field names to a small set of value shapes::

    str | int | float | bool | list[str] | None

Analyzers never index a payload directly. Every read goes through one of
the accessors below so that coercion rules live in exactly one place:

- absent keys and ``None`` are "no data"
- numeric strings are parsed, booleans count as 1 / 0
- anything else that should have been a number coerces to ``0.0``
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Union

PayloadValue = Union[str, int, float, bool, list[str], None]
Payload = Mapping[str, PayloadValue]


def payload_has(payload: Payload, key: str) -> bool:
    """Return True when *key* is present with a non-null value."""
    return payload.get(key) is not None


def payload_number(payload: Payload, key: str, default: float = 0.0) -> float:
    """
    Read *key* as a float.

    Absent or null values return *default*; malformed values return ``0.0``.
    """
    raw = payload.get(key)
    if raw is None:
        return default
    return coerce_number(raw)


def payload_optional_number(payload: Payload, key: str) -> float | None:
    """
    Read *key* as a float, keeping "no data" distinct from zero.

    Returns ``None`` when the key is absent or null; malformed values
    still coerce to ``0.0``.
    """
    raw = payload.get(key)
    if raw is None:
        return None
    return coerce_number(raw)


def payload_text(payload: Payload, key: str, default: str = "") -> str:
    """Read *key* as stripped text. Lists are joined with ``", "``."""
    raw = payload.get(key)
    if raw is None:
        return default
    if isinstance(raw, list):
        return ", ".join(str(item).strip() for item in raw if str(item).strip())
    text = str(raw).strip()
    return text if text else default


def payload_list(payload: Payload, key: str) -> list[str]:
    """
    Read *key* as a list of non-empty strings.

    A scalar string is split on commas and newlines.
    """
    raw = payload.get(key)
    if raw is None or isinstance(raw, bool):
        return []
    if isinstance(raw, list):
        items = [str(item).strip() for item in raw]
    elif isinstance(raw, str):
        items = [part.strip() for part in raw.replace("\n", ",").split(",")]
    else:
        return []
    return [item for item in items if item]


def coerce_number(raw: PayloadValue) -> float:
    """Coerce a single payload value to a finite float (``0.0`` on failure)."""
    if isinstance(raw, bool):
        return 1.0 if raw else 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return 0.0
        try:
            value = float(stripped)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value
