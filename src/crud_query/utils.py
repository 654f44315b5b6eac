"""Helpers for reading untrusted query parameters."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

_TRUTHY = frozenset({"1", "true", "yes", "on"})

# Signed 64-bit, the widest integer column the supported backends bind.
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def get_param(params: Mapping[str, Any], key: str) -> str | None:
    """Return a parameter as a string; list values yield their last item."""
    value = params.get(key)
    if isinstance(value, list | tuple):
        value = value[-1] if value else None
    if value is None:
        return None
    return str(value)


def split_list(raw: str | None, separator: str = ",") -> list[str]:
    """Split and strip, dropping empty items."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(separator) if item.strip()]


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in _TRUTHY


def parse_number(raw: str) -> int | float | None:
    """
    Parse an int or a finite float; ``None`` when not numeric.

    Integers outside the signed 64-bit range are malformed: no database
    column can hold them.
    """
    text = raw.strip()
    # int()/float() accept digit separators; query values must not.
    if not text or "_" in text:
        return None
    try:
        integer = int(text)
    except ValueError:
        pass
    else:
        return integer if INT_MIN <= integer <= INT_MAX else None
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(raw: str | None) -> int | None:
    """Parse an integral value (``"10"`` or ``"10.0"``); ``None`` otherwise."""
    if raw is None:
        return None
    number = parse_number(raw)
    if isinstance(number, float):
        if not number.is_integer():
            return None
        integer = int(number)
        return integer if INT_MIN <= integer <= INT_MAX else None
    return number


def parse_date(raw: str) -> date | None:
    text = raw.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    moment = parse_datetime(text)
    return moment.date() if moment is not None else None


def parse_datetime(raw: str) -> datetime | None:
    text = raw.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
