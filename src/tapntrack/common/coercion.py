"""Lenient scalar coercion for documents read from the record store.

Each helper returns the value when it already has the expected type (or a
numeric type that converts cleanly) and the given default otherwise. None of
them raise.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


def as_str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def as_optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def as_int(value: Any, default: int = 0) -> int:
    # bool is an int subclass; stored booleans are not numbers.
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return default


def as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool):
        return default
    if not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    return number if math.isfinite(number) else default


def as_bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def as_enum(value: Any, enum_cls: Type[E], default: E) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return default
