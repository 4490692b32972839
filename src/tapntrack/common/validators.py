from __future__ import annotations

import re
from typing import Optional

from ..core.constants import MAX_NAME_LENGTH, MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$")


def require_non_empty(value: Optional[str], message: str) -> str:
    if not value or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_min_length(value: Optional[str], message: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(message)
    return value


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def is_valid_password(password: str) -> bool:
    return password is not None and len(password) >= MIN_PASSWORD_LENGTH


def is_valid_name(name: str) -> bool:
    trimmed = (name or "").strip()
    return MIN_NAME_LENGTH <= len(trimmed) <= MAX_NAME_LENGTH


def require_time_order(time_in: int, time_out: Optional[int]) -> None:
    if time_out is not None and time_out < time_in:
        raise ValidationError("Time out cannot be earlier than time in")
