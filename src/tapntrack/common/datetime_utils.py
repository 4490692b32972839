from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from ..core.constants import DATE_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_clock(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000)


def now_ms() -> int:
    return to_epoch_ms(now_local())


def iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def today_iso(now: Optional[datetime] = None) -> str:
    return iso_date((now or now_local()).date())


def date_from_ms(epoch_ms: int) -> str:
    """Local calendar date (YYYY-MM-DD) of an epoch-ms timestamp."""
    return iso_date(from_epoch_ms(epoch_ms).date())


def format_time(epoch_ms: int) -> str:
    """Format epoch-ms as a local 'hh:mm AM/PM' string."""
    return from_epoch_ms(epoch_ms).strftime("%I:%M %p")


def format_date(value: str) -> str:
    """Format a YYYY-MM-DD string as 'Mon dd, yyyy'.

    Returns the input unchanged when it cannot be parsed.
    """
    try:
        return parse_iso_date(value).strftime("%b %d, %Y")
    except (TypeError, ValueError):
        return value


def format_datetime(value: datetime) -> str:
    return value.strftime("%A, %b %d, %Y - %I:%M %p")


def format_duration(duration_ms: Optional[int]) -> str:
    if duration_ms is None or duration_ms < 0:
        return ""
    total_minutes = duration_ms // 60000
    hours, minutes = divmod(total_minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    return f"{minutes}m"


def week_range(today: date) -> Tuple[date, date]:
    """Monday..Sunday of the week containing `today`."""
    start = today - timedelta(days=today.weekday())
    return start, start + timedelta(days=6)


def month_range(today: date) -> Tuple[date, date]:
    start = today.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def start_of_week_ms(now: datetime) -> int:
    start, _ = week_range(now.date())
    return to_epoch_ms(datetime.combine(start, time.min))
