from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class SchoolDay:
    """Domain entity: the daily timetable taps are judged against."""

    class_start: time
    class_end: time
    grace_minutes: int = 5
    half_day_threshold_minutes: int = 120
