from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..core.enums import TrackStatus
from .model import SchoolDay
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_tap_in(self, *, now: datetime, day: SchoolDay) -> AttendanceStrategy:
        class_start = datetime.combine(now.date(), day.class_start)
        if now <= class_start + timedelta(minutes=day.grace_minutes):
            return NormalStrategy()
        return LateStrategy()

    def for_tap_out(self, *, now: datetime, day: SchoolDay, current_status: TrackStatus) -> AttendanceStrategy:
        class_end = datetime.combine(now.date(), day.class_end)
        cutoff = class_end - timedelta(minutes=day.half_day_threshold_minutes)
        if now < cutoff and current_status == TrackStatus.PRESENT:
            return HalfDayStrategy()
        return NormalStrategy()
