from __future__ import annotations

from datetime import datetime

from ...core.enums import TrackStatus
from ..model import SchoolDay
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Early tap-out (only when tap-in was PRESENT)."""

    def decide_tap_in(self, *, now: datetime, day: SchoolDay) -> StatusDecision:
        return StatusDecision(status=TrackStatus.PRESENT)

    def decide_tap_out(self, *, now: datetime, day: SchoolDay, current: TrackStatus) -> StatusDecision:
        return StatusDecision(status=TrackStatus.HALF_DAY, remarks=f"Left at {now.strftime('%H:%M')}")
