from __future__ import annotations

from datetime import datetime

from ...core.enums import TrackStatus
from ..model import SchoolDay
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Tap-in after class start plus grace."""

    def decide_tap_in(self, *, now: datetime, day: SchoolDay) -> StatusDecision:
        late_minutes = int((now - datetime.combine(now.date(), day.class_start)).total_seconds() // 60)
        return StatusDecision(status=TrackStatus.LATE, remarks=f"Late by {late_minutes} min")

    def decide_tap_out(self, *, now: datetime, day: SchoolDay, current: TrackStatus) -> StatusDecision:
        return StatusDecision(status=current)
