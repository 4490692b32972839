from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import TrackStatus
from ..model import SchoolDay


@dataclass(frozen=True)
class StatusDecision:
    status: TrackStatus
    remarks: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_tap_in(self, *, now: datetime, day: SchoolDay) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_tap_out(self, *, now: datetime, day: SchoolDay, current: TrackStatus) -> StatusDecision:
        raise NotImplementedError
