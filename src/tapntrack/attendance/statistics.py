"""Attendance aggregation over a user's (or the school's) track history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..core.enums import Role, TrackStatus
from ..core.exceptions import StoreError
from ..tracks.model import Track
from ..tracks.repository import TrackRepository
from ..users.model import User
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)

ATTENDED = frozenset({TrackStatus.PRESENT, TrackStatus.LATE})


@dataclass(frozen=True)
class AttendanceStatistics:
    total_attendance: int
    attendance_rate: float
    last_seen: int


@dataclass(frozen=True)
class TodayAttendance:
    present: int
    late: int
    absent: int
    total_students: int


@dataclass(frozen=True)
class QuickStats:
    total_students: int
    total_teachers: int
    logs_this_week: int


def calculate_statistics(tracks: Sequence[Track]) -> AttendanceStatistics:
    total = len(tracks)
    if total == 0:
        return AttendanceStatistics(total_attendance=0, attendance_rate=0.0, last_seen=0)

    attended = sum(1 for t in tracks if t.status in ATTENDED)
    return AttendanceStatistics(
        total_attendance=total,
        attendance_rate=attended / total * 100.0,
        last_seen=max(t.time_in for t in tracks),
    )


def today_attendance(tracks: Iterable[Track], today: str) -> TodayAttendance:
    present = late = absent = 0
    students = set()
    for t in tracks:
        if t.date != today:
            continue
        students.add(t.rfid_tag or t.student_name)
        if t.status == TrackStatus.PRESENT:
            present += 1
        elif t.status == TrackStatus.LATE:
            late += 1
        elif t.status == TrackStatus.ABSENT:
            absent += 1
    return TodayAttendance(present=present, late=late, absent=absent, total_students=len(students))


def quick_stats(users: Iterable[User], tracks: Iterable[Track], week_start_ms: int) -> QuickStats:
    active = [u for u in users if u.is_active]
    return QuickStats(
        total_students=sum(1 for u in active if u.role == Role.STUDENT),
        total_teachers=sum(1 for u in active if u.role == Role.TEACHER),
        logs_this_week=sum(1 for t in tracks if t.time_in >= week_start_ms),
    )


def recent_activity(tracks: Iterable[Track], limit: int) -> List[Track]:
    return sorted(tracks, key=lambda t: t.time_in, reverse=True)[:limit]


class StatisticsService:
    """Use case: per-user attendance summary with a cached rate on the user record."""

    def __init__(self, tracks: TrackRepository, users: UserRepository):
        self._tracks = tracks
        self._users = users

    def calculate_statistics(self, user_id: str) -> AttendanceStatistics:
        stats = calculate_statistics(self._tracks.list_by_user(user_id))
        if stats.total_attendance > 0:
            self._refresh_cached_rate(user_id, stats.attendance_rate)
        return stats

    def _refresh_cached_rate(self, user_id: str, rate: float) -> None:
        # Cache refresh only; the caller already has the fresh number.
        try:
            self._users.update_fields(user_id, {"attendanceRate": rate})
        except StoreError as e:
            logger.warning("Could not cache attendance rate for %s: %s", user_id, e)
