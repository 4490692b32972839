from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..attendance.statistics import QuickStats, TodayAttendance, quick_stats, recent_activity, today_attendance
from ..auth.policy import Caller, can_view_track, can_view_user
from ..common.datetime_utils import format_datetime, now_local, start_of_week_ms, today_iso
from ..core.constants import DEFAULT_RECENT_ACTIVITY_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..tracks.model import Track
from ..tracks.repository import TrackRepository
from ..users.repository import UserRepository


@dataclass(frozen=True)
class DashboardData:
    current_date_time: str
    today: TodayAttendance
    quick_stats: QuickStats
    recent_activity: List[Track]


class DashboardService:
    """Use case: home screen numbers for an admin or teacher."""

    def __init__(
        self,
        users: UserRepository,
        tracks: TrackRepository,
        *,
        recent_limit: int = DEFAULT_RECENT_ACTIVITY_LIMIT,
    ):
        self._users = users
        self._tracks = tracks
        self._recent_limit = recent_limit

    def load(self, caller: Caller, now: Optional[datetime] = None) -> DashboardData:
        if caller.role not in {Role.ADMIN, Role.TEACHER}:
            raise AuthorizationError("Only administrators and teachers have a dashboard")
        now = now or now_local()

        tracks = [t for t in self._tracks.list_all() if can_view_track(caller, t)]
        users = [u for u in self._users.list_all() if can_view_user(caller, u)]

        return DashboardData(
            current_date_time=format_datetime(now),
            today=today_attendance(tracks, today_iso(now)),
            quick_stats=quick_stats(users, tracks, start_of_week_ms(now)),
            recent_activity=recent_activity(tracks, self._recent_limit),
        )
