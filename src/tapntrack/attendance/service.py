from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import date_from_ms, now_local, to_epoch_ms, today_iso
from ..common.validators import require_non_empty, require_time_order
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..database.store import new_key
from ..tracks.model import Track
from ..tracks.repository import TrackRepository
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import SchoolDay

logger = logging.getLogger(__name__)

TAP_IN = "TAP_IN"
TAP_OUT = "TAP_OUT"


@dataclass(frozen=True)
class TapResult:
    action: str
    track: Track


class AttendanceService:
    """Use case: record RFID taps. The first tap of the day opens a track, the next closes it."""

    def __init__(
        self,
        tracks: TrackRepository,
        users: UserRepository,
        *,
        school_day: SchoolDay,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
    ):
        self._tracks = tracks
        self._users = users
        self._day = school_day
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def tap(self, *, user_id: str, rfid_tag: str, location: str = "", now: Optional[datetime] = None) -> TapResult:
        now = now or now_local()
        rfid_tag = require_non_empty(rfid_tag, "RFID tag is required")

        user = self._users.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role != Role.STUDENT:
            raise ValidationError("Only student cards can be tapped")
        if not user.is_active:
            raise ValidationError("This account is deactivated")

        today = today_iso(now)
        open_track = next(
            (t for t in self._tracks.list_by_user(user_id) if t.date == today and t.is_in_progress),
            None,
        )
        if open_track:
            return TapResult(action=TAP_OUT, track=self._tap_out(open_track, now))

        now_ms = to_epoch_ms(now)
        decision = self._factory.for_tap_in(now=now, day=self._day).decide_tap_in(now=now, day=self._day)
        track = Track(
            id=new_key(now_ms),
            user_id=user.uid,
            student_name=user.name,
            rfid_tag=rfid_tag,
            time_in=now_ms,
            date=date_from_ms(now_ms),
            status=decision.status,
            teacher_id=user.teacher_id,
            location=(location or "").strip(),
            remarks=decision.remarks or "",
            created_at=now_ms,
            updated_at=now_ms,
        )
        self._tracks.save(track)
        logger.info("Tap-in %s for %s (%s)", track.id, user.uid, track.status.value)
        return TapResult(action=TAP_IN, track=track)

    def _tap_out(self, track: Track, now: datetime) -> Track:
        now_ms = to_epoch_ms(now)
        require_time_order(track.time_in, now_ms)

        strategy = self._factory.for_tap_out(now=now, day=self._day, current_status=track.status)
        decision = strategy.decide_tap_out(now=now, day=self._day, current=track.status)
        remarks = decision.remarks or track.remarks

        self._tracks.update_fields(
            track.id,
            {"timeOut": now_ms, "status": decision.status.value, "remarks": remarks, "updatedAt": now_ms},
        )
        logger.info("Tap-out %s (%s)", track.id, decision.status.value)
        return replace(track, time_out=now_ms, status=decision.status, remarks=remarks, updated_at=now_ms)
