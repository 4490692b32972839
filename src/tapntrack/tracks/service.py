from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..auth.policy import Caller, can_modify_track, can_view_track
from ..bulk.coordinator import BulkMutationCoordinator, BulkResult, ItemErrorHandler
from ..common.coercion import as_enum
from ..common.datetime_utils import date_from_ms, format_date, format_time, now_local, to_epoch_ms
from ..common.validators import require_time_order
from ..core.constants import EDITABLE_TRACK_FIELDS, MAX_TIMESTAMP_MS
from ..core.enums import Role, TrackStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Track
from .query import LogQuery, LogSummary, filter_logs, summarize_logs
from .repository import TrackRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogsView:
    logs: List[Track]
    summary: LogSummary


def to_view(track: Track) -> dict:
    """Track as JSON for the API, with display strings next to the raw values."""
    data = track.to_map()
    data.update(
        {
            "timeInDisplay": format_time(track.time_in) if track.time_in else "",
            "timeOutDisplay": format_time(track.time_out) if track.time_out else "",
            "dateDisplay": format_date(track.date),
            "duration": track.formatted_duration,
            "inProgress": track.is_in_progress,
        }
    )
    return data


def _parse_timestamp(name: str, value: Any, *, nullable: bool) -> Optional[int]:
    if value is None and nullable:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a positive epoch-ms timestamp")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{name} must be a positive epoch-ms timestamp")
    if not 0 < value <= MAX_TIMESTAMP_MS:
        raise ValidationError(f"{name} must be a positive epoch-ms timestamp")
    return int(value)


def _parse_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be text")
    return value.strip()


class LogService:
    """Use case: browse and maintain attendance logs."""

    def __init__(self, tracks: TrackRepository, coordinator: BulkMutationCoordinator):
        self._tracks = tracks
        self._coordinator = coordinator

    def list_logs(self, caller: Caller, query: LogQuery) -> LogsView:
        logs = filter_logs(self._tracks.list_all(), query, caller)
        return LogsView(logs=logs, summary=summarize_logs(logs))

    def get_log(self, caller: Caller, track_id: str) -> Track:
        track = self._tracks.get(track_id)
        if not track:
            raise NotFoundError("Log not found")
        if not can_view_track(caller, track):
            raise AuthorizationError("You do not have access to this log")
        return track

    def _get_modifiable(self, caller: Caller, track_id: str) -> Track:
        track = self.get_log(caller, track_id)
        if not can_modify_track(caller, track):
            raise AuthorizationError("You cannot modify this log")
        return track

    def update_log(
        self,
        caller: Caller,
        track_id: str,
        updates: Mapping[str, Any],
        *,
        now: Optional[datetime] = None,
    ) -> Track:
        if not updates:
            raise ValidationError("Nothing to update")
        unknown = set(updates) - EDITABLE_TRACK_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        track = self._get_modifiable(caller, track_id)
        changes: Dict[str, Any] = {}
        if "timeIn" in updates:
            time_in = _parse_timestamp("timeIn", updates["timeIn"], nullable=False)
            changes["time_in"] = time_in
            changes["date"] = date_from_ms(time_in)
        if "timeOut" in updates:
            changes["time_out"] = _parse_timestamp("timeOut", updates["timeOut"], nullable=True)
        if "status" in updates:
            status = as_enum(updates["status"], TrackStatus, None)
            if status is None:
                raise ValidationError("Unknown status")
            changes["status"] = status
        for key, attr in (("location", "location"), ("remarks", "remarks"), ("studentName", "student_name"), ("rfidTag", "rfid_tag")):
            if key in updates:
                changes[attr] = _parse_text(key, updates[key])

        updated = replace(track, updated_at=to_epoch_ms(now or now_local()), **changes)
        require_time_order(updated.time_in, updated.time_out)

        before = track.to_map()
        partial = {k: v for k, v in updated.to_map().items() if before.get(k) != v}
        self._tracks.update_fields(track_id, partial)
        logger.info("Log %s updated by %s: %s", track_id, caller.uid, sorted(partial))
        return updated

    def delete_log(self, caller: Caller, track_id: str) -> None:
        self._get_modifiable(caller, track_id)
        self._tracks.delete(track_id)
        logger.info("Log %s deleted by %s", track_id, caller.uid)

    def bulk_delete(
        self,
        caller: Caller,
        track_ids: Iterable[str],
        *,
        on_item_error: Optional[ItemErrorHandler] = None,
        refresh: Optional[Callable[[], None]] = None,
    ) -> BulkResult:
        ids = list(track_ids)
        if caller.role not in {Role.ADMIN, Role.TEACHER}:
            raise AuthorizationError("You cannot delete logs")
        if caller.role == Role.TEACHER:
            visible = {t.id for t in self._tracks.list_all() if can_view_track(caller, t)}
            outside = [i for i in ids if i not in visible]
            if outside:
                raise AuthorizationError("Some selected logs are not assigned to you")
        return self._coordinator.apply(ids, self._tracks.delete, on_item_error=on_item_error, refresh=refresh)

    def today_query(self, now: Optional[datetime] = None) -> LogQuery:
        return LogQuery.for_day((now or now_local()).date())

    def week_query(self, now: Optional[datetime] = None) -> LogQuery:
        return LogQuery.for_week((now or now_local()).date())

    def month_query(self, now: Optional[datetime] = None) -> LogQuery:
        return LogQuery.for_month((now or now_local()).date())
