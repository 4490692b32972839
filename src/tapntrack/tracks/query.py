"""Logs view: filter, search and sort a snapshot of tracks.

Everything here is a pure function of (tracks, query, caller); the input list
is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Mapping, Optional

from ..auth.policy import Caller, can_view_track
from ..common.coercion import as_enum
from ..common.datetime_utils import iso_date, month_range, week_range
from ..core.enums import LogSort, TrackStatus
from .model import Track


@dataclass(frozen=True)
class LogQuery:
    search: str = ""
    status: Optional[TrackStatus] = None
    teacher_id: Optional[str] = None
    date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    sort_by: LogSort = LogSort.TIME_IN_DESC

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "LogQuery":
        status_s = (args.get("status") or "").strip().upper()
        status = None if status_s in {"", "ALL"} else as_enum(status_s, TrackStatus, None)
        return cls(
            search=args.get("search") or args.get("q") or "",
            status=status,
            teacher_id=(args.get("teacherId") or "").strip() or None,
            date=(args.get("date") or "").strip() or None,
            start_date=(args.get("startDate") or "").strip() or None,
            end_date=(args.get("endDate") or "").strip() or None,
            sort_by=as_enum(args.get("sortBy"), LogSort, LogSort.TIME_IN_DESC),
        )

    @classmethod
    def for_day(cls, day: date) -> "LogQuery":
        return cls(date=iso_date(day))

    @classmethod
    def for_week(cls, day: date) -> "LogQuery":
        start, end = week_range(day)
        return cls(start_date=iso_date(start), end_date=iso_date(end))

    @classmethod
    def for_month(cls, day: date) -> "LogQuery":
        start, end = month_range(day)
        return cls(start_date=iso_date(start), end_date=iso_date(end))


@dataclass(frozen=True)
class LogSummary:
    present: int = 0
    late: int = 0
    absent: int = 0
    half_day: int = 0


def _matches_search(track: Track, needle: str) -> bool:
    return (
        needle in track.student_name.lower()
        or needle in track.rfid_tag.lower()
        or needle in track.location.lower()
    )


def sort_logs(tracks: Iterable[Track], sort_by: LogSort) -> List[Track]:
    # sorted() is stable, also with reverse=True, so equal keys keep store order.
    if sort_by == LogSort.TIME_IN_ASC:
        return sorted(tracks, key=lambda t: t.time_in)
    if sort_by == LogSort.STUDENT_NAME_ASC:
        return sorted(tracks, key=lambda t: t.student_name.lower())
    if sort_by == LogSort.STUDENT_NAME_DESC:
        return sorted(tracks, key=lambda t: t.student_name.lower(), reverse=True)
    if sort_by == LogSort.STATUS:
        return sorted(tracks, key=lambda t: t.status.value)
    if sort_by == LogSort.TIME_OUT_DESC:
        return sorted(tracks, key=lambda t: t.time_out or 0, reverse=True)
    return sorted(tracks, key=lambda t: t.time_in, reverse=True)


def filter_logs(all_logs: Iterable[Track], query: LogQuery, caller: Caller) -> List[Track]:
    filtered = list(all_logs)

    if query.date:
        filtered = [t for t in filtered if t.date == query.date]

    if query.start_date:
        filtered = [t for t in filtered if t.date >= query.start_date]
    if query.end_date:
        filtered = [t for t in filtered if t.date <= query.end_date]

    needle = query.search.strip().lower()
    if needle:
        filtered = [t for t in filtered if _matches_search(t, needle)]

    if query.status is not None:
        filtered = [t for t in filtered if t.status == query.status]

    if query.teacher_id:
        filtered = [t for t in filtered if t.teacher_id == query.teacher_id]

    filtered = [t for t in filtered if can_view_track(caller, t)]

    return sort_logs(filtered, query.sort_by)


def summarize_logs(tracks: Iterable[Track]) -> LogSummary:
    counts = {status: 0 for status in TrackStatus}
    for t in tracks:
        counts[t.status] += 1
    return LogSummary(
        present=counts[TrackStatus.PRESENT],
        late=counts[TrackStatus.LATE],
        absent=counts[TrackStatus.ABSENT],
        half_day=counts[TrackStatus.HALF_DAY],
    )
