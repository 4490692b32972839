from datetime import datetime, timedelta

import pytest

from tapntrack.attendance.service import TAP_IN, TAP_OUT, AttendanceService
from tapntrack.common.datetime_utils import to_epoch_ms
from tapntrack.core.enums import TrackStatus
from tapntrack.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def service(tracks_repo, users_repo, school_day, school):
    return AttendanceService(tracks_repo, users_repo, school_day=school_day)


def test_first_tap_opens_a_track_with_copied_user_fields(service, tracks_repo, fixed_now):
    result = service.tap(user_id="student-1", rfid_tag="RFID-0001", location=" Main Gate ", now=fixed_now)

    assert result.action == TAP_IN
    track = tracks_repo.get(result.track.id)
    assert track == result.track
    assert track.student_name == "Juan Dela Cruz"
    assert track.teacher_id == "teacher-1"
    assert track.status == TrackStatus.PRESENT
    assert track.date == "2025-03-12"
    assert track.location == "Main Gate"
    assert track.time_in == to_epoch_ms(fixed_now)
    assert track.is_in_progress


def test_late_tap_in(service, fixed_now):
    result = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now.replace(hour=8, minute=30))

    assert result.track.status == TrackStatus.LATE
    assert result.track.remarks == "Late by 30 min"


def test_second_tap_closes_the_open_track(service, tracks_repo, fixed_now):
    opened = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now).track

    closed = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now.replace(hour=15, minute=5))

    assert closed.action == TAP_OUT
    assert closed.track.id == opened.id
    assert closed.track.status == TrackStatus.PRESENT
    stored = tracks_repo.get(opened.id)
    assert stored.time_out == to_epoch_ms(fixed_now.replace(hour=15, minute=5))
    assert stored.formatted_duration == "7h 10m"


def test_early_leave_becomes_half_day(service, tracks_repo, fixed_now):
    opened = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now).track

    closed = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now.replace(hour=10))

    assert closed.track.status == TrackStatus.HALF_DAY
    assert tracks_repo.get(opened.id).remarks == "Left at 10:00"


def test_open_track_from_yesterday_is_not_closed(service, tracks_repo, fixed_now):
    yesterday = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now - timedelta(days=1)).track

    today = service.tap(user_id="student-1", rfid_tag="RFID-0001", now=fixed_now)

    assert today.action == TAP_IN
    assert tracks_repo.get(yesterday.id).is_in_progress


def test_rejects_unknown_inactive_and_non_student(service, fixed_now):
    with pytest.raises(NotFoundError):
        service.tap(user_id="ghost", rfid_tag="RFID-X", now=fixed_now)
    with pytest.raises(ValidationError, match="deactivated"):
        service.tap(user_id="student-2", rfid_tag="RFID-0002", now=fixed_now)
    with pytest.raises(ValidationError):
        service.tap(user_id="teacher-1", rfid_tag="RFID-T", now=fixed_now)
    with pytest.raises(ValidationError, match="RFID"):
        service.tap(user_id="student-1", rfid_tag="  ", now=fixed_now)


def test_tap_keys_sort_by_time(service, tracks_repo, fixed_now):
    first = service.tap(user_id="student-1", rfid_tag="R1", now=fixed_now - timedelta(days=2)).track
    second = service.tap(user_id="student-3", rfid_tag="R3", now=fixed_now).track

    assert [t.id for t in tracks_repo.list_all()] == [first.id, second.id]


def test_tap_at_end_of_grace_is_present(service):
    result = service.tap(user_id="student-1", rfid_tag="R1", now=datetime(2025, 3, 12, 8, 5))

    assert result.track.status == TrackStatus.PRESENT
