from datetime import datetime

from tapntrack.common.datetime_utils import today_iso
from tapntrack.core.enums import TrackStatus
from tapntrack.tracks.model import Track


def test_from_map_reads_current_shape():
    track = Track.from_map(
        {
            "id": "t1",
            "userId": "u1",
            "studentName": "Juan",
            "rfidTag": "RFID-1",
            "timeIn": 1000,
            "timeOut": 4_600_000,
            "date": "2025-01-01",
            "status": "LATE",
            "teacherId": "teacher-1",
        }
    )

    assert track.user_id == "u1"
    assert track.status == TrackStatus.LATE
    assert track.duration_ms == 4_599_000
    assert track.formatted_duration == "1h 16m"
    assert not track.is_in_progress


def test_from_map_falls_back_to_legacy_keys():
    track = Track.from_map({"studentId": "u7", "timestamp": 500, "eventType": "CHECK_IN", "date": "2024-12-31"})

    assert track.user_id == "u7"
    assert track.time_in == 500


def test_missing_or_zero_time_out_means_in_progress():
    assert Track.from_map({"timeIn": 5, "timeOut": 0}).time_out is None
    assert Track.from_map({"timeIn": 5}).is_in_progress
    assert Track.from_map({"timeIn": 5}).duration_ms is None


def test_missing_date_defaults_to_today():
    assert Track.from_map({"timeIn": 5}).date == today_iso()
    assert Track.from_map({"timeIn": 5, "date": ""}).date == today_iso()


def test_unknown_status_and_empty_teacher_default():
    track = Track.from_map({"status": "EXCUSED", "teacherId": ""})

    assert track.status == TrackStatus.PRESENT
    assert track.teacher_id is None


def test_to_map_uses_store_keys(make_track):
    data = make_track("t1", at=datetime(2025, 1, 1, 8, 0), status=TrackStatus.HALF_DAY).to_map()

    assert data["status"] == "HALF_DAY"
    assert data["date"] == "2025-01-01"
    assert data["timeOut"] is None
    assert set(data) >= {"userId", "studentName", "rfidTag", "timeIn", "teacherId", "createdAt", "updatedAt"}


def test_closed_track_survives_store_round_trip():
    track = Track(
        id="t9",
        user_id="student-1",
        time_in=1_741_737_300_000,
        date="2025-03-12",
        student_name="Juan Dela Cruz",
        rfid_tag="RFID-0001",
        time_out=1_741_766_400_000,
        status=TrackStatus.LATE,
        teacher_id="teacher-1",
        location="Gate 2",
        remarks="Traffic",
        created_at=1_741_737_300_000,
        updated_at=1_741_766_400_000,
    )

    assert Track.from_map(track.to_map()) == track
