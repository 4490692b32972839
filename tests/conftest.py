from __future__ import annotations

from datetime import datetime, time

import pytest

from tapntrack.attendance.model import SchoolDay
from tapntrack.auth.policy import Caller
from tapntrack.bulk.coordinator import BulkMutationCoordinator
from tapntrack.common.datetime_utils import date_from_ms, to_epoch_ms
from tapntrack.core.enums import Role, TrackStatus
from tapntrack.database.memory_store import InMemoryRecordStore
from tapntrack.tracks.model import Track
from tapntrack.tracks.store_track_repository import StoreTrackRepository
from tapntrack.users.model import User
from tapntrack.users.store_user_repository import StoreUserRepository


@pytest.fixture
def fixed_now() -> datetime:
    # A Wednesday, shortly before class starts.
    return datetime(2025, 3, 12, 7, 55, 0)


@pytest.fixture
def school_day() -> SchoolDay:
    return SchoolDay(class_start=time(8, 0), class_end=time(15, 0), grace_minutes=5, half_day_threshold_minutes=120)


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def users_repo(store) -> StoreUserRepository:
    return StoreUserRepository(store)


@pytest.fixture
def tracks_repo(store) -> StoreTrackRepository:
    return StoreTrackRepository(store)


@pytest.fixture
def coordinator():
    c = BulkMutationCoordinator(timeout_seconds=2.0, max_workers=4)
    yield c
    c.close()


@pytest.fixture
def admin() -> Caller:
    return Caller(uid="admin-1", role=Role.ADMIN)


@pytest.fixture
def teacher() -> Caller:
    return Caller(uid="teacher-1", role=Role.TEACHER)


@pytest.fixture
def make_track():
    def _make(
        track_id: str,
        *,
        at: datetime,
        user_id: str = "student-1",
        student_name: str = "Juan Dela Cruz",
        status: TrackStatus = TrackStatus.PRESENT,
        teacher_id: str = "teacher-1",
        time_out: datetime = None,
        rfid_tag: str = "RFID-0001",
        location: str = "Main Gate",
    ) -> Track:
        time_in = to_epoch_ms(at)
        return Track(
            id=track_id,
            user_id=user_id,
            student_name=student_name,
            rfid_tag=rfid_tag,
            time_in=time_in,
            time_out=to_epoch_ms(time_out) if time_out else None,
            date=date_from_ms(time_in),
            status=status,
            teacher_id=teacher_id,
            location=location,
            created_at=time_in,
            updated_at=time_in,
        )

    return _make


@pytest.fixture
def school(users_repo):
    """One admin, one teacher with two students, and a second teacher with one student."""
    people = [
        User(uid="admin-1", email="admin@school.test", name="Ada Admin", role=Role.ADMIN, created_at=1),
        User(uid="teacher-1", email="maria@school.test", name="Maria Santos", role=Role.TEACHER, created_at=2),
        User(uid="teacher-2", email="jose@school.test", name="Jose Rizal", role=Role.TEACHER, created_at=3),
        User(
            uid="student-1", email="juan@school.test", name="Juan Dela Cruz",
            teacher_id="teacher-1", created_at=4, last_login_time=40,
        ),
        User(
            uid="student-2", email="ana@school.test", name="ana Reyes",
            teacher_id="teacher-1", created_at=5, last_login_time=50, is_active=False,
        ),
        User(uid="student-3", email="paolo@school.test", name="Paolo Garcia", teacher_id="teacher-2", created_at=6),
    ]
    for user in people:
        users_repo.save(user)
    return {u.uid: u for u in people}
