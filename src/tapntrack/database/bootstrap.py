"""Database setup helpers used by `create_app` and the scripts."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from pymongo import ASCENDING
from pymongo.database import Database

from ..auth.local_provider import StoreAuthProvider
from ..common.datetime_utils import date_from_ms, now_local, to_epoch_ms
from ..core.constants import CREDENTIALS, TRACKS, USERS
from ..core.enums import Role, TrackStatus
from ..tracks.model import Track
from ..tracks.repository import TrackRepository
from ..users.model import User
from ..users.repository import UserRepository
from .mongo_store import store_call
from .store import RecordStore, new_key

logger = logging.getLogger(__name__)

INDEXES: List[Tuple[str, str]] = [
    (USERS, "role"),
    (USERS, "teacherId"),
    (TRACKS, "userId"),
    (TRACKS, "teacherId"),
    (TRACKS, "date"),
    (CREDENTIALS, "email"),
]


def ensure_indexes(db: Database) -> List[str]:
    """Create the single-field indexes the queries rely on (idempotent)."""
    created = []
    with store_call("create indexes"):
        for collection, field in INDEXES:
            unique = collection == CREDENTIALS
            created.append(db[collection].create_index([(field, ASCENDING)], unique=unique))
    logger.info("Indexes ready: %s", ", ".join(created))
    return created


def _ensure_account(
    store: RecordStore,
    auth: StoreAuthProvider,
    users: UserRepository,
    *,
    email: str,
    password: str,
    name: str,
    role: Role,
    teacher_id: Optional[str] = None,
    now_ms: int,
) -> User:
    existing = store.query_by_field(CREDENTIALS, "email", email.lower())
    if existing:
        user = users.get(existing[0]["uid"])
        if user:
            return user
        uid = existing[0]["uid"]
    else:
        uid = auth.create_account(email, password)
    user = User(uid=uid, email=email.lower(), name=name, role=role, teacher_id=teacher_id, created_at=now_ms)
    users.save(user)
    return user


def seed_demo_data(
    store: RecordStore,
    users: UserRepository,
    tracks: TrackRepository,
    *,
    admin_email: str,
    admin_password: str,
    now: Optional[datetime] = None,
) -> User:
    """Demo admin, one teacher, three students and a few days of tracks.

    Accounts are matched by email, so running it twice adds no duplicates.
    Tracks are only added when the demo students have none.
    """
    now = now or now_local()
    now_ms = to_epoch_ms(now)
    auth = StoreAuthProvider(store)

    admin = _ensure_account(
        store, auth, users, email=admin_email, password=admin_password, name="Demo Admin", role=Role.ADMIN, now_ms=now_ms
    )
    teacher = _ensure_account(
        store, auth, users,
        email="teacher@tapntrack.local", password="teacher123", name="Maria Santos", role=Role.TEACHER, now_ms=now_ms,
    )
    students = [
        _ensure_account(
            store, auth, users,
            email=f"student{i}@tapntrack.local", password="student123", name=name,
            role=Role.STUDENT, teacher_id=teacher.uid, now_ms=now_ms,
        )
        for i, name in enumerate(["Juan Dela Cruz", "Ana Reyes", "Paolo Garcia"], start=1)
    ]
    auth.sign_out()

    if any(tracks.list_by_user(s.uid) for s in students):
        logger.info("Demo tracks already present, skipping")
        return admin

    statuses = [TrackStatus.PRESENT, TrackStatus.LATE, TrackStatus.PRESENT]
    for days_ago in range(1, 4):
        day = (now - timedelta(days=days_ago)).replace(hour=8, minute=0, second=0, microsecond=0)
        for offset, (student, status) in enumerate(zip(students, statuses)):
            tap_in = day + timedelta(minutes=offset * 7)
            time_in = to_epoch_ms(tap_in)
            time_out = to_epoch_ms(tap_in + timedelta(hours=7))
            tracks.save(
                Track(
                    id=new_key(time_in),
                    user_id=student.uid,
                    student_name=student.name,
                    rfid_tag=f"RFID-{offset + 1:04d}",
                    time_in=time_in,
                    time_out=time_out,
                    date=date_from_ms(time_in),
                    status=status,
                    teacher_id=teacher.uid,
                    location="Main Gate",
                    created_at=time_in,
                    updated_at=time_out,
                )
            )
    logger.info("Demo data seeded for %d students", len(students))
    return admin
