from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.model import SchoolDay
from .attendance.service import AttendanceService
from .attendance.statistics import StatisticsService
from .auth.local_provider import StoreAuthProvider
from .auth.service import AccountService, AuthService
from .bulk.coordinator import BulkMutationCoordinator
from .common.datetime_utils import parse_clock
from .core.constants import (
    DEFAULT_BULK_MAX_WORKERS,
    DEFAULT_HALF_DAY_THRESHOLD_MINUTES,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_REMOTE_CALL_TIMEOUT_SECONDS,
)
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, MongoConfig
from .database.memory_store import InMemoryRecordStore
from .database.mongo_store import MongoRecordStore
from .database.store import RecordStore
from .tracks.service import LogService
from .tracks.store_track_repository import StoreTrackRepository
from .users.service import UserService
from .users.store_user_repository import StoreUserRepository


@dataclass(frozen=True)
class Container:
    store: RecordStore
    conn: Optional[DatabaseConnection]

    users_repo: StoreUserRepository
    tracks_repo: StoreTrackRepository
    auth_provider: StoreAuthProvider
    coordinator: BulkMutationCoordinator

    auth_service: AuthService
    account_service: AccountService
    user_service: UserService
    log_service: LogService
    statistics_service: StatisticsService
    attendance_service: AttendanceService
    dashboard_service: DashboardService


def build_store(*, backend: str, mongo_config: Optional[dict] = None) -> tuple:
    """Return (store, connection); the connection is None for the memory backend."""
    if backend == "memory":
        return InMemoryRecordStore(), None
    if backend != "mongo":
        raise ValueError(f"Unknown STORE_BACKEND: {backend}")
    cfg = mongo_config or {}
    conn = DatabaseConnection.get_instance(
        MongoConfig(
            uri=str(cfg.get("uri", "mongodb://localhost:27017")),
            database=str(cfg.get("database", "tapntrack")),
            timeout_ms=int(cfg.get("timeout_ms", 5000)),
        )
    )
    return MongoRecordStore(conn), conn


def build_container(
    *,
    store: RecordStore,
    conn: Optional[DatabaseConnection] = None,
    class_start: str = "08:00",
    class_end: str = "15:00",
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    half_day_threshold_minutes: int = DEFAULT_HALF_DAY_THRESHOLD_MINUTES,
    remote_call_timeout_seconds: float = DEFAULT_REMOTE_CALL_TIMEOUT_SECONDS,
    bulk_max_workers: int = DEFAULT_BULK_MAX_WORKERS,
) -> Container:
    users_repo = StoreUserRepository(store)
    tracks_repo = StoreTrackRepository(store)
    auth_provider = StoreAuthProvider(store)
    coordinator = BulkMutationCoordinator(
        timeout_seconds=remote_call_timeout_seconds,
        max_workers=bulk_max_workers,
    )
    school_day = SchoolDay(
        class_start=parse_clock(class_start),
        class_end=parse_clock(class_end),
        grace_minutes=grace_minutes,
        half_day_threshold_minutes=half_day_threshold_minutes,
    )

    statistics_service = StatisticsService(tracks_repo, users_repo)

    return Container(
        store=store,
        conn=conn,
        users_repo=users_repo,
        tracks_repo=tracks_repo,
        auth_provider=auth_provider,
        coordinator=coordinator,
        auth_service=AuthService(auth_provider, users_repo),
        account_service=AccountService(auth_provider, users_repo),
        user_service=UserService(users_repo, tracks_repo, statistics_service, coordinator),
        log_service=LogService(tracks_repo, coordinator),
        statistics_service=statistics_service,
        attendance_service=AttendanceService(
            tracks_repo,
            users_repo,
            school_day=school_day,
            strategy_factory=AttendanceStrategyFactory(),
        ),
        dashboard_service=DashboardService(users_repo, tracks_repo),
    )
