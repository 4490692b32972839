"""Example: drive the service layer directly, without Flask.

Controllers are a thin layer; the rules live in the services. This runs on the
in-memory store so it needs no database.
"""

from datetime import datetime

from tapntrack.auth.policy import Caller
from tapntrack.container import build_container
from tapntrack.core.enums import Role
from tapntrack.database.bootstrap import seed_demo_data
from tapntrack.database.memory_store import InMemoryRecordStore
from tapntrack.tracks.query import LogQuery


def main():
    container = build_container(store=InMemoryRecordStore())
    admin = seed_demo_data(
        container.store,
        container.users_repo,
        container.tracks_repo,
        admin_email="admin@example.com",
        admin_password="admin123",
    )
    caller = Caller(uid=admin.uid, role=Role.ADMIN)

    student = container.users_repo.list_by_role(Role.STUDENT)[0]
    tap = container.attendance_service.tap(
        user_id=student.uid, rfid_tag="RFID-0001", location="Main Gate", now=datetime.now()
    )
    print(tap.action, tap.track.status.value)

    view = container.log_service.list_logs(caller, LogQuery())
    print(f"{len(view.logs)} logs, summary={view.summary}")
    print(container.dashboard_service.load(caller))


if __name__ == "__main__":
    main()
