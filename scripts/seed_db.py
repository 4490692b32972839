from __future__ import annotations

import importlib

from dotenv import load_dotenv

from tapntrack.config import get_settings_module
from tapntrack.container import build_store
from tapntrack.database.bootstrap import seed_demo_data
from tapntrack.tracks.store_track_repository import StoreTrackRepository
from tapntrack.users.store_user_repository import StoreUserRepository


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    store, conn = build_store(backend="mongo", mongo_config=dict(settings.MONGO_CONFIG))
    try:
        admin = seed_demo_data(
            store,
            StoreUserRepository(store),
            StoreTrackRepository(store),
            admin_email=settings.DEMO_ADMIN_EMAIL,
            admin_password=settings.DEMO_ADMIN_PASSWORD,
        )
    finally:
        conn.close()
    print(f"OK: Seeded database, admin login: {admin.email}")


if __name__ == "__main__":
    main()
