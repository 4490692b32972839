from __future__ import annotations

import importlib

from dotenv import load_dotenv

from tapntrack.config import get_settings_module
from tapntrack.container import build_store
from tapntrack.database.bootstrap import ensure_indexes


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    mongo_config = dict(settings.MONGO_CONFIG)

    _, conn = build_store(backend="mongo", mongo_config=mongo_config)
    try:
        created = ensure_indexes(conn.connect())
    finally:
        conn.close()
    print(f"OK: Indexes ready on {mongo_config['database']} ({len(created)} indexes)")


if __name__ == "__main__":
    main()
