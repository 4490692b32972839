"""Backup database.

Writes every collection to one JSON file under backups/. Password hashes in
`credentials` are included, so keep the output private.
"""

from __future__ import annotations

import importlib
import json
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from tapntrack.config import get_settings_module
from tapntrack.container import build_store
from tapntrack.core.constants import CREDENTIALS, PASSWORD_RESETS, TRACKS, USERS

COLLECTIONS = (USERS, TRACKS, CREDENTIALS, PASSWORD_RESETS)


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"tapntrack_{ts}.json"

    store, conn = build_store(backend="mongo", mongo_config=dict(settings.MONGO_CONFIG))
    try:
        dump = {name: store.get_all(name) for name in COLLECTIONS}
    finally:
        conn.close()

    with out_file.open("w", encoding="utf-8") as f:
        json.dump(dump, f, ensure_ascii=False, indent=2)
    counts = ", ".join(f"{name}={len(docs)}" for name, docs in dump.items())
    print(f"OK: Backup created: {out_file} ({counts})")


if __name__ == "__main__":
    main()
