from __future__ import annotations

import importlib
import logging
from logging.config import dictConfig
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .common.web import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container, build_store
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import ensure_indexes, seed_demo_data
from .tracks.controller import register as register_tracks
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def configure_logging(level: str, fmt: str) -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": fmt}},
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "default"},
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": {
                "pymongo": {"level": "WARNING"},
                "werkzeug": {"level": "INFO"},
            },
        }
    )


def _bootstrap(container: Container, settings) -> None:
    if getattr(settings, "AUTO_INIT_DB", False) and container.conn is not None:
        ensure_indexes(container.conn.connect())
    if getattr(settings, "AUTO_SEED_DB", False):
        seed_demo_data(
            container.store,
            container.users_repo,
            container.tracks_repo,
            admin_email=getattr(settings, "DEMO_ADMIN_EMAIL"),
            admin_password=getattr(settings, "DEMO_ADMIN_PASSWORD"),
        )


def create_app(settings_module: Optional[str] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FORMAT"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEVICE_TOKEN"] = getattr(settings, "DEVICE_TOKEN", "")

    if container is None:
        store, conn = build_store(
            backend=getattr(settings, "STORE_BACKEND", "mongo"),
            mongo_config=getattr(settings, "MONGO_CONFIG", None),
        )
        container = build_container(
            store=store,
            conn=conn,
            class_start=getattr(settings, "CLASS_START", "08:00"),
            class_end=getattr(settings, "CLASS_END", "15:00"),
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 5)),
            half_day_threshold_minutes=int(getattr(settings, "HALF_DAY_THRESHOLD_MINUTES", 120)),
            remote_call_timeout_seconds=float(getattr(settings, "REMOTE_CALL_TIMEOUT_SECONDS", 10)),
            bulk_max_workers=int(getattr(settings, "BULK_MAX_WORKERS", 8)),
        )
        _bootstrap(container, settings)

    logger.info("Starting with settings=%s store=%s", settings_module, type(container.store).__name__)

    app.extensions["tapntrack"] = container
    register_error_handlers(app)
    register_auth(app, container)
    register_users(app, container)
    register_tracks(app, container)
    register_attendance(app, container)
    register_dashboard(app, container)

    return app
