"""Settings shared by every environment, read from environment variables."""

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# mongo | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "mongo").lower()

MONGO_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DB", "tapntrack"),
    "timeout_ms": int(os.getenv("MONGO_TIMEOUT_MS", "5000")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")

REMOTE_CALL_TIMEOUT_SECONDS = float(os.getenv("REMOTE_CALL_TIMEOUT_SECONDS", "10"))
BULK_MAX_WORKERS = int(os.getenv("BULK_MAX_WORKERS", "8"))

# School day used to grade taps (HH:MM, local time).
CLASS_START = os.getenv("CLASS_START", "08:00")
CLASS_END = os.getenv("CLASS_END", "15:00")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
HALF_DAY_THRESHOLD_MINUTES = int(os.getenv("HALF_DAY_THRESHOLD_MINUTES", "120"))

# Shared secret RFID readers send as X-Device-Token; empty disables reader access.
DEVICE_TOKEN = os.getenv("DEVICE_TOKEN", "")

DEMO_ADMIN_EMAIL = os.getenv("DEMO_ADMIN_EMAIL", "admin@tapntrack.local")
DEMO_ADMIN_PASSWORD = os.getenv("DEMO_ADMIN_PASSWORD", "admin123")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
DEBUG = False
