"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

USERS = "users"
TRACKS = "tracks"
CREDENTIALS = "credentials"
PASSWORD_RESETS = "password_resets"

DATE_FORMAT = "%Y-%m-%d"

MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
GENERATED_PASSWORD_LENGTH = 16

DEFAULT_RECENT_ACTIVITY_LIMIT = 5
DEFAULT_REMOTE_CALL_TIMEOUT_SECONDS = 10.0
DEFAULT_BULK_MAX_WORKERS = 8
DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_HALF_DAY_THRESHOLD_MINUTES = 120
PASSWORD_RESET_TTL_MINUTES = 60

# 3000-01-01T00:00:00Z; later timestamps cannot be turned into a local date everywhere.
MAX_TIMESTAMP_MS = 32_503_680_000_000

# Fields an admin or teacher may change on an existing log.
EDITABLE_TRACK_FIELDS = frozenset(
    {"timeIn", "timeOut", "status", "location", "remarks", "studentName", "rfidTag"}
)
