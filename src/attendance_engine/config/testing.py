import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_test"),
    "connection_timeout": 2,
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False

TIMEZONE = "UTC"
DEFAULT_GRACE_MINUTES = 0
LOOKBACK_HOURS = 12
LOOKAHEAD_HOURS = 16
AUTO_DEDUCT_BREAKS = True
CACHE_TTL_SECONDS = 0
MAX_WORKERS = 1
