import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_db"),
    "connection_timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "3")),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

TIMEZONE = os.getenv("TIMEZONE", "America/Sao_Paulo")
DEFAULT_GRACE_MINUTES = int(os.getenv("DEFAULT_GRACE_MINUTES", "5"))
LOOKBACK_HOURS = int(os.getenv("LOOKBACK_HOURS", "12"))
LOOKAHEAD_HOURS = int(os.getenv("LOOKAHEAD_HOURS", "16"))
AUTO_DEDUCT_BREAKS = bool(int(os.getenv("AUTO_DEDUCT_BREAKS", "1")))
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "60"))
MAX_WORKERS = int(os.getenv("MAX_WORKERS", "8"))
