"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta

DEFAULT_TIMEZONE = "UTC"
DEFAULT_GRACE_MINUTES = 5
DEFAULT_LOOKBACK_HOURS = 12
DEFAULT_LOOKAHEAD_HOURS = 16
DEFAULT_CACHE_TTL_SECONDS = 60
DEFAULT_MAX_WORKERS = 4

# Gap inserted when an interval is force-closed by the next punch.
ONE_TICK = timedelta(microseconds=1)
