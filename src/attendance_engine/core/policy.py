from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from types import ModuleType
from zoneinfo import ZoneInfo

from . import constants


@dataclass(frozen=True)
class EnginePolicy:
    """Tunable parameters of the engine (grace, windows, break handling).

    Built once from the settings module and handed to the services, so no
    service reads configuration on its own.
    """

    timezone: str = constants.DEFAULT_TIMEZONE
    default_grace_minutes: int = constants.DEFAULT_GRACE_MINUTES
    lookback_hours: int = constants.DEFAULT_LOOKBACK_HOURS
    lookahead_hours: int = constants.DEFAULT_LOOKAHEAD_HOURS
    auto_deduct_breaks: bool = True
    cache_ttl_seconds: int = constants.DEFAULT_CACHE_TTL_SECONDS
    max_workers: int = constants.DEFAULT_MAX_WORKERS

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def lookback(self) -> timedelta:
        return timedelta(hours=self.lookback_hours)

    @property
    def lookahead(self) -> timedelta:
        return timedelta(hours=self.lookahead_hours)

    @classmethod
    def from_settings(cls, settings: ModuleType) -> "EnginePolicy":
        return cls(
            timezone=str(getattr(settings, "TIMEZONE", constants.DEFAULT_TIMEZONE)),
            default_grace_minutes=int(getattr(settings, "DEFAULT_GRACE_MINUTES", constants.DEFAULT_GRACE_MINUTES)),
            lookback_hours=int(getattr(settings, "LOOKBACK_HOURS", constants.DEFAULT_LOOKBACK_HOURS)),
            lookahead_hours=int(getattr(settings, "LOOKAHEAD_HOURS", constants.DEFAULT_LOOKAHEAD_HOURS)),
            auto_deduct_breaks=bool(getattr(settings, "AUTO_DEDUCT_BREAKS", True)),
            cache_ttl_seconds=int(getattr(settings, "CACHE_TTL_SECONDS", constants.DEFAULT_CACHE_TTL_SECONDS)),
            max_workers=int(getattr(settings, "MAX_WORKERS", constants.DEFAULT_MAX_WORKERS)),
        )
