"""
Runtime configuration for the booking service.

Values come from the environment (a local ``.env`` is honoured) and are
validated once; anything malformed fails at startup with the offending
variable named.
"""

import os
from dataclasses import dataclass
from datetime import time, timedelta
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


def _safe_int(env_var: str, default: str) -> int:
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


def _safe_time(env_var: str, default: str) -> time:
    raw = os.getenv(env_var, default)
    try:
        return time.fromisoformat(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid time of day for {env_var}: {raw!r}") from None


def _optional(env_var: str) -> Optional[str]:
    value = os.getenv(env_var, "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    database_service_url: Optional[str]
    database_url: Optional[str]
    shop_timezone: str
    opening_time: time
    closing_time: time
    slot_minutes: int
    lead_time_minutes: int
    booking_window_days: int
    admin_password: str
    admin_salt: str
    admin_cookie_name: str
    admin_cookie_max_age: int
    environment: str
    notify_webhook_url: Optional[str]
    notify_timeout_seconds: int
    cors_origins: tuple

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.shop_timezone)

    @property
    def lead_time(self) -> timedelta:
        return timedelta(minutes=self.lead_time_minutes)


def _validate_settings(settings: Settings) -> None:
    """Reject values the availability engine cannot work with."""
    try:
        ZoneInfo(settings.shop_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown SHOP_TIMEZONE: {settings.shop_timezone!r}") from None
    if settings.closing_time <= settings.opening_time:
        raise ValueError(
            f"CLOSING_TIME must be after OPENING_TIME, got "
            f"{settings.opening_time.isoformat()}-{settings.closing_time.isoformat()}"
        )
    if settings.slot_minutes < 1:
        raise ValueError(f"SLOT_MINUTES must be >= 1, got {settings.slot_minutes}")
    if settings.lead_time_minutes < 0:
        raise ValueError(f"LEAD_TIME_MINUTES must be >= 0, got {settings.lead_time_minutes}")
    if settings.booking_window_days < 1:
        raise ValueError(
            f"BOOKING_WINDOW_DAYS must be >= 1, got {settings.booking_window_days}"
        )
    if settings.notify_timeout_seconds < 1:
        raise ValueError(
            f"NOTIFY_TIMEOUT_SECONDS must be >= 1, got {settings.notify_timeout_seconds}"
        )


def load_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "*")
    settings = Settings(
        database_service_url=_optional("DATABASE_SERVICE_URL"),
        database_url=_optional("DATABASE_URL"),
        shop_timezone=os.getenv("SHOP_TIMEZONE", "Europe/Belgrade"),
        opening_time=_safe_time("OPENING_TIME", "09:00"),
        closing_time=_safe_time("CLOSING_TIME", "17:00"),
        slot_minutes=_safe_int("SLOT_MINUTES", "30"),
        lead_time_minutes=_safe_int("LEAD_TIME_MINUTES", "120"),
        booking_window_days=_safe_int("BOOKING_WINDOW_DAYS", "5"),
        admin_password=os.getenv("ADMIN_PASSWORD", "1234"),
        admin_salt=os.getenv("ADMIN_SALT", "admin-secret-salt"),
        admin_cookie_name=os.getenv("ADMIN_COOKIE_NAME", "admin_auth"),
        admin_cookie_max_age=_safe_int("ADMIN_COOKIE_MAX_AGE", str(60 * 60 * 24 * 7)),
        environment=os.getenv("ENV", "development"),
        notify_webhook_url=_optional("NOTIFY_WEBHOOK_URL"),
        notify_timeout_seconds=_safe_int("NOTIFY_TIMEOUT_SECONDS", "5"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )
    _validate_settings(settings)
    return settings


@lru_cache
def get_settings() -> Settings:
    return load_settings()
