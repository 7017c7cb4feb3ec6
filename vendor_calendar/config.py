"""
Centralized configuration with environment variable overrides.

The reference timezone, week layout, form defaults and backend location
are all configurable here. Nothing zone- or endpoint-specific is
hardcoded in calendar or store logic.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

WEEKDAY_INDEX: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _optional(env_var: str) -> Optional[str]:
    """Return the env var value, treating blank strings as unset."""
    raw = os.getenv(env_var, "").strip()
    return raw or None


@dataclass(frozen=True)
class CalendarConfig:
    """Reference timezone and calendar layout settings."""

    timezone: str = os.getenv("CALENDAR_TIMEZONE", "America/Denver")
    week_start: str = os.getenv("CALENDAR_WEEK_START", "sunday")
    default_start_time: str = os.getenv("DEFAULT_START_TIME", "09:00")
    default_end_time: str = os.getenv("DEFAULT_END_TIME", "18:00")

    @property
    def week_start_index(self) -> int:
        """Python weekday number (Monday=0) of the first column."""
        return WEEKDAY_INDEX[self.week_start.strip().lower()]


@dataclass(frozen=True)
class BackendConfig:
    """Location and credentials of the availability backend."""

    base_url: str = os.getenv("API_BASE_URL", "http://localhost:8000")
    timeout_seconds: float = _safe_float("API_TIMEOUT_SECONDS", "15.0")
    auth_token: Optional[str] = _optional("API_AUTH_TOKEN")
    vendor_id: Optional[str] = _optional("VENDOR_ID")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "vendor-calendar")


def _validate_time(env_var: str, value: str) -> None:
    try:
        datetime.strptime(value.strip(), "%H:%M")
    except ValueError:
        raise ValueError(f"{env_var} must be HH:MM, got {value!r}") from None


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    try:
        ZoneInfo(config.calendar.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"CALENDAR_TIMEZONE is not a known timezone: {config.calendar.timezone!r}"
        ) from None

    if config.calendar.week_start.strip().lower() not in WEEKDAY_INDEX:
        raise ValueError(
            "CALENDAR_WEEK_START must be a weekday name, "
            f"got {config.calendar.week_start!r}"
        )

    _validate_time("DEFAULT_START_TIME", config.calendar.default_start_time)
    _validate_time("DEFAULT_END_TIME", config.calendar.default_end_time)

    if config.backend.timeout_seconds <= 0:
        raise ValueError(
            f"API_TIMEOUT_SECONDS must be > 0, got {config.backend.timeout_seconds}"
        )
    if not config.backend.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"API_BASE_URL must be an http(s) URL, got {config.backend.base_url!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(
        "Configuration loaded for '%s' (timezone %s)",
        config.app_name, config.calendar.timezone,
    )
    return config


# Singleton instance
settings = load_config()
