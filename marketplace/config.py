"""
Centralized configuration with environment variable overrides.

Backend endpoints, operating hours, and listing page sizes are all
configurable here. Nothing is hardcoded in screen or tool logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from marketplace.logging_context import SessionIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(session_id)s] [%(name)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BackendConfig:
    """Connection settings for the hosted backend."""

    url: str = os.getenv("BACKEND_URL", "http://localhost:54321")
    anon_key: str = os.getenv("BACKEND_ANON_KEY", "")
    timeout_sec: float = _safe_float("BACKEND_TIMEOUT", "10.0")


@dataclass(frozen=True)
class ScheduleConfig:
    """Operating hours and the window of dates offered by the booking wizard."""

    opening_hour: int = _safe_int("OPENING_HOUR", "8")
    closing_hour: int = _safe_int("CLOSING_HOUR", "18")
    booking_window_days: int = _safe_int("BOOKING_WINDOW_DAYS", "14")


@dataclass(frozen=True)
class ListingConfig:
    """Page sizes for the admin and provider tables."""

    bookings_page_size: int = _safe_int("BOOKINGS_PAGE_SIZE", "10")
    services_page_size: int = _safe_int("SERVICES_PAGE_SIZE", "5")
    users_page_size: int = _safe_int("USERS_PAGE_SIZE", "10")
    pager_width: int = _safe_int("PAGER_WIDTH", "5")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "HomeServices Marketplace")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.backend.timeout_sec <= 0:
        raise ValueError(
            f"BACKEND_TIMEOUT must be > 0, got {config.backend.timeout_sec}"
        )

    for hour_name, hour_value in [
        ("OPENING_HOUR", config.schedule.opening_hour),
        ("CLOSING_HOUR", config.schedule.closing_hour),
    ]:
        if not 0 <= hour_value <= 23:
            raise ValueError(f"{hour_name} must be between 0 and 23, got {hour_value}")

    if config.schedule.opening_hour >= config.schedule.closing_hour:
        raise ValueError(
            "OPENING_HOUR must be before CLOSING_HOUR, "
            f"got {config.schedule.opening_hour} >= {config.schedule.closing_hour}"
        )
    if config.schedule.booking_window_days < 1:
        raise ValueError(
            f"BOOKING_WINDOW_DAYS must be >= 1, got {config.schedule.booking_window_days}"
        )

    for size_name, size_value in [
        ("BOOKINGS_PAGE_SIZE", config.listing.bookings_page_size),
        ("SERVICES_PAGE_SIZE", config.listing.services_page_size),
        ("USERS_PAGE_SIZE", config.listing.users_page_size),
        ("PAGER_WIDTH", config.listing.pager_width),
    ]:
        if size_value < 1:
            raise ValueError(f"{size_name} must be >= 1, got {size_value}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Handler-level so records from plain loggers (httpx, stdlib) also carry an id.
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, SessionIdFilter) for f in handler.filters):
            handler.addFilter(SessionIdFilter())
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
