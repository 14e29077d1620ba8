"""Configuration for the booking calendar admin tool.

Everything deployment-specific comes from the environment (or a local .env
file). Business constants live here as module-level values.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

# Wire format for blocked dates
DATE_FORMAT_HINT = "DD-MM-YYYY"
DATE_EXAMPLE = "15-03-2025"

# Accepted year range (inclusive)
MIN_YEAR = 2024
MAX_YEAR = 2100

# Push channel event name
UPDATE_EVENT = "updateDates"

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_DATABASE_URL = "sqlite:///booked_dates.db"


def _parse_list(raw: Optional[str], default: List[str]) -> List[str]:
    if not raw or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by the API server and the bot."""
    api_secret: str = ""
    database_url: str = DEFAULT_DATABASE_URL
    database_timeout_seconds: int = 10
    cors_allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    telegram_bot_token: Optional[str] = None
    api_url: str = DEFAULT_API_URL
    http_timeout_seconds: int = 15
    bot_rate_limit_requests: int = 5
    bot_rate_limit_window_seconds: int = 60


def load_settings() -> Settings:
    """
    Build Settings from environment variables.

    Reads a .env file from the working directory (or a parent) first;
    real environment variables win.
    """
    load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        api_secret=os.getenv("API_SECRET", ""),
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        database_timeout_seconds=int(os.getenv("DATABASE_TIMEOUT_SECONDS", "10")),
        cors_allowed_origins=_parse_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["*"]),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN") or None,
        api_url=os.getenv("API_URL", DEFAULT_API_URL).rstrip("/"),
        http_timeout_seconds=int(os.getenv("HTTP_TIMEOUT_SECONDS", "15")),
        bot_rate_limit_requests=int(os.getenv("BOT_RATE_LIMIT_REQUESTS", "5")),
        bot_rate_limit_window_seconds=int(os.getenv("BOT_RATE_LIMIT_WINDOW_SECONDS", "60")),
    )
