"""
Settings service for runtime configuration from environment variables.

Values are read when requested so tests can override them with monkeypatch.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

from hoook.utils.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_TIMEZONE,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_bool_env(key: str, default: bool = True) -> bool:
    """
    Parse a boolean environment variable from a string value.

    Args:
        key: Environment variable name
        default: Default value if the variable is not set

    Returns:
        bool: Parsed boolean value
    """
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def get_float_env(key: str, default: float) -> float:
    """Parse a numeric environment variable, falling back to ``default`` on bad input."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid value for {key}: {value!r}, using {default}")
        return default


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_app_timezone() -> str:
    return os.getenv("APP_TIMEZONE", DEFAULT_TIMEZONE)


def get_map_cache_ttl_seconds() -> float:
    return get_float_env("MAP_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)


def get_map_cache_max_entries() -> int:
    return max(1, int(get_float_env("MAP_CACHE_MAX_ENTRIES", DEFAULT_CACHE_MAX_ENTRIES)))


def get_map_fetch_timeout_seconds() -> float:
    return get_float_env("MAP_FETCH_TIMEOUT_SECONDS", DEFAULT_FETCH_TIMEOUT_SECONDS)


def get_map_data_source() -> str:
    """Either "placeholder" (generated data) or "http" (remote map API)."""
    return os.getenv("MAP_DATA_SOURCE", "placeholder").lower()


def get_map_api_url() -> Optional[str]:
    return os.getenv("MAP_API_URL")


def should_seed_demo_games() -> bool:
    return get_bool_env("SEED_DEMO_GAMES", True)


def get_allowed_origins() -> list:
    return os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")


def is_test_env() -> bool:
    return os.getenv("ENV", "").lower() == "test"
