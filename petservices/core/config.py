"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    database_url: str
    worker_port: int = 9000
    search_radius: int = 5000
    platform_timeout: float = 15.0
    default_city: str = "jakarta"
    enabled_platforms: Tuple[str, ...] = ()


def _parse_list(raw: str) -> Tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    search_radius = int(os.getenv("SEARCH_RADIUS_METERS", "5000"))
    platform_timeout = float(os.getenv("PLATFORM_TIMEOUT_SECONDS", "15"))
    default_city = os.getenv("DEFAULT_CITY", "jakarta").strip().lower() or "jakarta"
    enabled_platforms = _parse_list(os.getenv("ENABLED_PLATFORMS", ""))

    if not database_url:
        logger.warning("DATABASE_URL is not set; importing external services will fail.")
    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; Google Maps results will be simulated.")
    if platform_timeout <= 0:
        logger.warning("PLATFORM_TIMEOUT_SECONDS must be positive; falling back to 15 seconds.")
        platform_timeout = 15.0

    return Settings(
        google_api_key=google_api_key,
        database_url=database_url,
        worker_port=worker_port,
        search_radius=search_radius,
        platform_timeout=platform_timeout,
        default_city=default_city,
        enabled_platforms=enabled_platforms,
    )
