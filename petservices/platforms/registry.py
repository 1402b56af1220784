"""Build the default set of platforms from settings."""

import logging
from typing import List

from petservices.core.config import Settings
from petservices.platforms.base import PlatformAdapter
from petservices.platforms.google_maps import GoogleMapsPlatform
from petservices.platforms.mock import (
    FacebookPlatform,
    InstagramPlatform,
    MockGoogleMapsPlatform,
    ShopeePlatform,
    TokopediaPlatform,
)

logger = logging.getLogger(__name__)


def build_platforms(settings: Settings) -> List[PlatformAdapter]:
    """One platform per source; those missing from ENABLED_PLATFORMS are disabled."""
    if settings.google_api_key:
        google: PlatformAdapter = GoogleMapsPlatform(settings.google_api_key, radius=settings.search_radius)
    else:
        logger.warning("Using simulated Google Maps results because GOOGLE_API_KEY is not set")
        google = MockGoogleMapsPlatform()

    platforms = [
        google,
        InstagramPlatform(),
        FacebookPlatform(),
        TokopediaPlatform(),
        ShopeePlatform(),
    ]

    if settings.enabled_platforms:
        wanted = {name.lower() for name in settings.enabled_platforms}
        for platform in platforms:
            platform.enabled = platform.name.lower() in wanted
        unknown = wanted - {platform.name.lower() for platform in platforms}
        if unknown:
            logger.warning("Ignoring unknown platforms in ENABLED_PLATFORMS: %s", ", ".join(sorted(unknown)))
    return platforms
