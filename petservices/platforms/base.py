"""Contract shared by every external listing platform."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from petservices.models import Review, Service, ServiceSource

logger = logging.getLogger(__name__)


class PlatformAdapter(ABC):
    """One external source of pet-service listings.

    Public methods never raise: an error inside a concrete implementation is
    logged with the adapter name and reported as an empty result.
    """

    name: str = ""
    source: ServiceSource = ServiceSource.OTHER

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, enabled={self.enabled})"

    def fetch_services(self, category: str, location: str) -> List[Service]:
        try:
            return self._fetch_services(category, location)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error fetching from %s: %s", self.name, exc)
            return []

    def search_services(
        self,
        query: str,
        category: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[Service]:
        try:
            return self._search_services(query, category, location)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error searching on %s: %s", self.name, exc)
            return []

    def fetch_reviews(self, service_id: str) -> List[Review]:
        try:
            return self._fetch_reviews(service_id)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error fetching reviews for %s from %s: %s", service_id, self.name, exc)
            return []

    @abstractmethod
    def _fetch_services(self, category: str, location: str) -> List[Service]:
        raise NotImplementedError

    @abstractmethod
    def _search_services(
        self,
        query: str,
        category: Optional[str],
        location: Optional[str],
    ) -> List[Service]:
        raise NotImplementedError

    def _fetch_reviews(self, service_id: str) -> List[Review]:
        return []
