"""Fan requests out to every enabled platform and merge the results."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from petservices.core import db
from petservices.models import Service
from petservices.platforms.base import PlatformAdapter

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0

Store = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass
class SourceStatus:
    ok: bool
    count: int = 0
    error: Optional[str] = None


@dataclass
class AggregateResult:
    services: List[Service] = field(default_factory=list)
    sources: Dict[str, SourceStatus] = field(default_factory=dict)

    @property
    def failed_sources(self) -> List[str]:
        return [name for name, status in self.sources.items() if not status.ok]


class ExternalPlatformsService:
    """Aggregates listings from a fixed registry of platforms.

    Every public operation is total: platform failures and timeouts become
    empty contributions and persistence failures become ``None``.
    """

    def __init__(
        self,
        platforms: Sequence[PlatformAdapter],
        store: Optional[Store] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._platforms = tuple(platforms)
        self._store = store or db.insert_service
        self.timeout = timeout

    def get_platforms(self) -> List[PlatformAdapter]:
        return [platform for platform in self._platforms if platform.enabled]

    def get_platform(self, name: str) -> Optional[PlatformAdapter]:
        wanted = name.lower()
        for platform in self.get_platforms():
            if platform.name.lower() == wanted:
                return platform
        return None

    def fetch_services_from_all(self, category: str, location: str) -> List[Service]:
        return self.fetch_report(category, location).services

    def search_across_all(
        self,
        query: str,
        category: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[Service]:
        return self.search_report(query, category, location).services

    def fetch_report(self, category: str, location: str) -> AggregateResult:
        logger.info("Fetching %s services in %s from all platforms", category, location)
        return self._fan_out("fetching from", lambda platform: platform.fetch_services(category, location))

    def search_report(
        self,
        query: str,
        category: Optional[str] = None,
        location: Optional[str] = None,
    ) -> AggregateResult:
        logger.info(
            "Searching for %r in %s at %s on all platforms",
            query,
            category or "all categories",
            location or "all locations",
        )
        return self._fan_out(
            "searching on",
            lambda platform: platform.search_services(query, category, location),
        )

    def save_external_service(self, service: Service) -> Optional[Service]:
        """Persist an external listing as a new record; returns the stored copy or None."""
        try:
            stored = self._store(service.to_db_row())
            return Service.from_db_row(stored)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error saving external service %s: %s", service.id, exc)
            return None

    def _fan_out(
        self,
        action: str,
        call: Callable[[PlatformAdapter], List[Service]],
    ) -> AggregateResult:
        result = AggregateResult()
        platforms = self.get_platforms()
        if not platforms:
            return result

        futures = {_start_daemon(call, platform): platform for platform in platforms}
        _, pending = wait(futures, timeout=self.timeout)

        for future, platform in futures.items():
            if future in pending:
                logger.warning("Timed out %s %s after %.1fs", action, platform.name, self.timeout)
                result.sources[platform.name] = SourceStatus(ok=False, error="timeout")
                continue
            try:
                services = list(future.result())
            except Exception as exc:  # noqa: BLE001
                logger.error("Error %s %s: %s", action, platform.name, exc)
                result.sources[platform.name] = SourceStatus(ok=False, error=str(exc) or type(exc).__name__)
                continue
            result.services.extend(services)
            result.sources[platform.name] = SourceStatus(ok=True, count=len(services))

        logger.info("Merged %d services from %d platforms", len(result.services), len(platforms))
        return result


def filter_by_sources(services: Iterable[Service], names: Iterable[str]) -> List[Service]:
    """Keep services whose source display name or value is in ``names`` (case-insensitive)."""
    wanted = {name.strip().lower() for name in names if name and name.strip()}
    return [
        service
        for service in services
        if service.source.display_name.lower() in wanted or service.source.value in wanted
    ]


def _start_daemon(call: Callable[[PlatformAdapter], List[Service]], platform: PlatformAdapter) -> Future:
    """Run ``call(platform)`` on a daemon thread so a hung platform cannot keep the process alive."""
    future: Future = Future()

    def run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(call(platform))
        except Exception as exc:  # noqa: BLE001
            future.set_exception(exc)

    threading.Thread(target=run, name=f"platform-{platform.name}", daemon=True).start()
    return future
