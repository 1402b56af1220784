"""CLI job to fetch or search pet services across every platform."""

import argparse
import json
import logging
import sys
from typing import List, Optional, TextIO

from petservices.core.aggregator import ExternalPlatformsService, filter_by_sources
from petservices.core.config import get_settings
from petservices.etl.categories import ALL
from petservices.platforms.registry import build_platforms

logger = logging.getLogger(__name__)


def run_query_job(
    platforms_service: ExternalPlatformsService,
    *,
    category: str,
    location: str,
    query: Optional[str] = None,
    platforms: Optional[List[str]] = None,
    report: bool = False,
    out: TextIO = sys.stdout,
) -> int:
    """Run one aggregate call and write JSON to ``out``; returns the number of services."""
    if query and query.strip():
        result = platforms_service.search_report(
            query.strip(),
            None if category == ALL else category,
            location,
        )
    else:
        result = platforms_service.fetch_report(category, location)

    services = result.services
    if platforms:
        services = filter_by_sources(services, platforms)

    document = {"data": [service.to_dict() for service in services], "count": len(services)}
    if report:
        document["sources"] = {
            name: {"ok": status.ok, "count": status.count, "error": status.error}
            for name, status in result.sources.items()
        }
    json.dump(document, out, ensure_ascii=False, indent=2)
    out.write("\n")

    logger.info("Completed run: services=%d failed_sources=%s", len(services), result.failed_sources or "none")
    return len(services)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aggregate pet services from external platforms")
    parser.add_argument("--category", dest="category", default=ALL, help="Category id, or 'all'")
    parser.add_argument(
        "--location",
        dest="location",
        default=get_settings().default_city,
        help="City name, e.g. jakarta",
    )
    parser.add_argument("--query", dest="query", help="Free-text search; switches from fetch to search")
    parser.add_argument(
        "--platform",
        dest="platforms",
        action="append",
        help="Keep only results from this platform (repeatable)",
    )
    parser.add_argument("--report", action="store_true", help="Include per-platform status in the output")
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args()

    settings = get_settings()
    platforms_service = ExternalPlatformsService(build_platforms(settings), timeout=settings.platform_timeout)
    run_query_job(
        platforms_service,
        category=args.category,
        location=args.location,
        query=args.query,
        platforms=args.platforms,
        report=args.report,
    )


if __name__ == "__main__":
    main()
