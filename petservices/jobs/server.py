"""HTTP entrypoint exposing the platform aggregator (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from petservices.core.aggregator import ExternalPlatformsService, filter_by_sources
from petservices.core.config import get_settings
from petservices.etl.categories import ALL
from petservices.models import Service
from petservices.platforms.registry import build_platforms

logger = logging.getLogger(__name__)


def create_app(platforms_service: ExternalPlatformsService, default_city: Optional[str] = None) -> Flask:
    app = Flask(__name__)
    city_fallback = default_city or get_settings().default_city

    @app.get("/healthz")
    def healthcheck() -> Any:
        return (
            jsonify(
                {
                    "status": "ok",
                    "platforms": [platform.name for platform in platforms_service.get_platforms()],
                    "revision": os.getenv("K_REVISION", "unknown"),
                }
            ),
            200,
        )

    @app.get("/platforms")
    def list_platforms() -> Any:
        data = [
            {"name": platform.name, "source": platform.source.value}
            for platform in platforms_service.get_platforms()
        ]
        return jsonify({"data": data}), 200

    @app.get("/services")
    def list_services() -> Any:
        """
        Fetch or search external listings.
        Query params: q (switches to search), category, location, platforms (comma list).
        """
        query = (request.args.get("q") or "").strip()
        category = (request.args.get("category") or ALL).strip() or ALL
        location = (request.args.get("location") or city_fallback).strip()

        if query:
            services = platforms_service.search_across_all(
                query,
                None if category == ALL else category,
                location,
            )
        else:
            services = platforms_service.fetch_services_from_all(category, location)

        platforms_raw = request.args.get("platforms")
        if platforms_raw:
            services = filter_by_sources(services, platforms_raw.split(","))

        return jsonify({"data": [service.to_dict() for service in services], "count": len(services)}), 200

    @app.post("/services/import")
    def import_service() -> Any:
        payload: Dict[str, Any] = request.get_json(silent=True) or {}
        if not payload.get("name"):
            return jsonify({"error": "name is required"}), 400

        try:
            service = Service.from_dict(payload)
        except (TypeError, ValueError) as exc:
            return jsonify({"error": str(exc)}), 400

        stored = platforms_service.save_external_service(service)
        if stored is None:
            return jsonify({"error": "failed to import service"}), 502
        return jsonify({"data": stored.to_dict()}), 201

    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    settings = get_settings()
    platforms_service = ExternalPlatformsService(
        build_platforms(settings),
        timeout=settings.platform_timeout,
    )
    app = create_app(platforms_service, default_city=settings.default_city)

    port = int(os.getenv("PORT") or settings.worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
