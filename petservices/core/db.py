"""Database helpers for persisting imported listings."""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import psycopg2
from psycopg2 import extras, pool

from petservices.core.config import get_settings

logger = logging.getLogger(__name__)

_connection_pool: Optional[pool.SimpleConnectionPool] = None


def init_pool(minconn: int = 1, maxconn: int = 5) -> pool.SimpleConnectionPool:
    """Initialise and return the shared connection pool."""
    global _connection_pool
    if _connection_pool is None:
        settings = get_settings()
        if not settings.database_url:
            raise RuntimeError("DATABASE_URL is required for database connections")
        _connection_pool = pool.SimpleConnectionPool(
            minconn,
            maxconn,
            dsn=settings.database_url,
            connect_timeout=10,
        )
        logger.info("Database connection pool initialised")
    return _connection_pool


@contextmanager
def get_connection():
    """Context manager yielding a pooled connection."""
    pg_pool = init_pool()
    conn = pg_pool.getconn()
    try:
        yield conn
    finally:
        pg_pool.putconn(conn)


def _prepare_params(row: Dict[str, Any]) -> Dict[str, Any]:
    source = row.get("source")
    return {
        "name": row.get("name"),
        "description": row.get("description"),
        "address": row.get("address"),
        "city": row.get("city"),
        "category_id": row.get("category_id"),
        "contact_phone": row.get("contact_phone"),
        "contact_email": row.get("contact_email"),
        "website": row.get("website"),
        "operating_hours": row.get("operating_hours"),
        "price_range": row.get("price_range"),
        "latitude": row.get("latitude"),
        "longitude": row.get("longitude"),
        "verified": bool(row.get("verified")),
        "source": getattr(source, "value", source),
        "external_id": row.get("external_id"),
        "external_url": row.get("external_url"),
    }


_INSERT_SERVICE = """
INSERT INTO services (
    name,
    description,
    address,
    city,
    category_id,
    contact_phone,
    contact_email,
    website,
    operating_hours,
    price_range,
    latitude,
    longitude,
    verified,
    source,
    external_id,
    external_url
) VALUES (
    %(name)s,
    %(description)s,
    %(address)s,
    %(city)s,
    %(category_id)s,
    %(contact_phone)s,
    %(contact_email)s,
    %(website)s,
    %(operating_hours)s,
    %(price_range)s,
    %(latitude)s,
    %(longitude)s,
    %(verified)s,
    %(source)s,
    %(external_id)s,
    %(external_url)s
)
RETURNING *;
"""


def insert_service(row: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a listing row and return the stored record with its assigned id."""
    params = _prepare_params(row)
    if not params["name"]:
        raise ValueError("name is required for insert")

    with get_connection() as conn:
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(_INSERT_SERVICE, params)
                stored = cur.fetchone()
            conn.commit()
        except psycopg2.Error:
            conn.rollback()
            raise
    if stored is None:
        raise RuntimeError("insert returned no row")
    logger.debug("Inserted service %s as id=%s", params["name"], stored.get("id"))
    return dict(stored)
