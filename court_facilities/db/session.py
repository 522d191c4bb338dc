"""
PostgreSQL connection utilities.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path

from psycopg import Connection
from psycopg.rows import dict_row
from psycopg.types.string import TextLoader
from psycopg_pool import ConnectionPool

from court_facilities.config import Settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")

_POOL: ConnectionPool | None = None


def get_connection_pool(settings: Settings) -> ConnectionPool:
    """Return a global ConnectionPool instance.

    The pool is created closed; the application lifespan opens it.
    """
    global _POOL
    if _POOL is None:
        def configure_connection(conn):
            """Load UUID columns as plain strings on each pooled connection."""
            conn.adapters.register_loader("uuid", TextLoader)

        _POOL = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            open=False,
            kwargs={"row_factory": dict_row},
            configure=configure_connection,
        )
    return _POOL


@contextmanager
def get_connection(settings: Settings):
    """Context manager that yields a psycopg connection, opening the pool if needed."""
    pool = get_connection_pool(settings)
    if pool.closed:
        pool.open(wait=True)
    with pool.connection() as conn:
        yield conn


def apply_schema(conn: Connection) -> None:
    """Create missing tables and indexes."""
    logger.info("Applying schema from %s", SCHEMA_PATH)
    conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
    conn.commit()
