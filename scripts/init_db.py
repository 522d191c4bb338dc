#!/usr/bin/env python3
"""
Create the court facilities tables in the configured PostgreSQL database.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --database-url postgresql://localhost/court_facilities
"""

from __future__ import annotations

import argparse
import logging

from court_facilities.config import get_settings
from court_facilities.db.session import apply_schema, get_connection


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply db/schema.sql to DATABASE_URL.")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL from the environment.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(message)s")

    settings = get_settings()
    if args.database_url:
        settings = settings.model_copy(update={"database_url": args.database_url})
    with get_connection(settings) as conn:
        apply_schema(conn)
    logging.info("Schema applied to %s", settings.database_url.rsplit("@", 1)[-1])


if __name__ == "__main__":
    main()
