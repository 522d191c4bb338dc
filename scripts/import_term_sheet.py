#!/usr/bin/env python3
"""
Parse a term sheet (PDF, PNG/JPEG scan or plain text) and print the review bundle.

Usage:
    python scripts/import_term_sheet.py data/term-iv.pdf
    python scripts/import_term_sheet.py data/term-iv.txt --offline
    python scripts/import_term_sheet.py data/term-iv.pdf --commit

Nothing is written unless --commit is given. --offline skips matching room
numbers against the database.
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
from pathlib import Path

from court_facilities.config import get_settings
from court_facilities.db.session import get_connection_pool
from court_facilities.ingestion import TermImportPipeline, validate_file
from court_facilities.terms import TermService


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse a court term sheet into assignments and personnel.")
    parser.add_argument("path", type=Path, help="Term sheet to parse (.pdf, .png, .jpg or .txt).")
    parser.add_argument("--commit", action="store_true", help="Save the parsed term to the database.")
    parser.add_argument("--offline", action="store_true", help="Skip room matching (no database needed).")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(levelname)s %(message)s")

    if not args.path.exists():
        raise SystemExit(f"{args.path} does not exist")
    if args.commit and args.offline:
        raise SystemExit("--commit needs the database; drop --offline")

    settings = get_settings()
    db_pool = get_connection_pool(settings)
    pipeline = TermImportPipeline(settings, TermService(db_pool), db_pool)

    if args.path.suffix.lower() == ".txt":
        text = args.path.read_text(encoding="utf-8")
    else:
        content_type, _ = mimetypes.guess_type(args.path.name)
        validate_file(args.path.name, content_type, args.path.stat().st_size, settings.max_upload_mb)
        text = pipeline.extract_text(args.path)
    import_data = pipeline.parse_text(text, args.path.name)

    if not args.offline:
        db_pool.open(wait=True)
    try:
        if not args.offline:
            pipeline.match_rooms(import_data)
        print(import_data.model_dump_json(indent=2))
        if args.commit:
            term_id = pipeline.commit(import_data)
            logging.info("Saved term %s as %s", import_data.term.term_number, term_id)
    finally:
        if not db_pool.closed:
            db_pool.close()


if __name__ == "__main__":
    main()
