"""
Term sheet import pipeline: upload -> text -> review bundle -> database.
"""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Optional

from PyPDF2 import PdfReader
from psycopg_pool import ConnectionPool

from court_facilities.config import Settings
from court_facilities.db import queries
from court_facilities.errors import ImportValidationError
from court_facilities.ingestion import ocr, parsing
from court_facilities.ingestion.fetch import DocumentFetcher
from court_facilities.ingestion.manual import parse_manual_input
from court_facilities.ingestion.matching import match_room_ids
from court_facilities.ingestion.samples import sample_term_data
from court_facilities.schemas import TermImportData
from court_facilities.terms.service import TermService

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"application/pdf", "image/png", "image/jpeg"}
EXTENSIONS_BY_TYPE = {"application/pdf": ".pdf", "image/png": ".png", "image/jpeg": ".jpg"}
ALLOWED_EXTENSION_RE = re.compile(r"\.(pdf|jpe?g|png)$", re.IGNORECASE)
SAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")
# Below this many characters a PDF text layer is treated as a scan.
MIN_TEXT_LAYER_CHARS = 40


def validate_file(filename: Optional[str], content_type: Optional[str], size: int, max_mb: int = 10) -> None:
    """Reject missing, oversized or unsupported term documents."""
    if not filename or size <= 0:
        raise ImportValidationError("No file provided")
    if size > max_mb * 1024 * 1024:
        raise ImportValidationError(f"File too large. Maximum size is {max_mb}MB")
    if (content_type or "") not in ALLOWED_CONTENT_TYPES and not ALLOWED_EXTENSION_RE.search(filename):
        raise ImportValidationError("Unsupported file format. Please upload a PDF, PNG, or JPEG file")


class TermImportPipeline:
    def __init__(
        self,
        settings: Settings,
        term_service: TermService,
        db_pool: ConnectionPool,
        fetcher: Optional[DocumentFetcher] = None,
    ) -> None:
        self.settings = settings
        self.term_service = term_service
        self.db_pool = db_pool
        self.fetcher = fetcher or DocumentFetcher(timeout=settings.fetch_timeout_seconds)

    def import_document(self, filename: str, content_type: Optional[str], content: bytes) -> TermImportData:
        """Turn an uploaded PDF or image into a review bundle. Nothing is saved to the database."""
        validate_file(filename, content_type, len(content), self.settings.max_upload_mb)
        path = self.store_upload(filename, content, content_type)
        text = self.extract_text(path)
        import_data = self.parse_text(text, filename)
        self.match_rooms(import_data)
        logger.info(
            "Prepared %s import from %s: term %s, %d assignments",
            import_data.source,
            filename,
            import_data.term.term_number,
            len(import_data.assignments),
        )
        return import_data

    def import_text(self, text: str) -> TermImportData:
        import_data = parse_manual_input(
            text,
            default_location=self.settings.default_term_location,
            phone_prefix=self.settings.phone_exchange_prefix,
        )
        self.match_rooms(import_data)
        return import_data

    def commit(self, import_data: TermImportData) -> str:
        return self.term_service.bulk_create_term_data(import_data)

    def reimport_from_url(self, term_id: str, url: str) -> dict:
        """Download a published term sheet and replace the term's schedule with it."""
        document = self.fetcher.fetch(url)
        validate_file(document.filename, document.content_type, len(document.content), self.settings.max_upload_mb)
        path = self.store_upload(document.filename, document.content, document.content_type)
        import_data = self.parse_text(self.extract_text(path), document.filename)
        self.match_rooms(import_data)
        summary = self.term_service.replace_term_schedule(term_id, import_data)
        summary["warnings"] = import_data.warnings
        return summary

    # --- Pipeline stages -------------------------------------------------

    def store_upload(self, filename: str, content: bytes, content_type: Optional[str] = None) -> Path:
        folder = Path(self.settings.upload_dir) / "term-imports"
        folder.mkdir(parents=True, exist_ok=True)
        safe_name = SAFE_NAME_RE.sub("_", Path(filename).name)
        if not ALLOWED_EXTENSION_RE.search(safe_name) and content_type in EXTENSIONS_BY_TYPE:
            safe_name += EXTENSIONS_BY_TYPE[content_type]
        path = folder / f"{int(time.time() * 1000)}-{safe_name}"
        path.write_bytes(content)
        logger.debug("Stored upload at %s", path)
        return path

    def extract_text(self, path: Path) -> str:
        """PDF text layer first, OCR for scans and images."""
        if path.suffix.lower() == ".pdf":
            reader = PdfReader(str(path))
            text = "\n".join(page.extract_text() or "" for page in reader.pages).strip()
            if len(text) >= MIN_TEXT_LAYER_CHARS or not self.settings.ocr_enabled:
                return text
            logger.info("PDF %s has no usable text layer; running OCR", path.name)
            return ocr.ocr_pdf(str(path), self.settings.ocr_tesseract_cmd)
        if not self.settings.ocr_enabled:
            logger.warning("OCR disabled; cannot read image %s", path.name)
            return ""
        return ocr.ocr_image(str(path), self.settings.ocr_tesseract_cmd)

    def parse_text(self, text: str, filename: str = "") -> TermImportData:
        """Table parser first, manual-format parser second."""
        cleaned = parsing.clean_text(text)
        if not cleaned.strip():
            if self.settings.import_demo_fallback:
                logger.warning("No text extracted from %s; returning sample schedule", filename)
                return sample_term_data(f"{filename}\n{text}", self.settings.default_term_location)
            raise ImportValidationError("No text could be extracted from the document")

        table_data = parsing.parse_table_document(
            cleaned,
            phone_prefix=self.settings.phone_exchange_prefix,
            default_location=self.settings.default_term_location,
        )
        if table_data is not None and table_data.assignments:
            return table_data
        logger.info(
            "Table parser found no usable rows in %s (table header: %s); trying manual format",
            filename or "text",
            parsing.looks_tabular(cleaned),
        )
        manual_data = parse_manual_input(
            cleaned,
            default_location=self.settings.default_term_location,
            phone_prefix=self.settings.phone_exchange_prefix,
        )
        if table_data is not None and not manual_data.assignments:
            return table_data
        return manual_data

    def match_rooms(self, import_data: TermImportData) -> None:
        if not any(a.room_number and not a.room_id for a in import_data.assignments):
            return
        with self.db_pool.connection() as conn:
            rooms = queries.list_room_numbers(conn)
        matched = match_room_ids(import_data, rooms)
        logger.info("Matched %d of %d assignment rooms", matched, len(import_data.assignments))
