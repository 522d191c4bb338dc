"""
Download term sheets published on the court website.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import urlparse

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchedDocument:
    filename: str
    content_type: str
    content: bytes


class DocumentFetcher:
    """HTTP client for remote term sheet PDFs and images."""

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    @retry(wait=wait_exponential(multiplier=1, min=1, max=8), stop=stop_after_attempt(3))
    def fetch(self, url: str) -> FetchedDocument:
        logger.info("Downloading term sheet from %s", url)
        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            response = client.get(url)
            response.raise_for_status()
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        filename = PurePosixPath(urlparse(url).path).name or "term-sheet"
        return FetchedDocument(filename=filename, content_type=content_type, content=response.content)
