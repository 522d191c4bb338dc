"""
OCR helpers using pdf2image + pytesseract.
"""

from __future__ import annotations

import logging
from typing import List

from pdf2image import convert_from_path
from PIL import Image
import pytesseract

logger = logging.getLogger(__name__)


def _configure(tesseract_cmd: str | None) -> None:
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd


def ocr_pdf(path: str, tesseract_cmd: str | None = None) -> str:
    """Convert a scanned term sheet into text by running OCR on each page."""
    _configure(tesseract_cmd)

    pages = convert_from_path(path)
    text_pages: List[str] = []
    for idx, page in enumerate(pages, start=1):
        logger.info("Running OCR on %s page %d", path, idx)
        # Column layout matters to the table parser, so keep the page's spacing.
        page_text = pytesseract.image_to_string(page, config="--psm 6 -c preserve_interword_spaces=1")
        text_pages.append(page_text)
    return "\n\n".join(text_pages)


def ocr_image(path: str, tesseract_cmd: str | None = None) -> str:
    """Run OCR on a photographed or scanned PNG/JPEG term sheet."""
    _configure(tesseract_cmd)

    logger.info("Running OCR on image %s", path)
    with Image.open(path) as image:
        return pytesseract.image_to_string(image, config="--psm 6 -c preserve_interword_spaces=1")
