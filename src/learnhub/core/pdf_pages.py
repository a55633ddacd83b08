"""PDF page access for the book viewer.

Dependencies:
- pymupdf (fitz)
"""

from __future__ import annotations

from pathlib import Path

import fitz
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_WIDTH = 800
MAX_PAGE_WIDTH = 2000


class PdfOpenError(Exception):
    """Raised when a PDF cannot be opened or read."""

    def __init__(self, file_path: Path, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Failed to load PDF {file_path.name}: {reason}")


class PageOutOfRangeError(IndexError):
    """Raised when asking for a page the document doesn't have."""

    def __init__(self, page_number: int, total_pages: int):
        self.page_number = page_number
        self.total_pages = total_pages
        super().__init__(f"Page {page_number} out of range (1-{total_pages})")


def _open(pdf_path: Path) -> fitz.Document:
    try:
        doc = fitz.open(pdf_path)
    except (RuntimeError, OSError, ValueError) as e:
        # fitz.FileDataError is a RuntimeError
        logger.error("pdf.open_failed", path=str(pdf_path), error=str(e))
        raise PdfOpenError(pdf_path, str(e)) from e

    if doc.needs_pass:
        doc.close()
        raise PdfOpenError(pdf_path, "password protected")

    return doc


def get_page_count(pdf_path: Path) -> int:
    """Number of pages in a PDF.

    Raises:
        PdfOpenError: If the file is missing, corrupt or protected
    """
    doc = _open(pdf_path)
    try:
        return doc.page_count
    finally:
        doc.close()


def clamp_page(page_number: int, total_pages: int) -> int:
    """Keep previous/next navigation inside 1..total_pages."""
    if total_pages < 1:
        return 1
    return max(1, min(page_number, total_pages))


def render_page_png(pdf_path: Path, page_number: int, width: int = DEFAULT_PAGE_WIDTH) -> bytes:
    """Render one page (1-based) as PNG scaled to the given width.

    Raises:
        PdfOpenError: If the file cannot be opened
        PageOutOfRangeError: If page_number is outside the document
    """
    width = max(1, min(width, MAX_PAGE_WIDTH))
    doc = _open(pdf_path)
    try:
        if not 1 <= page_number <= doc.page_count:
            raise PageOutOfRangeError(page_number, doc.page_count)

        page = doc[page_number - 1]
        zoom = width / page.rect.width
        pixmap = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        data = pixmap.tobytes("png")
    finally:
        doc.close()

    logger.debug("pdf.page_rendered", path=pdf_path.name, page=page_number, bytes=len(data))
    return data
