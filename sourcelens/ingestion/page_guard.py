import io

import pdfplumber

from sourcelens.ingestion.exceptions import TooManyPagesError
from sourcelens.logging.logger import Log
from sourcelens.pdf.exceptions import PdfExtractionError
from sourcelens.pdf.pymupdf_adapter import PyMuPdfInspector


class PageCountGuard:
    """Rejects PDFs with more pages than ``max_pages`` before any per-page work."""

    def __init__(self, *, max_pages: int = 400, inspector: PyMuPdfInspector | None = None) -> None:
        self._max_pages = max_pages
        self._inspector = inspector if inspector is not None else PyMuPdfInspector()

    def count(self, pdf_bytes: bytes) -> int | None:
        """Page count from PyMuPDF, then pdfplumber. ``None`` if both fail."""
        try:
            return self._inspector.page_count(pdf_bytes)
        except PdfExtractionError as exc:
            Log.warning(f"PyMuPDF page count failed, trying pdfplumber: {exc}")
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            Log.warning(f"pdfplumber page count failed: {exc}")
        return None

    def check(self, pdf_bytes: bytes) -> int | None:
        """Return the page count, raising if it exceeds the ceiling.

        Raises:
            TooManyPagesError: if the document has more than ``max_pages`` pages.
        """
        page_count = self.count(pdf_bytes)
        if page_count is None:
            Log.warning("Page count unknown, continuing without the page guard")
            return None
        if page_count > self._max_pages:
            raise TooManyPagesError(page_count, self._max_pages)
        return page_count
