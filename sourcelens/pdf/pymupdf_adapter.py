import pymupdf

from sourcelens.pdf.exceptions import PdfExtractionError, PdfRenderError


class PyMuPdfInspector:
    """Cheap structural queries on PDF bytes using PyMuPDF."""

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return int(doc.page_count)
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not open PDF: {exc}") from exc

    def render_page_png(self, pdf_bytes: bytes, *, page_number: int = 0, dpi: int = 72) -> bytes:
        """Render one page (zero-based) to PNG bytes."""
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                page = doc.load_page(page_number)
                pixmap = page.get_pixmap(dpi=dpi)
                return bytes(pixmap.tobytes("png"))
        except Exception as exc:
            raise PdfRenderError(f"pymupdf could not render page {page_number}: {exc}") from exc
