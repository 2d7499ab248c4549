import base64
import io

from PIL import Image, ImageOps

from sourcelens.ingestion import images  # noqa: F401  registers the HEIF opener
from sourcelens.ingestion.exceptions import ThumbnailError
from sourcelens.pdf.exceptions import PdfExtractionError
from sourcelens.pdf.pymupdf_adapter import PyMuPdfInspector


class ThumbnailGenerator:
    """Builds small JPEG previews as ``data:`` URIs."""

    def __init__(
        self,
        *,
        max_size: int = 300,
        quality: int = 75,
        inspector: PyMuPdfInspector | None = None,
    ) -> None:
        self._max_size = max_size
        self._quality = quality
        self._inspector = inspector if inspector is not None else PyMuPdfInspector()

    def for_pdf(self, pdf_bytes: bytes) -> str:
        """Preview of the first page.

        Raises:
            ThumbnailError: if the page cannot be rendered.
        """
        try:
            png = self._inspector.render_page_png(pdf_bytes, page_number=0, dpi=72)
        except PdfExtractionError as exc:
            raise ThumbnailError(f"Could not render PDF preview: {exc}") from exc
        return self.for_image(png)

    def for_image(self, image_bytes: bytes) -> str:
        """Preview of an image, scaled to fit ``max_size`` on its longer side.

        Raises:
            ThumbnailError: if the image cannot be decoded.
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                preview = ImageOps.exif_transpose(image).convert("RGB")
            preview.thumbnail((self._max_size, self._max_size))
            buffer = io.BytesIO()
            preview.save(buffer, format="JPEG", quality=self._quality)
        except (OSError, ValueError) as exc:
            raise ThumbnailError(f"Could not build image preview: {exc}") from exc
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/jpeg;base64,{encoded}"
