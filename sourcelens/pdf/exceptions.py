class PdfExtractionError(Exception):
    """Raised when a PDF text extraction method fails."""


class PdfToolUnavailableError(PdfExtractionError):
    """Raised when a required command-line tool is not installed."""


class PdfRenderError(PdfExtractionError):
    """Raised when a PDF page cannot be rendered to an image."""
