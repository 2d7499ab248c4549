class IngestionError(Exception):
    """Base exception for all ingestion-related errors."""


class UploadValidationError(IngestionError):
    """Raised when an upload is rejected before extraction starts."""

    error_kind: str | None = None

    def __init__(self, message: str, error_kind: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error_kind is not None:
            self.error_kind = error_kind


class UnsupportedFileTypeError(UploadValidationError):
    """Raised when the upload is neither a PDF, an image nor plain text."""

    error_kind = "UNSUPPORTED_TYPE"


class FileTooLargeError(UploadValidationError):
    """Raised when the upload exceeds the size ceiling for its type."""

    error_kind = "FILE_TOO_LARGE"


class EmptyUploadError(UploadValidationError):
    """Raised when no file (or an empty file) was uploaded."""

    error_kind = "NO_FILE"


class TooManyPagesError(UploadValidationError):
    """Raised when a PDF has more pages than the configured ceiling."""

    error_kind = "TOO_MANY_PAGES"

    def __init__(self, page_count: int, max_pages: int) -> None:
        super().__init__(
            f"This PDF has {page_count} pages. "
            f"Documents longer than {max_pages} pages are not supported."
        )
        self.page_count = page_count
        self.max_pages = max_pages


class WorkspaceError(IngestionError):
    """Raised when the request workspace cannot be created or used."""


class ThumbnailError(IngestionError):
    """Raised when a preview image cannot be produced."""


class ImageConversionError(IngestionError):
    """Raised when an image cannot be transcoded."""
