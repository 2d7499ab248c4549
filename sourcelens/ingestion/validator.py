from pathlib import PurePath

from sourcelens.ingestion.exceptions import (
    EmptyUploadError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from sourcelens.ingestion.models import FileFamily, UploadRequest, ValidatedUpload

GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})
HEIC_MIME_TYPES = frozenset(
    {"image/heic", "image/heif", "image/heic-sequence", "image/heif-sequence"}
)

EXTENSION_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".txt": "text/plain",
    ".md": "text/markdown",
}


class UploadValidator:
    """Detects the file family of an upload and enforces its size ceiling."""

    def __init__(
        self,
        *,
        max_text_bytes: int,
        max_image_bytes: int,
        max_pdf_bytes: int,
    ) -> None:
        self._limits = {
            FileFamily.TEXT: max_text_bytes,
            FileFamily.IMAGE: max_image_bytes,
            FileFamily.PDF: max_pdf_bytes,
        }

    def validate(self, request: UploadRequest) -> ValidatedUpload:
        """Classify the upload.

        Raises:
            EmptyUploadError: if the file has no content.
            UnsupportedFileTypeError: if the type is not PDF, image or text.
            FileTooLargeError: if the file exceeds its family's ceiling.
        """
        if not request.file_bytes:
            raise EmptyUploadError("No file uploaded or the file is empty")

        upload = self.detect(request.mime_type, request.filename, request.file_bytes)
        limit = self._limits[upload.family]
        size = len(request.file_bytes)
        if size > limit:
            raise FileTooLargeError(
                f"File too large ({_megabytes(size)} MB). "
                f"The maximum for {upload.family.value} files is {_megabytes(limit)} MB."
            )
        return upload

    @staticmethod
    def detect(mime_type: str, filename: str, data: bytes = b"") -> ValidatedUpload:
        """Resolve the file family from the content type, falling back to the extension."""
        mime = mime_type.split(";", 1)[0].strip().lower()
        extension = PurePath(filename or "").suffix.lower()
        is_heic = mime in HEIC_MIME_TYPES or extension in (".heic", ".heif")

        if "pdf" in mime:
            return ValidatedUpload(FileFamily.PDF, "application/pdf")
        if mime.startswith("image/"):
            return ValidatedUpload(FileFamily.IMAGE, mime, is_heic)
        if mime.startswith("text/"):
            return ValidatedUpload(FileFamily.TEXT, mime)

        if mime in GENERIC_MIME_TYPES and data.startswith(b"%PDF-"):
            return ValidatedUpload(FileFamily.PDF, "application/pdf")
        resolved = EXTENSION_MIME_TYPES.get(extension)
        if resolved is None:
            raise UnsupportedFileTypeError(
                "Unsupported file type. Please use PDF, JPG, PNG, HEIC or TXT files."
            )
        if resolved == "application/pdf":
            family = FileFamily.PDF
        elif resolved.startswith("image/"):
            family = FileFamily.IMAGE
        else:
            family = FileFamily.TEXT
        return ValidatedUpload(family, resolved, is_heic)


def _megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.1f}".rstrip("0").rstrip(".")
