from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from sourcelens.ingestion.exceptions import IngestionError
from sourcelens.logging.logger import Log

if TYPE_CHECKING:
    from sourcelens.ingestion.workspace import TemporaryWorkspace


class FileFamily(str, Enum):
    PDF = "pdf"
    IMAGE = "image"
    TEXT = "text"


class ExtractionMethod(str, Enum):
    PDFTOTEXT = "pdftotext"
    PDFPARSE = "pdfparse"
    VISION_NATIVE = "vision-native"
    VISION_OCR = "vision-ocr"
    DIRECT_TEXT = "direct-text"


class ProcessingStage(str, Enum):
    VALIDATING = "validating"
    THUMBNAILING = "thumbnailing"
    EXTRACTING_DIRECT = "extracting-direct"
    EXTRACTING_VISION = "extracting-vision"
    POST_PROCESSING = "post-processing"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadRequest:
    """A single uploaded file plus the caller's extraction preferences."""

    file_bytes: bytes
    mime_type: str
    filename: str
    use_vision_first: bool = False
    vision_model: str | None = None


@dataclass(frozen=True)
class ValidatedUpload:
    family: FileFamily
    mime_type: str
    is_heic: bool = False


@dataclass(frozen=True)
class ExtractionAttempt:
    """Outcome of one extractor run. ``label`` becomes ``processingMethod``."""

    method: ExtractionMethod
    label: str
    content: str = ""
    succeeded: bool = False
    error: str | None = None

    @classmethod
    def ok(cls, method: ExtractionMethod, label: str, content: str) -> "ExtractionAttempt":
        return cls(method=method, label=label, content=content, succeeded=True)

    @classmethod
    def failed(cls, method: ExtractionMethod, label: str, error: str) -> "ExtractionAttempt":
        return cls(method=method, label=label, succeeded=False, error=error)


@dataclass
class ExtractionContext:
    """Per-request state shared by the extractors of one upload."""

    request: UploadRequest
    upload: ValidatedUpload
    data: bytes
    mime_type: str
    page_count: int | None = None
    workspace: "TemporaryWorkspace | None" = None
    source_path: Path | None = None
    stage: ProcessingStage = ProcessingStage.VALIDATING
    attempts: list[ExtractionAttempt] = field(default_factory=list)

    @property
    def family(self) -> FileFamily:
        return self.upload.family

    @property
    def vision_model(self) -> str | None:
        return self.request.vision_model

    def advance(self, stage: ProcessingStage) -> None:
        Log.info(f"'{self.request.filename}': {self.stage.value} -> {stage.value}")
        self.stage = stage

    def require_source_path(self) -> Path:
        if self.source_path is None:
            raise IngestionError("No workspace copy of the upload is available")
        return self.source_path


@dataclass(frozen=True)
class ExtractionResult:
    """Final ingestion output returned to the HTTP layer."""

    content: str
    processing_method: str
    filename: str
    mime_type: str
    file_size: int
    page_count: int | None = None
    thumbnail_url: str | None = None
    cleaned: bool = False
    limited: bool = False
    original_size: int = 0
    limit_reason: str | None = None
