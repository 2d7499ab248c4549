from pydantic import BaseModel, ConfigDict, Field

from sourcelens.ingestion.models import ExtractionResult
from sourcelens.text.ai_cleaner import CleanupResult


class ErrorResponse(BaseModel):
    message: str
    error: str | None = None


class UploadResponse(BaseModel):
    """Body of a successful ``POST /upload``."""

    model_config = ConfigDict(populate_by_name=True)

    content: str
    filename: str
    type: str
    processing_method: str = Field(alias="processingMethod")
    page_count: int | None = Field(default=None, alias="pageCount")
    file_size: int = Field(alias="fileSize")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    cleaned: bool = False
    limited: bool = False
    original_size: int = Field(default=0, alias="originalSize")
    limit_reason: str | None = Field(default=None, alias="limitReason")

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "UploadResponse":
        return cls(
            content=result.content,
            filename=result.filename,
            type=result.mime_type,
            processing_method=result.processing_method,
            page_count=result.page_count,
            file_size=result.file_size,
            thumbnail_url=result.thumbnail_url,
            cleaned=result.cleaned,
            limited=result.limited,
            original_size=result.original_size,
            limit_reason=result.limit_reason,
        )

    def to_payload(self) -> dict[str, object]:
        """camelCase payload; ``pageCount`` and ``thumbnailUrl`` are omitted when unknown."""
        payload = self.model_dump(by_alias=True)
        for key in ("pageCount", "thumbnailUrl"):
            if payload[key] is None:
                del payload[key]
        return payload


class CleanupTextRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    model_id: str | None = Field(default=None, alias="modelId")


class CleanupTextResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cleaned_text: str = Field(alias="cleanedText")
    original_length: int = Field(alias="originalLength")
    cleaned_length: int = Field(alias="cleanedLength")
    markdown_formatted: bool = Field(alias="markdownFormatted")
    fallback: bool = False

    @classmethod
    def from_result(cls, result: CleanupResult) -> "CleanupTextResponse":
        return cls(
            cleaned_text=result.cleaned_text,
            original_length=result.original_length,
            cleaned_length=result.cleaned_length,
            markdown_formatted=result.markdown_formatted,
            fallback=result.fallback,
        )
