from collections.abc import Callable
from pathlib import Path

from sourcelens.ingestion.exceptions import (
    ImageConversionError,
    ThumbnailError,
    UploadValidationError,
)
from sourcelens.ingestion.extractors import BaseExtractor
from sourcelens.ingestion.images import transcode_to_jpeg
from sourcelens.ingestion.models import (
    ExtractionAttempt,
    ExtractionContext,
    ExtractionResult,
    FileFamily,
    ProcessingStage,
    UploadRequest,
    ValidatedUpload,
)
from sourcelens.ingestion.page_guard import PageCountGuard
from sourcelens.ingestion.strategy import first_acceptable
from sourcelens.ingestion.thumbnail import ThumbnailGenerator
from sourcelens.ingestion.validator import UploadValidator
from sourcelens.ingestion.workspace import TemporaryWorkspace
from sourcelens.logging.logger import Log
from sourcelens.text.cleaner import clean_text, pre_process_ocr_text
from sourcelens.text.limiter import limit_content_size

PDF_FAILURE_PLACEHOLDER = "[PDF processing failed: no text could be extracted from this document.]"
IMAGE_FAILURE_PLACEHOLDER = "[Image processing failed: no text could be extracted from this image.]"
ALL_METHODS_FAILED = "all-methods-failed"


class IngestionPipeline:
    """Turns one uploaded file into text.

    PDFs go through the page guard, a request workspace, thumbnailing, the
    direct extractors and, when their output is shorter than
    ``min_content_chars`` (or vision-first was requested), the vision
    extractors. Images go straight to vision. Plain text is returned as is.
    Extracted PDF and image text is then size-limited and cleaned.
    """

    def __init__(
        self,
        *,
        validator: UploadValidator,
        page_guard: PageCountGuard,
        thumbnails: ThumbnailGenerator,
        text_extractor: BaseExtractor,
        direct_extractors: list[BaseExtractor],
        pdf_vision_extractors: list[BaseExtractor],
        image_vision_extractors: list[BaseExtractor],
        workspace_root: Path | None = None,
        min_content_chars: int = 500,
        cleanup_min_length_ratio: float = 0.5,
        pdf_char_limit: int = 30000,
        image_char_limit: int = 20000,
        paragraph_limit: int = 100,
    ) -> None:
        self._validator = validator
        self._page_guard = page_guard
        self._thumbnails = thumbnails
        self._text_extractor = text_extractor
        self._direct_extractors = direct_extractors
        self._pdf_vision_extractors = pdf_vision_extractors
        self._image_vision_extractors = image_vision_extractors
        self._workspace_root = workspace_root
        self._min_content_chars = min_content_chars
        self._cleanup_min_length_ratio = cleanup_min_length_ratio
        self._pdf_char_limit = pdf_char_limit
        self._image_char_limit = image_char_limit
        self._paragraph_limit = paragraph_limit

    def process(self, request: UploadRequest) -> ExtractionResult:
        """Run the pipeline for one upload.

        Raises:
            UploadValidationError: if the upload is rejected (HTTP 400).
        """
        Log.info(
            f"Processing upload '{request.filename}' "
            f"({len(request.file_bytes)} bytes, {request.mime_type or 'no content type'}, "
            f"vision first: {request.use_vision_first})"
        )
        try:
            upload = self._validator.validate(request)
            page_count = None
            if upload.family is FileFamily.PDF:
                page_count = self._page_guard.check(request.file_bytes)
        except UploadValidationError as exc:
            Log.warning(
                f"'{request.filename}': {ProcessingStage.VALIDATING.value} -> "
                f"{ProcessingStage.REJECTED.value} ({exc.error_kind}): {exc}"
            )
            raise

        if upload.family is FileFamily.TEXT:
            return self._process_text(request, upload)
        if upload.family is FileFamily.IMAGE:
            return self._process_image(request, upload)
        return self._process_pdf(request, upload, page_count)

    def _process_text(self, request: UploadRequest, upload: ValidatedUpload) -> ExtractionResult:
        context = ExtractionContext(
            request=request, upload=upload, data=request.file_bytes, mime_type=upload.mime_type
        )
        context.advance(ProcessingStage.EXTRACTING_DIRECT)
        attempt = first_acceptable([self._text_extractor], context, lambda a: a.succeeded)
        if attempt is None:
            return self._failed(context)
        context.advance(ProcessingStage.DONE)
        return ExtractionResult(
            content=attempt.content,
            processing_method=attempt.label,
            filename=request.filename,
            mime_type=upload.mime_type,
            file_size=len(request.file_bytes),
            original_size=len(attempt.content),
        )

    def _process_image(self, request: UploadRequest, upload: ValidatedUpload) -> ExtractionResult:
        data, mime_type = request.file_bytes, upload.mime_type
        if upload.is_heic:
            try:
                data, mime_type = transcode_to_jpeg(data), "image/jpeg"
                Log.info(f"Converted HEIC image '{request.filename}' to JPEG")
            except ImageConversionError as exc:
                Log.warning(f"HEIC conversion failed, sending original bytes: {exc}")

        context = ExtractionContext(request=request, upload=upload, data=data, mime_type=mime_type)
        context.advance(ProcessingStage.THUMBNAILING)
        thumbnail_url = self._thumbnail(lambda: self._thumbnails.for_image(data))

        context.advance(ProcessingStage.EXTRACTING_VISION)
        best = first_acceptable(self._image_vision_extractors, context, self._is_sufficient)
        return self._finish(context, best, thumbnail_url)

    def _process_pdf(
        self, request: UploadRequest, upload: ValidatedUpload, page_count: int | None
    ) -> ExtractionResult:
        with TemporaryWorkspace(self._workspace_root) as workspace:
            context = ExtractionContext(
                request=request,
                upload=upload,
                data=request.file_bytes,
                mime_type=upload.mime_type,
                page_count=page_count,
                workspace=workspace,
            )
            context.source_path = workspace.write("source.pdf", request.file_bytes)

            context.advance(ProcessingStage.THUMBNAILING)
            thumbnail_url = self._thumbnail(lambda: self._thumbnails.for_pdf(request.file_bytes))

            if request.use_vision_first:
                best = self._run_vision(context, None)
                if not self._is_sufficient(best):
                    best = self._run_direct(context, best)
            else:
                best = self._run_direct(context, None)
                if not self._is_sufficient(best):
                    best = self._run_vision(context, best)
            return self._finish(context, best, thumbnail_url)

    def _run_direct(
        self, context: ExtractionContext, best: ExtractionAttempt | None
    ) -> ExtractionAttempt | None:
        context.advance(ProcessingStage.EXTRACTING_DIRECT)
        return first_acceptable(self._direct_extractors, context, lambda a: a.succeeded, best)

    def _run_vision(
        self, context: ExtractionContext, best: ExtractionAttempt | None
    ) -> ExtractionAttempt | None:
        if best is not None:
            Log.info(
                f"Direct extraction gave {len(best.content)} chars "
                f"(< {self._min_content_chars}), trying vision"
            )
        context.advance(ProcessingStage.EXTRACTING_VISION)
        return first_acceptable(self._pdf_vision_extractors, context, self._is_sufficient, best)

    def _is_sufficient(self, attempt: ExtractionAttempt | None) -> bool:
        return attempt is not None and len(attempt.content.strip()) >= self._min_content_chars

    def _thumbnail(self, render: Callable[[], str]) -> str | None:
        try:
            return render()
        except ThumbnailError as exc:
            Log.warning(f"Thumbnail generation failed: {exc}")
            return None

    def _finish(
        self,
        context: ExtractionContext,
        best: ExtractionAttempt | None,
        thumbnail_url: str | None,
    ) -> ExtractionResult:
        context.advance(ProcessingStage.POST_PROCESSING)
        if best is None:
            return self._failed(context, thumbnail_url)

        kind = "pdf" if context.family is FileFamily.PDF else "image"
        limit = limit_content_size(
            best.content,
            kind,
            pdf_char_limit=self._pdf_char_limit,
            image_char_limit=self._image_char_limit,
            paragraph_limit=self._paragraph_limit,
        )
        content = limit.content
        processing_method = best.label
        if limit.limited:
            Log.info(f"Content limited: {limit.limit_reason}")
            processing_method += "-limited"

        cleaned_content = clean_text(pre_process_ocr_text(content), self._cleanup_min_length_ratio)
        cleaned = bool(cleaned_content.strip())
        if cleaned:
            Log.info(f"Text cleanup changed length from {len(content)} to {len(cleaned_content)}")
            content = cleaned_content
            processing_method += "-cleaned"

        context.advance(ProcessingStage.DONE)
        return ExtractionResult(
            content=content,
            processing_method=processing_method,
            filename=context.request.filename,
            mime_type=context.upload.mime_type,
            file_size=len(context.request.file_bytes),
            page_count=context.page_count,
            thumbnail_url=thumbnail_url,
            cleaned=cleaned,
            limited=limit.limited,
            original_size=limit.original_size,
            limit_reason=limit.limit_reason,
        )

    def _failed(
        self, context: ExtractionContext, thumbnail_url: str | None = None
    ) -> ExtractionResult:
        errors = "; ".join(f"{a.label}: {a.error}" for a in context.attempts if not a.succeeded)
        Log.error(f"All extraction methods failed for '{context.request.filename}': {errors}")
        context.advance(ProcessingStage.FAILED)
        placeholder = (
            PDF_FAILURE_PLACEHOLDER
            if context.family is FileFamily.PDF
            else IMAGE_FAILURE_PLACEHOLDER
        )
        return ExtractionResult(
            content=placeholder,
            processing_method=ALL_METHODS_FAILED,
            filename=context.request.filename,
            mime_type=context.upload.mime_type,
            file_size=len(context.request.file_bytes),
            page_count=context.page_count,
            thumbnail_url=thumbnail_url,
        )
