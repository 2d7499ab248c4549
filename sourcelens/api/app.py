import uuid

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from sourcelens.api.schemas import (
    CleanupTextRequest,
    CleanupTextResponse,
    ErrorResponse,
    UploadResponse,
)
from sourcelens.config.settings import Settings
from sourcelens.ingestion.exceptions import EmptyUploadError, UploadValidationError
from sourcelens.ingestion.factory import build_pipeline
from sourcelens.ingestion.models import UploadRequest
from sourcelens.ingestion.pipeline import IngestionPipeline
from sourcelens.llm.factory import LlmClientFactory
from sourcelens.logging.logger import Log
from sourcelens.text.ai_cleaner import AiTextCleaner


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def create_app(
    settings: Settings | None = None,
    *,
    pipeline: IngestionPipeline | None = None,
    cleaner: AiTextCleaner | None = None,
) -> FastAPI:
    """Build the HTTP application.

    ``pipeline`` and ``cleaner`` are built from ``settings`` (sharing one
    provider registry) unless they are passed in.
    """
    settings = settings if settings is not None else Settings()
    if pipeline is None or cleaner is None:
        registry = LlmClientFactory.create_registry(settings)
        if pipeline is None:
            pipeline = build_pipeline(settings, registry)
        if cleaner is None:
            cleaner = AiTextCleaner(
                registry,
                model_id=settings.cleanup_model,
                timeout_seconds=settings.cleanup_timeout_seconds,
                min_length_ratio=settings.cleanup_min_length_ratio,
            )
    ingestion_pipeline = pipeline
    text_cleaner = cleaner

    app = FastAPI(title="SourceLens Ingestion API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            origin.strip()
            for origin in settings.cors_allowed_origins.split(",")
            if origin.strip()
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/upload")
    async def upload(
        file: UploadFile | None = File(None),
        use_ai_vision: str = Form("false", alias="useAIVision"),
        vision_model: str | None = Form(None, alias="visionModel"),
    ) -> JSONResponse:
        with Log.request_scope(uuid.uuid4().hex[:12]):
            if file is None:
                return _error(400, "No file uploaded", EmptyUploadError.error_kind)

            request = UploadRequest(
                file_bytes=await file.read(),
                mime_type=file.content_type or "",
                filename=file.filename or "uploaded-file",
                use_vision_first=use_ai_vision.strip().lower() == "true",
                vision_model=(vision_model or "").strip() or None,
            )
            try:
                result = await run_in_threadpool(ingestion_pipeline.process, request)
            except UploadValidationError as exc:
                return _error(400, exc.message, exc.error_kind)
            except Exception as exc:
                Log.exception(f"Upload of '{request.filename}' failed: {exc}")
                return _error(500, "Error processing file upload", str(exc))

            Log.info(
                f"Upload of '{request.filename}' done: {result.processing_method}, "
                f"{len(result.content)} chars"
            )
            return JSONResponse(content=UploadResponse.from_result(result).to_payload())

    @app.post("/cleanup-text")
    async def cleanup_text(body: CleanupTextRequest) -> JSONResponse:
        if not body.text.strip():
            return _error(400, "No text provided")
        try:
            result = await run_in_threadpool(text_cleaner.cleanup, body.text, body.model_id)
        except Exception as exc:
            Log.exception(f"Text cleanup failed: {exc}")
            return _error(500, "Error processing text cleanup", str(exc))
        return JSONResponse(
            content=CleanupTextResponse.from_result(result).model_dump(by_alias=True)
        )

    return app
