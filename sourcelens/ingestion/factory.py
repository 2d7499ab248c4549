from pathlib import Path

from sourcelens.config.settings import Settings
from sourcelens.ingestion.extractors import (
    DirectPdfExtractor,
    DirectTextExtractor,
    FirstPageOcrExtractor,
    NativeVisionExtractor,
)
from sourcelens.ingestion.page_guard import PageCountGuard
from sourcelens.ingestion.pipeline import IngestionPipeline
from sourcelens.ingestion.thumbnail import ThumbnailGenerator
from sourcelens.ingestion.validator import UploadValidator
from sourcelens.llm.factory import LlmClientFactory
from sourcelens.llm.registry import ProviderRegistry
from sourcelens.pdf.factory import PdfExtractorFactory
from sourcelens.pdf.pdftoppm_renderer import PdfToPpmRenderer
from sourcelens.pdf.pymupdf_adapter import PyMuPdfInspector


def build_pipeline(
    settings: Settings,
    registry: ProviderRegistry | None = None,
) -> IngestionPipeline:
    """Build an IngestionPipeline with all required adapters."""
    if registry is None:
        registry = LlmClientFactory.create_registry(settings)
    inspector = PyMuPdfInspector()
    native_vision = NativeVisionExtractor(
        registry,
        default_model_id=settings.native_vision_model,
        temperature=settings.vision_temperature,
        max_output_tokens=settings.vision_max_output_tokens,
    )
    first_page_ocr = FirstPageOcrExtractor(
        registry,
        PdfToPpmRenderer(
            binary=settings.pdftoppm_path,
            dpi=settings.ocr_render_dpi,
            timeout_seconds=settings.tool_timeout_seconds,
        ),
        default_model_id=settings.ocr_vision_model,
        temperature=settings.vision_temperature,
        max_output_tokens=settings.vision_max_output_tokens,
    )
    return IngestionPipeline(
        validator=UploadValidator(
            max_text_bytes=settings.max_text_file_bytes,
            max_image_bytes=settings.max_image_file_bytes,
            max_pdf_bytes=settings.max_pdf_file_bytes,
        ),
        page_guard=PageCountGuard(max_pages=settings.max_pdf_pages, inspector=inspector),
        thumbnails=ThumbnailGenerator(max_size=settings.thumbnail_max_size, inspector=inspector),
        text_extractor=DirectTextExtractor(),
        direct_extractors=[
            DirectPdfExtractor(engine) for engine in PdfExtractorFactory.create_chain(settings)
        ],
        pdf_vision_extractors=[native_vision, first_page_ocr],
        image_vision_extractors=[native_vision],
        workspace_root=Path(settings.workspace_root) if settings.workspace_root else None,
        min_content_chars=settings.min_content_chars,
        cleanup_min_length_ratio=settings.cleanup_min_length_ratio,
        pdf_char_limit=settings.pdf_char_limit,
        image_char_limit=settings.image_char_limit,
        paragraph_limit=settings.paragraph_limit,
    )
