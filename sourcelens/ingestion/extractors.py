from abc import ABC, abstractmethod

from sourcelens.ingestion.models import (
    ExtractionAttempt,
    ExtractionContext,
    ExtractionMethod,
    FileFamily,
)
from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.exceptions import LlmError
from sourcelens.llm.models import ModelConfig
from sourcelens.llm.prompt_loader import NATIVE_EXTRACTION, OCR_SYSTEM, OCR_USER, load_prompt
from sourcelens.llm.registry import ProviderRegistry
from sourcelens.llm.response_parser import parse_text_response
from sourcelens.logging.logger import Log
from sourcelens.pdf.base import BasePdfExtractor
from sourcelens.pdf.exceptions import PdfExtractionError
from sourcelens.pdf.pdftoppm_renderer import PdfToPpmRenderer

PROVIDER_UNAVAILABLE = "provider unavailable"


class BaseExtractor(ABC):
    """One way of turning an upload into text."""

    method: ExtractionMethod

    @abstractmethod
    def attempt(self, context: ExtractionContext) -> ExtractionAttempt:
        """Run the extractor once.

        Expected failures (missing tools, provider errors, empty output) are
        reported as a failed attempt rather than raised.
        """
        raise NotImplementedError


class DirectPdfExtractor(BaseExtractor):
    """Wraps a local PDF engine working on the workspace copy of the upload."""

    LABELS = {"pdftotext": "pdftotext", "pdfplumber": "pdf-parse"}
    METHODS = {"pdftotext": ExtractionMethod.PDFTOTEXT, "pdfplumber": ExtractionMethod.PDFPARSE}

    def __init__(self, engine: BasePdfExtractor) -> None:
        self._engine = engine
        self.method = self.METHODS.get(engine.name, ExtractionMethod.PDFPARSE)
        self.label = self.LABELS.get(engine.name, engine.name)

    def attempt(self, context: ExtractionContext) -> ExtractionAttempt:
        try:
            text = self._engine.extract(context.require_source_path())
        except PdfExtractionError as exc:
            return ExtractionAttempt.failed(self.method, self.label, str(exc))
        if not text.strip():
            return ExtractionAttempt.failed(self.method, self.label, "no text extracted")
        return ExtractionAttempt.ok(self.method, self.label, text)


class DirectTextExtractor(BaseExtractor):
    """Plain text uploads are returned exactly as sent."""

    method = ExtractionMethod.DIRECT_TEXT
    label = "direct-text"

    def attempt(self, context: ExtractionContext) -> ExtractionAttempt:
        content = context.data.decode("utf-8", errors="replace")
        if not content:
            return ExtractionAttempt.failed(self.method, self.label, "empty file")
        return ExtractionAttempt.ok(self.method, self.label, content)


class _VisionExtractor(BaseExtractor):
    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        default_model_id: str,
        temperature: float,
        max_output_tokens: int,
    ) -> None:
        self._registry = registry
        self._default_model_id = default_model_id
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    def _select_model(self, context: ExtractionContext) -> tuple[ModelConfig, BaseLlmClient | None]:
        """The requested model when it is known and configured, otherwise this stage's default."""
        return self._registry.resolve_preferred(context.vision_model, self._default_model_id)

    def _transcribe(
        self,
        client: BaseLlmClient,
        model: ModelConfig,
        label: str,
        *,
        data: bytes,
        mime_type: str,
        system_prompt: str,
        user_prompt: str,
    ) -> ExtractionAttempt:
        try:
            raw = client.extract_from_file(
                model=model.api_model,
                data=data,
                mime_type=mime_type,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                temperature=self._temperature,
                max_output_tokens=self._max_output_tokens,
            )
        except LlmError as exc:
            Log.warning(f"{label} with {model.id} failed: {exc}")
            return ExtractionAttempt.failed(self.method, label, str(exc))

        parsed = parse_text_response(raw)
        if not parsed.text.strip():
            return ExtractionAttempt.failed(self.method, label, "empty response")
        Log.debug(f"{label} response parsed as {parsed.kind}")
        return ExtractionAttempt.ok(self.method, label, parsed.text)


class NativeVisionExtractor(_VisionExtractor):
    """Sends the whole PDF or image to a multimodal model."""

    method = ExtractionMethod.VISION_NATIVE

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        default_model_id: str,
        temperature: float,
        max_output_tokens: int,
    ) -> None:
        super().__init__(
            registry,
            default_model_id=default_model_id,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        self._system_prompt = load_prompt(OCR_SYSTEM)
        self._user_prompt = load_prompt(NATIVE_EXTRACTION)

    def attempt(self, context: ExtractionContext) -> ExtractionAttempt:
        model, client = self._select_model(context)
        suffix = "native-pdf" if context.family is FileFamily.PDF else "vision-image"
        label = f"{model.label_prefix}-{suffix}"
        if client is None:
            return ExtractionAttempt.failed(self.method, label, PROVIDER_UNAVAILABLE)
        return self._transcribe(
            client,
            model,
            label,
            data=context.data,
            mime_type=context.mime_type,
            system_prompt=self._system_prompt,
            user_prompt=self._user_prompt,
        )


class FirstPageOcrExtractor(_VisionExtractor):
    """Renders page 1 with ``pdftoppm`` and OCRs the image with a vision model."""

    method = ExtractionMethod.VISION_OCR

    def __init__(
        self,
        registry: ProviderRegistry,
        renderer: PdfToPpmRenderer,
        *,
        default_model_id: str,
        temperature: float,
        max_output_tokens: int,
    ) -> None:
        super().__init__(
            registry,
            default_model_id=default_model_id,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        self._renderer = renderer
        self._system_prompt = load_prompt(OCR_SYSTEM)
        self._user_prompt = load_prompt(OCR_USER)

    def attempt(self, context: ExtractionContext) -> ExtractionAttempt:
        model, client = self._select_model(context)
        label = f"{model.label_prefix}-vision-first-page"
        if context.family is not FileFamily.PDF:
            return ExtractionAttempt.failed(self.method, label, "only PDFs are rendered")
        if client is None:
            return ExtractionAttempt.failed(self.method, label, PROVIDER_UNAVAILABLE)

        try:
            image_path = self._renderer.render_first_page(context.require_source_path())
            image_bytes = image_path.read_bytes()
        except (PdfExtractionError, OSError) as exc:
            Log.warning(f"First page render failed: {exc}")
            return ExtractionAttempt.failed(self.method, label, str(exc))

        result = self._transcribe(
            client,
            model,
            label,
            data=image_bytes,
            mime_type="image/png",
            system_prompt=self._system_prompt,
            user_prompt=self._user_prompt,
        )
        if result.succeeded and context.page_count is not None and context.page_count > 1:
            note = (
                f"\n\n[Note: Only the first page of this {context.page_count}-page "
                "document was processed with OCR.]"
            )
            return ExtractionAttempt.ok(self.method, label, result.content + note)
        return result
