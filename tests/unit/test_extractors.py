from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx

from sourcelens.ingestion.extractors import (
    PROVIDER_UNAVAILABLE,
    DirectPdfExtractor,
    DirectTextExtractor,
    FirstPageOcrExtractor,
    NativeVisionExtractor,
)
from sourcelens.ingestion.models import (
    ExtractionContext,
    ExtractionMethod,
    FileFamily,
    UploadRequest,
    ValidatedUpload,
)
from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.exceptions import LlmNetworkError
from sourcelens.llm.gemini_client_adapter import GeminiClientAdapter
from sourcelens.llm.registry import ProviderRegistry
from sourcelens.pdf.base import BasePdfExtractor
from sourcelens.pdf.exceptions import PdfToolUnavailableError
from sourcelens.pdf.pdftoppm_renderer import PdfToPpmRenderer


def _context(
    family: FileFamily = FileFamily.PDF,
    *,
    data: bytes = b"%PDF-1.4",
    mime_type: str = "application/pdf",
    source_path: Path | None = None,
    page_count: int | None = 1,
    vision_model: str | None = None,
) -> ExtractionContext:
    request = UploadRequest(
        file_bytes=data, mime_type=mime_type, filename="upload", vision_model=vision_model
    )
    return ExtractionContext(
        request=request,
        upload=ValidatedUpload(family, mime_type),
        data=data,
        mime_type=mime_type,
        page_count=page_count,
        source_path=source_path,
    )


def _client(response: str = "Transcribed text") -> MagicMock:
    client = MagicMock(spec=BaseLlmClient)
    client.extract_from_file.return_value = response
    return client


def _native(registry: ProviderRegistry) -> NativeVisionExtractor:
    return NativeVisionExtractor(
        registry, default_model_id="gemini-flash", temperature=0.1, max_output_tokens=1000
    )


class TestDirectPdfExtractor:
    def _engine(self, name: str) -> MagicMock:
        engine = MagicMock(spec=BasePdfExtractor)
        engine.name = name
        return engine

    def test_labels_follow_engine(self) -> None:
        assert DirectPdfExtractor(self._engine("pdftotext")).label == "pdftotext"
        parse = DirectPdfExtractor(self._engine("pdfplumber"))
        assert parse.label == "pdf-parse"
        assert parse.method is ExtractionMethod.PDFPARSE

    def test_successful_extraction(self, tmp_path: Path) -> None:
        engine = self._engine("pdftotext")
        engine.extract.return_value = "Body text"
        source = tmp_path / "source.pdf"

        attempt = DirectPdfExtractor(engine).attempt(_context(source_path=source))

        assert attempt.succeeded
        assert attempt.content == "Body text"
        engine.extract.assert_called_once_with(source)

    def test_tool_error_is_a_failed_attempt(self, tmp_path: Path) -> None:
        engine = self._engine("pdftotext")
        engine.extract.side_effect = PdfToolUnavailableError("'pdftotext' is not installed")

        attempt = DirectPdfExtractor(engine).attempt(_context(source_path=tmp_path / "a.pdf"))

        assert not attempt.succeeded
        assert attempt.error == "'pdftotext' is not installed"

    def test_blank_text_is_a_failed_attempt(self, tmp_path: Path) -> None:
        engine = self._engine("pdfplumber")
        engine.extract.return_value = "  \n"
        attempt = DirectPdfExtractor(engine).attempt(_context(source_path=tmp_path / "a.pdf"))
        assert not attempt.succeeded
        assert attempt.error == "no text extracted"


class TestDirectTextExtractor:
    def test_returns_text_unchanged(self) -> None:
        raw = "Line one  \r\n\n\nLine  two\t"
        context = _context(FileFamily.TEXT, data=raw.encode(), mime_type="text/plain")
        attempt = DirectTextExtractor().attempt(context)
        assert attempt.label == "direct-text"
        assert attempt.content == raw


class TestNativeVisionExtractor:
    def test_pdf_label_and_request(self) -> None:
        client = _client()
        attempt = _native(ProviderRegistry({"google": client})).attempt(_context())

        assert attempt.succeeded
        assert attempt.label == "gemini-native-pdf"
        assert attempt.content == "Transcribed text"
        kwargs = client.extract_from_file.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert kwargs["mime_type"] == "application/pdf"

    def test_image_label(self) -> None:
        context = _context(FileFamily.IMAGE, data=b"\x89PNG", mime_type="image/png")
        attempt = _native(ProviderRegistry({"google": _client()})).attempt(context)
        assert attempt.label == "gemini-vision-image"

    def test_requested_model_is_used_when_available(self) -> None:
        registry = ProviderRegistry({"google": _client(), "anthropic": _client("Claude text")})
        attempt = _native(registry).attempt(_context(vision_model="claude-sonnet"))
        assert attempt.label == "claude-native-pdf"
        assert attempt.content == "Claude text"

    def test_unavailable_requested_model_uses_default(self) -> None:
        registry = ProviderRegistry({"google": _client()})
        attempt = _native(registry).attempt(_context(vision_model="claude-sonnet"))
        assert attempt.label == "gemini-native-pdf"

    def test_missing_provider(self) -> None:
        attempt = _native(ProviderRegistry()).attempt(_context())
        assert not attempt.succeeded
        assert attempt.error == PROVIDER_UNAVAILABLE

    def test_provider_error_is_a_failed_attempt(self) -> None:
        client = _client()
        client.extract_from_file.side_effect = LlmNetworkError("Gemini network error")
        attempt = _native(ProviderRegistry({"google": client})).attempt(_context())
        assert not attempt.succeeded
        assert attempt.error == "Gemini network error"

    def test_unknown_requested_model_uses_stage_default(self) -> None:
        google, anthropic = _client(), _client("Claude text")
        registry = ProviderRegistry({"google": google, "anthropic": anthropic})
        attempt = _native(registry).attempt(_context(vision_model="no-such-model"))
        assert attempt.label == "gemini-native-pdf"
        assert google.extract_from_file.call_args.kwargs["model"] == "gemini-2.0-flash"
        anthropic.extract_from_file.assert_not_called()

    def test_transport_error_from_gemini_is_a_failed_attempt(self) -> None:
        sdk_client = MagicMock()
        sdk_client.models.generate_content.side_effect = httpx.ReadError("connection reset")
        with patch("sourcelens.llm.gemini_client_adapter.genai.Client", return_value=sdk_client):
            gemini = GeminiClientAdapter(api_key="k", timeout_seconds=60)

        attempt = _native(ProviderRegistry({"google": gemini})).attempt(_context())

        assert not attempt.succeeded
        assert attempt.label == "gemini-native-pdf"
        assert "connection reset" in attempt.error

    def test_response_preamble_is_removed(self) -> None:
        client = _client("Here is the extracted text:\n\nDear Sir,")
        attempt = _native(ProviderRegistry({"google": client})).attempt(_context())
        assert attempt.content == "Dear Sir,"


class TestFirstPageOcrExtractor:
    def _make(self, client: MagicMock | None, renderer: MagicMock) -> FirstPageOcrExtractor:
        registry = ProviderRegistry({"anthropic": client} if client is not None else None)
        return FirstPageOcrExtractor(
            registry,
            renderer,
            default_model_id="claude-sonnet",
            temperature=0.1,
            max_output_tokens=1000,
        )

    def _renderer(self, tmp_path: Path) -> MagicMock:
        image = tmp_path / "source-page1.png"
        image.write_bytes(b"\x89PNG")
        renderer = MagicMock(spec=PdfToPpmRenderer)
        renderer.render_first_page.return_value = image
        return renderer

    def test_multi_page_note(self, tmp_path: Path) -> None:
        client = _client("First page text")
        extractor = self._make(client, self._renderer(tmp_path))

        attempt = extractor.attempt(_context(source_path=tmp_path / "source.pdf", page_count=3))

        assert attempt.label == "claude-vision-first-page"
        assert attempt.content.startswith("First page text")
        assert attempt.content.endswith(
            "[Note: Only the first page of this 3-page document was processed with OCR.]"
        )
        assert client.extract_from_file.call_args.kwargs["mime_type"] == "image/png"

    def test_single_page_has_no_note(self, tmp_path: Path) -> None:
        extractor = self._make(_client("Only page"), self._renderer(tmp_path))
        attempt = extractor.attempt(_context(source_path=tmp_path / "source.pdf", page_count=1))
        assert attempt.content == "Only page"

    def test_render_failure(self, tmp_path: Path) -> None:
        renderer = MagicMock(spec=PdfToPpmRenderer)
        renderer.render_first_page.side_effect = PdfToolUnavailableError("missing")
        attempt = self._make(_client(), renderer).attempt(
            _context(source_path=tmp_path / "source.pdf")
        )
        assert not attempt.succeeded
        assert attempt.error == "missing"

    def test_missing_provider_skips_rendering(self, tmp_path: Path) -> None:
        renderer = self._renderer(tmp_path)
        attempt = self._make(None, renderer).attempt(_context(source_path=tmp_path / "s.pdf"))
        assert attempt.error == PROVIDER_UNAVAILABLE
        renderer.render_first_page.assert_not_called()

    def test_unknown_requested_model_uses_stage_default(self, tmp_path: Path) -> None:
        google, anthropic = _client("Gemini text"), _client("Claude text")
        registry = ProviderRegistry({"google": google, "anthropic": anthropic})
        extractor = FirstPageOcrExtractor(
            registry,
            self._renderer(tmp_path),
            default_model_id="claude-sonnet",
            temperature=0.1,
            max_output_tokens=1000,
        )

        attempt = extractor.attempt(
            _context(source_path=tmp_path / "source.pdf", vision_model="no-such-model")
        )

        assert attempt.label == "claude-vision-first-page"
        assert attempt.content == "Claude text"
        google.extract_from_file.assert_not_called()
