from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from sourcelens.api.app import create_app
from sourcelens.config.settings import Settings
from sourcelens.ingestion.models import ExtractionResult
from sourcelens.ingestion.pipeline import IngestionPipeline
from sourcelens.llm.registry import ProviderRegistry
from sourcelens.text.ai_cleaner import AiTextCleaner, CleanupResult
from sourcelens.text.cleaner import basic_cleanup


@pytest.fixture()
def settings(workspace_root: Path) -> Settings:
    return Settings(
        use_example_llm=True,
        workspace_root=str(workspace_root),
        gemini_api_key="",
        anthropic_api_key="",
        openai_api_key="",
    )


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))


def _mock_pipeline(result: ExtractionResult | None = None) -> MagicMock:
    pipeline = MagicMock(spec=IngestionPipeline)
    pipeline.process.return_value = result
    return pipeline


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestUpload:
    def test_text_upload_is_returned_unchanged(self, client: TestClient) -> None:
        text = "".join(f"Line {i}:   some   notes\n" for i in range(2500))
        assert len(text) > 50 * 1024

        response = client.post("/upload", files={"file": ("notes.txt", text.encode(), "text/plain")})

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == text
        assert body["processingMethod"] == "direct-text"
        assert body["filename"] == "notes.txt"
        assert body["type"] == "text/plain"
        assert body["fileSize"] == len(text)
        assert "thumbnailUrl" not in body
        assert "pageCount" not in body

    def test_too_many_pages(
        self, client: TestClient, oversized_pdf_bytes: bytes, workspace_root: Path
    ) -> None:
        response = client.post(
            "/upload", files={"file": ("big.pdf", oversized_pdf_bytes, "application/pdf")}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "TOO_MANY_PAGES"
        assert "401 pages" in response.json()["message"]
        assert list(workspace_root.iterdir()) == []

    def test_missing_file(self, client: TestClient) -> None:
        response = client.post("/upload", data={"useAIVision": "false"})
        assert response.status_code == 400
        assert response.json()["error"] == "NO_FILE"

    def test_empty_file(self, client: TestClient) -> None:
        response = client.post("/upload", files={"file": ("empty.txt", b"", "text/plain")})
        assert response.status_code == 400
        assert response.json()["error"] == "NO_FILE"

    def test_unsupported_type(self, client: TestClient) -> None:
        response = client.post(
            "/upload", files={"file": ("archive.zip", b"PK\x03\x04", "application/zip")}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "UNSUPPORTED_TYPE"

    def test_scanned_pdf_uses_vision(
        self, client: TestClient, empty_pdf_bytes: bytes, workspace_root: Path
    ) -> None:
        response = client.post(
            "/upload", files={"file": ("scan.pdf", empty_pdf_bytes, "application/pdf")}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["processingMethod"].startswith("gemini-native-pdf")
        assert body["content"]
        assert body["pageCount"] == 1
        assert body["thumbnailUrl"].startswith("data:image/jpeg;base64,")
        assert list(workspace_root.iterdir()) == []

    def test_form_fields_reach_pipeline(self, settings: Settings) -> None:
        result = ExtractionResult(
            content="text",
            processing_method="claude-native-pdf-cleaned",
            filename="a.pdf",
            mime_type="application/pdf",
            file_size=8,
            page_count=1,
            cleaned=True,
            original_size=4,
        )
        pipeline = _mock_pipeline(result)
        client = TestClient(
            create_app(settings, pipeline=pipeline, cleaner=MagicMock(spec=AiTextCleaner))
        )

        response = client.post(
            "/upload",
            files={"file": ("a.pdf", b"%PDF-1.4", "application/pdf")},
            data={"useAIVision": "true", "visionModel": "claude-sonnet"},
        )

        assert response.status_code == 200
        request = pipeline.process.call_args.args[0]
        assert request.use_vision_first
        assert request.vision_model == "claude-sonnet"
        assert response.json()["processingMethod"] == "claude-native-pdf-cleaned"
        assert response.json()["cleaned"] is True

    def test_unexpected_error_returns_500(self, settings: Settings) -> None:
        pipeline = _mock_pipeline()
        pipeline.process.side_effect = OSError("disk full")
        client = TestClient(
            create_app(settings, pipeline=pipeline, cleaner=MagicMock(spec=AiTextCleaner))
        )

        response = client.post("/upload", files={"file": ("a.pdf", b"%PDF-1.4", "application/pdf")})

        assert response.status_code == 500
        assert response.json() == {"message": "Error processing file upload", "error": "disk full"}


class TestCleanupText:
    def test_empty_text(self, client: TestClient) -> None:
        response = client.post("/cleanup-text", json={"text": "   "})
        assert response.status_code == 400
        assert response.json() == {"message": "No text provided"}

    def test_cleanup_response(self, settings: Settings) -> None:
        cleaner = MagicMock(spec=AiTextCleaner)
        cleaner.cleanup.return_value = CleanupResult(
            cleaned_text="Clean",
            original_length=10,
            cleaned_length=5,
            markdown_formatted=True,
            fallback=False,
        )
        client = TestClient(create_app(settings, pipeline=_mock_pipeline(), cleaner=cleaner))

        response = client.post("/cleanup-text", json={"text": "Dirty text", "modelId": "gpt-4.1"})

        assert response.status_code == 200
        assert response.json() == {
            "cleanedText": "Clean",
            "originalLength": 10,
            "cleanedLength": 5,
            "markdownFormatted": True,
            "fallback": False,
        }
        cleaner.cleanup.assert_called_once_with("Dirty text", "gpt-4.1")

    def test_fallback_without_provider(self, settings: Settings) -> None:
        cleaner = AiTextCleaner(ProviderRegistry(), model_id="gemini-flash", timeout_seconds=5)
        client = TestClient(create_app(settings, pipeline=_mock_pipeline(), cleaner=cleaner))
        text = "intro text\nTHE PREFACE\nbody text"

        response = client.post("/cleanup-text", json={"text": text})

        assert response.status_code == 200
        assert response.json()["fallback"] is True
        assert response.json()["cleanedText"] == basic_cleanup(text)
