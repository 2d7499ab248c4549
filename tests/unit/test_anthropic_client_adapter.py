from unittest.mock import MagicMock, patch

import anthropic
import httpx
import pytest

from sourcelens.llm.anthropic_client_adapter import AnthropicClientAdapter
from sourcelens.llm.exceptions import LlmError, LlmNetworkError

MODULE = "sourcelens.llm.anthropic_client_adapter"


def _text_block(text: str) -> MagicMock:
    block = MagicMock()
    block.type = "text"
    block.text = text
    return block


def _make_adapter(mock_client: MagicMock) -> AnthropicClientAdapter:
    with patch(f"{MODULE}.anthropic.Anthropic", return_value=mock_client):
        return AnthropicClientAdapter(api_key="k", timeout_seconds=60)


def _extract(adapter: AnthropicClientAdapter, mime_type: str) -> str:
    return adapter.extract_from_file(
        model="claude-3-7-sonnet-latest",
        data=b"bytes",
        mime_type=mime_type,
        system_prompt="system",
        user_prompt="transcribe",
        temperature=0.1,
        max_output_tokens=1000,
    )


class TestAnthropicClientAdapter:
    def test_image_is_sent_as_image_block(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(content=[_text_block("Page one")])
        adapter = _make_adapter(mock_client)

        assert _extract(adapter, "image/png") == "Page one"
        kwargs = mock_client.messages.create.call_args.kwargs
        block = kwargs["messages"][0]["content"][0]
        assert block["type"] == "image"
        assert block["source"]["media_type"] == "image/png"
        assert kwargs["system"] == "system"

    def test_pdf_is_sent_as_document_block(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(content=[_text_block("Doc")])
        adapter = _make_adapter(mock_client)

        _extract(adapter, "application/pdf")
        block = mock_client.messages.create.call_args.kwargs["messages"][0]["content"][0]
        assert block["type"] == "document"

    def test_joins_text_blocks(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(
            content=[_text_block("first "), _text_block("second")]
        )
        adapter = _make_adapter(mock_client)
        assert _extract(adapter, "image/jpeg") == "first second"

    def test_raises_error_for_empty_content(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create.return_value = MagicMock(content=[])
        adapter = _make_adapter(mock_client)
        with pytest.raises(LlmError, match="empty response"):
            _extract(adapter, "image/png")

    def test_raises_network_error_on_connection_failure(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create.side_effect = anthropic.APIConnectionError(
            request=MagicMock()
        )
        adapter = _make_adapter(mock_client)
        with pytest.raises(LlmNetworkError, match="network error"):
            _extract(adapter, "image/png")

    def test_raises_network_error_on_read_error(self) -> None:
        mock_client = MagicMock()
        mock_client.messages.create.side_effect = httpx.ReadError("connection reset")
        adapter = _make_adapter(mock_client)
        with pytest.raises(LlmNetworkError, match="network error"):
            _extract(adapter, "image/png")

    def test_sdk_retries_are_disabled(self) -> None:
        with patch(f"{MODULE}.anthropic.Anthropic") as client_cls:
            AnthropicClientAdapter(api_key="k", timeout_seconds=45)
        kwargs = client_cls.call_args.kwargs
        assert kwargs["max_retries"] == 0
        assert kwargs["timeout"] == 45
