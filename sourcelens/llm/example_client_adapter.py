"""Offline LLM client adapter.

Returns canned text without any network call. Selected with
``USE_EXAMPLE_LLM=true`` for local development and used as a reference
when adding a new provider adapter.
"""

from typing import ClassVar

from sourcelens.llm.client_base import BaseLlmClient


class ExampleClientAdapter(BaseLlmClient):
    """Adapter that echoes a fixed transcription or the cleanup input."""

    provider = "example"

    DEFAULT_TRANSCRIPTION: ClassVar[str] = (
        "Example transcription produced without contacting a model provider."
    )

    def __init__(self) -> None:
        pass

    def extract_from_file(
        self,
        *,
        model: str,
        data: bytes,
        mime_type: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        _ = model, data, mime_type, system_prompt, user_prompt, temperature, max_output_tokens
        return self.DEFAULT_TRANSCRIPTION

    def generate_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        _ = model, system_prompt, temperature, max_output_tokens
        return user_prompt
