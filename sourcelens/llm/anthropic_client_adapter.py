import base64

import anthropic
import httpx

from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.exceptions import LlmError, LlmNetworkError


class AnthropicClientAdapter(BaseLlmClient):
    provider = "anthropic"

    def __init__(self, *, api_key: str, timeout_seconds: int) -> None:
        # one request per call, the request timeout bounds the whole attempt
        self._client = anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )

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
        block_type = "document" if mime_type == "application/pdf" else "image"
        attachment = {
            "type": block_type,
            "source": {
                "type": "base64",
                "media_type": mime_type,
                "data": base64.b64encode(data).decode("ascii"),
            },
        }
        return self._create(
            model=model,
            system_prompt=system_prompt,
            content=[attachment, {"type": "text", "text": user_prompt}],
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    def generate_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        return self._create(
            model=model,
            system_prompt=system_prompt,
            content=[{"type": "text", "text": user_prompt}],
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    def _create(
        self,
        *,
        model: str,
        system_prompt: str,
        content: list[dict[str, object]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        try:
            response = self._client.messages.create(
                model=model,
                system=system_prompt,
                max_tokens=max_output_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": content}],  # type: ignore[typeddict-item]
            )
        except (anthropic.APIConnectionError, httpx.HTTPError) as exc:
            raise LlmNetworkError(f"Anthropic network error: {exc}") from exc
        except anthropic.APIError as exc:
            raise LlmNetworkError(f"Anthropic API error: {exc}") from exc

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        if not text:
            raise LlmError("Anthropic returned empty response")
        return text
