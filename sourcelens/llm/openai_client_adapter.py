import base64

import httpx
import openai

from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.exceptions import LlmError, LlmNetworkError


class OpenAIClientAdapter(BaseLlmClient):
    """Vision/text client built on the OpenAI-compatible chat completions API."""

    provider = "openai"

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
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
        encoded = base64.b64encode(data).decode("ascii")
        if mime_type == "application/pdf":
            attachment: dict[str, object] = {
                "type": "file",
                "file": {
                    "filename": "document.pdf",
                    "file_data": f"data:application/pdf;base64,{encoded}",
                },
            }
        else:
            attachment = {
                "type": "image_url",
                "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
            }
        user_content = [attachment, {"type": "text", "text": user_prompt}]
        return self._complete(
            model=model,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
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
        return self._complete(
            model=model,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )

    def _complete(
        self,
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
        messages: list[dict[str, object]],
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_output_tokens,
                messages=messages,  # type: ignore[arg-type]
            )
        except (openai.APIConnectionError, httpx.HTTPError) as exc:
            raise LlmNetworkError(f"OpenAI network error: {exc}") from exc
        except openai.APIError as exc:
            raise LlmNetworkError(f"OpenAI API error: {exc}") from exc

        if not response.choices:
            raise LlmError("OpenAI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise LlmError("OpenAI returned empty response")
        return content
