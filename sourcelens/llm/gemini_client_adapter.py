import httpx
from google import genai
from google.genai import errors, types

from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.exceptions import LlmError, LlmNetworkError


class GeminiClientAdapter(BaseLlmClient):
    """Client for Google Gemini models via the ``google-genai`` SDK.

    Gemini accepts PDFs natively, so ``extract_from_file`` is used both for
    native-PDF vision and for image uploads.
    """

    provider = "gemini"

    def __init__(self, *, api_key: str, timeout_seconds: int) -> None:
        http_options = types.HttpOptions(timeout=timeout_seconds * 1000)
        self._client = genai.Client(api_key=api_key, http_options=http_options)

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
        contents = [
            types.Part.from_bytes(data=data, mime_type=mime_type),
            user_prompt,
        ]
        return self._generate(
            model=model,
            contents=contents,
            system_prompt=system_prompt,
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
        return self._generate(
            model=model,
            contents=[user_prompt],
            system_prompt=system_prompt,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    def _generate(
        self,
        *,
        model: str,
        contents: list[object],
        system_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        try:
            response = self._client.models.generate_content(
                model=model,
                contents=contents,  # type: ignore[arg-type]
                config=config,
            )
        except httpx.HTTPError as exc:
            raise LlmNetworkError(f"Gemini network error: {exc}") from exc
        except errors.APIError as exc:
            raise LlmNetworkError(f"Gemini API error: {exc}") from exc

        text = response.text
        if not text:
            raise LlmError("Gemini returned empty response")
        return text
