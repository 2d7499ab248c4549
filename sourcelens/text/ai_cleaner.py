from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from sourcelens.llm.exceptions import LlmError
from sourcelens.llm.prompt_loader import CLEANUP, load_prompt
from sourcelens.llm.registry import ProviderRegistry
from sourcelens.llm.response_parser import parse_text_response
from sourcelens.logging.logger import Log
from sourcelens.text.cleaner import basic_cleanup, post_process_cleaned_text


@dataclass(frozen=True, slots=True)
class CleanupResult:
    cleaned_text: str
    original_length: int
    cleaned_length: int
    markdown_formatted: bool
    fallback: bool


class AiTextCleaner:
    """Cleans OCR text with an LLM under a wall-clock timeout.

    Any provider failure, a missing provider or a timeout produces
    ``basic_cleanup(text)`` with ``fallback=True`` instead of an error.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        model_id: str,
        timeout_seconds: float,
        min_length_ratio: float = 0.5,
        temperature: float = 0.1,
        max_output_tokens: int = 65536,
    ) -> None:
        self._registry = registry
        self._model_id = model_id
        self._timeout_seconds = timeout_seconds
        self._min_length_ratio = min_length_ratio
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._system_prompt = load_prompt(CLEANUP)

    def cleanup(self, text: str, model_id: str | None = None) -> CleanupResult:
        model, client = self._registry.resolve_preferred(model_id, self._model_id)
        if client is None:
            Log.warning(f"Cleanup provider '{model.provider}' unavailable, using basic cleanup")
            return self._fallback(text)

        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(
            client.generate_text,
            model=model.api_model,
            system_prompt=self._system_prompt,
            user_prompt=text,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )
        try:
            raw = future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError:
            Log.warning(
                f"Cleanup with {model.id} timed out after {self._timeout_seconds}s, "
                "using basic cleanup"
            )
            return self._fallback(text)
        except LlmError as exc:
            Log.warning(f"Cleanup with {model.id} failed: {exc}")
            return self._fallback(text)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        parsed = parse_text_response(raw)
        cleaned = post_process_cleaned_text(parsed.text, text, self._min_length_ratio)
        Log.info(
            f"Cleanup with {model.id} ({parsed.kind}): "
            f"{len(text)} -> {len(cleaned)} chars"
        )
        return CleanupResult(
            cleaned_text=cleaned,
            original_length=len(text),
            cleaned_length=len(cleaned),
            markdown_formatted=True,
            fallback=False,
        )

    def _fallback(self, text: str) -> CleanupResult:
        cleaned = basic_cleanup(text)
        return CleanupResult(
            cleaned_text=cleaned,
            original_length=len(text),
            cleaned_length=len(cleaned),
            markdown_formatted=True,
            fallback=True,
        )
