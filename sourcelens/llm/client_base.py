from abc import ABC, abstractmethod


class BaseLlmClient(ABC):
    """Contract for provider-specific multimodal LLM clients."""

    provider: str = ""

    @abstractmethod
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
        """Send a PDF or image together with an instruction and return the reply text.

        Raises:
            LlmNetworkError: on connection, timeout or provider API errors.
            LlmError: when the provider answers without text.
        """

    @abstractmethod
    def generate_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Return the provider's plain-text reply to a text-only prompt."""
