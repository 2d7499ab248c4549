class LlmError(Exception):
    """Raised when an LLM provider call fails or returns nothing usable."""


class LlmNetworkError(LlmError):
    """Raised when the provider call fails due to network/infrastructure issues."""
