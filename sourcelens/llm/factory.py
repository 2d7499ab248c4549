from sourcelens.config.settings import Settings
from sourcelens.llm.anthropic_client_adapter import AnthropicClientAdapter
from sourcelens.llm.example_client_adapter import ExampleClientAdapter
from sourcelens.llm.gemini_client_adapter import GeminiClientAdapter
from sourcelens.llm.openai_client_adapter import OpenAIClientAdapter
from sourcelens.llm.registry import ProviderRegistry
from sourcelens.logging.logger import Log


class LlmClientFactory:
    """Creates the provider registry from application settings."""

    @classmethod
    def create_registry(cls, settings: Settings) -> ProviderRegistry:
        registry = ProviderRegistry()
        if settings.use_example_llm:
            example = ExampleClientAdapter()
            for provider in ("google", "anthropic", "openai"):
                registry.register(provider, example)  # type: ignore[arg-type]
            Log.info("Using example LLM client for all providers")
            return registry

        timeout = settings.llm_timeout_seconds
        if settings.gemini_api_key:
            registry.register(
                "google",
                GeminiClientAdapter(api_key=settings.gemini_api_key, timeout_seconds=timeout),
            )
        if settings.anthropic_api_key:
            registry.register(
                "anthropic",
                AnthropicClientAdapter(
                    api_key=settings.anthropic_api_key, timeout_seconds=timeout
                ),
            )
        if settings.openai_api_key:
            registry.register(
                "openai",
                OpenAIClientAdapter(
                    api_key=settings.openai_api_key,
                    timeout_seconds=timeout,
                    base_url=settings.openai_base_url.strip() or None,
                ),
            )
        if registry.providers:
            Log.info(f"LLM providers configured: {', '.join(registry.providers)}")
        else:
            Log.warning("No LLM provider keys configured, vision fallback is disabled")
        return registry
