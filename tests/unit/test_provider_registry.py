from unittest.mock import MagicMock, patch

from sourcelens.config.settings import Settings
from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.example_client_adapter import ExampleClientAdapter
from sourcelens.llm.factory import LlmClientFactory
from sourcelens.llm.registry import ProviderRegistry

MODULE = "sourcelens.llm.factory"


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "gemini_api_key": "",
        "anthropic_api_key": "",
        "openai_api_key": "",
        "use_example_llm": False,
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


class TestProviderRegistry:
    def test_missing_provider_returns_none(self) -> None:
        registry = ProviderRegistry()
        assert registry.get("google") is None
        assert not registry.is_available("google")

    def test_resolve_pairs_model_with_client(self) -> None:
        client = MagicMock(spec=BaseLlmClient)
        registry = ProviderRegistry({"anthropic": client})
        model, resolved = registry.resolve("claude-sonnet")
        assert model.id == "claude-sonnet"
        assert resolved is client

    def test_resolve_without_client(self) -> None:
        registry = ProviderRegistry()
        model, resolved = registry.resolve("gemini-flash")
        assert model.provider == "google"
        assert resolved is None

    def test_resolve_preferred_uses_available_request(self) -> None:
        google, anthropic = MagicMock(spec=BaseLlmClient), MagicMock(spec=BaseLlmClient)
        registry = ProviderRegistry({"google": google, "anthropic": anthropic})
        model, resolved = registry.resolve_preferred("claude-haiku", "gemini-flash")
        assert model.id == "claude-haiku"
        assert resolved is anthropic

    def test_resolve_preferred_unknown_id_uses_given_default(self) -> None:
        google, anthropic = MagicMock(spec=BaseLlmClient), MagicMock(spec=BaseLlmClient)
        registry = ProviderRegistry({"google": google, "anthropic": anthropic})
        model, resolved = registry.resolve_preferred("no-such-model", "claude-sonnet")
        assert model.id == "claude-sonnet"
        assert resolved is anthropic

    def test_resolve_preferred_unavailable_provider_uses_given_default(self) -> None:
        google = MagicMock(spec=BaseLlmClient)
        registry = ProviderRegistry({"google": google})
        model, resolved = registry.resolve_preferred("gpt-4.1", "gemini-flash")
        assert model.id == "gemini-flash"
        assert resolved is google

    def test_resolve_preferred_without_request(self) -> None:
        registry = ProviderRegistry()
        model, resolved = registry.resolve_preferred(None, "claude-sonnet")
        assert model.id == "claude-sonnet"
        assert resolved is None


class TestLlmClientFactory:
    def test_registers_only_providers_with_keys(self) -> None:
        with (
            patch(f"{MODULE}.GeminiClientAdapter") as gemini_cls,
            patch(f"{MODULE}.AnthropicClientAdapter") as anthropic_cls,
            patch(f"{MODULE}.OpenAIClientAdapter") as openai_cls,
        ):
            registry = LlmClientFactory.create_registry(_settings(gemini_api_key="g"))

        assert registry.providers == ["google"]
        gemini_cls.assert_called_once_with(api_key="g", timeout_seconds=60)
        anthropic_cls.assert_not_called()
        openai_cls.assert_not_called()

    def test_openai_base_url_is_optional(self) -> None:
        with patch(f"{MODULE}.OpenAIClientAdapter") as openai_cls:
            LlmClientFactory.create_registry(_settings(openai_api_key="o"))
        assert openai_cls.call_args.kwargs["base_url"] is None

    def test_no_keys_gives_empty_registry(self) -> None:
        registry = LlmClientFactory.create_registry(_settings())
        assert registry.providers == []

    def test_example_client_serves_every_provider(self) -> None:
        registry = LlmClientFactory.create_registry(_settings(use_example_llm=True))
        assert registry.providers == ["anthropic", "google", "openai"]
        assert isinstance(registry.get("google"), ExampleClientAdapter)
