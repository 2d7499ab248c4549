from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.models import ModelConfig, Provider, find_model, get_model_by_id
from sourcelens.logging.logger import Log


class ProviderRegistry:
    """Holds one client per configured provider.

    Providers without credentials are never registered, so ``get`` returning
    ``None`` means "provider unavailable" rather than an error.
    """

    def __init__(self, clients: dict[Provider, BaseLlmClient] | None = None) -> None:
        self._clients: dict[Provider, BaseLlmClient] = dict(clients or {})

    def register(self, provider: Provider, client: BaseLlmClient) -> None:
        self._clients[provider] = client

    def get(self, provider: Provider) -> BaseLlmClient | None:
        return self._clients.get(provider)

    def is_available(self, provider: Provider) -> bool:
        return provider in self._clients

    @property
    def providers(self) -> list[Provider]:
        return sorted(self._clients)

    def resolve(self, model_id: str) -> tuple[ModelConfig, BaseLlmClient | None]:
        """Resolve a model id through the model registry and pair it with its client."""
        model = get_model_by_id(model_id)
        return model, self.get(model.provider)

    def resolve_preferred(
        self, model_id: str | None, default_model_id: str
    ) -> tuple[ModelConfig, BaseLlmClient | None]:
        """Resolve a caller-requested model, falling back to ``default_model_id``.

        The requested model is used only when the id is known and its provider
        is registered. Unknown ids never go through the global default model.
        """
        if model_id:
            model = find_model(model_id)
            if model is None:
                Log.info(f"Unknown model '{model_id}', using '{default_model_id}'")
            elif model.provider in self._clients:
                return model, self._clients[model.provider]
            else:
                Log.info(
                    f"Provider '{model.provider}' for model '{model_id}' is unavailable, "
                    f"using '{default_model_id}'"
                )
        return self.resolve(default_model_id)
