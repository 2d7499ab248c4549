from sourcelens.llm.client_base import BaseLlmClient
from sourcelens.llm.factory import LlmClientFactory
from sourcelens.llm.models import ModelConfig, get_model_by_id
from sourcelens.llm.registry import ProviderRegistry

__all__ = [
    "BaseLlmClient",
    "LlmClientFactory",
    "ModelConfig",
    "ProviderRegistry",
    "get_model_by_id",
]
