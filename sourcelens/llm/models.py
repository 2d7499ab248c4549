from dataclasses import dataclass
from typing import Literal

from sourcelens.logging.logger import Log

Provider = Literal["anthropic", "openai", "google"]


@dataclass(frozen=True, slots=True)
class ModelConfig:
    id: str
    name: str
    provider: Provider
    api_model: str
    description: str = ""
    max_tokens: int | None = None
    temperature: float | None = None

    @property
    def label_prefix(self) -> str:
        """Short family name used in ``processingMethod`` labels."""
        return PROVIDER_LABELS[self.provider]


PROVIDER_LABELS: dict[str, str] = {
    "google": "gemini",
    "anthropic": "claude",
    "openai": "openai",
}

MODELS: tuple[ModelConfig, ...] = (
    ModelConfig(
        id="claude-haiku",
        name="Claude 3.5 Haiku",
        provider="anthropic",
        api_model="claude-3-5-haiku-latest",
        description="Fast and efficient for quick analyses",
        max_tokens=30000,
        temperature=0.2,
    ),
    ModelConfig(
        id="claude-sonnet",
        name="Claude 3.7 Sonnet",
        provider="anthropic",
        api_model="claude-3-7-sonnet-latest",
        description="Advanced with deeper context understanding",
        max_tokens=30000,
        temperature=0.5,
    ),
    ModelConfig(
        id="gpt-4.1-nano",
        name="GPT-4.1 Nano",
        provider="openai",
        api_model="gpt-4.1-nano",
        description="Low-latency model",
        max_tokens=32000,
        temperature=0.3,
    ),
    ModelConfig(
        id="gpt-4.1",
        name="GPT-4.1",
        provider="openai",
        api_model="gpt-4.1-2025-04-14",
        description="Flagship OpenAI model",
        max_tokens=32000,
        temperature=0.3,
    ),
    ModelConfig(
        id="o3-mini",
        name="O3 Mini",
        provider="openai",
        api_model="o3-mini-2025-01-31",
        description="Fast reasoning model",
        temperature=0.3,
    ),
    ModelConfig(
        id="gemini-flash",
        name="Gemini 2.0 Flash",
        provider="google",
        api_model="gemini-2.0-flash",
        description="Long documents with a 1M token context window",
        max_tokens=400000,
        temperature=0.2,
    ),
    ModelConfig(
        id="gemini-flash-lite",
        name="Gemini 2.0 Flash Lite",
        provider="google",
        api_model="gemini-2.0-flash-lite",
        description="Smaller Flash variant",
        max_tokens=600000,
        temperature=0.2,
    ),
    ModelConfig(
        id="gemini-2.0-pro-exp-02-05",
        name="Gemini 2.0 Pro Experimental",
        provider="google",
        api_model="gemini-2.0-pro-exp-02-05",
        description="Experimental Gemini Pro",
        max_tokens=500000,
        temperature=0.2,
    ),
)

DEFAULT_MODEL_ID = "gemini-flash-lite"

LEGACY_MODEL_MAPPING: dict[str, str] = {
    "claude": "claude-haiku",
    "gpt": "gpt-4.1-nano",
    "o3-mini-2025-01-31": "o3-mini",
}


def find_model(model_id: str) -> ModelConfig | None:
    """Look a model up by internal id, then by API model name.

    Legacy aliases are mapped first. Returns ``None`` when nothing matches.
    """
    mapped = LEGACY_MODEL_MAPPING.get(model_id, model_id)
    for model in MODELS:
        if model.id == mapped:
            return model
    for model in MODELS:
        if model.api_model == mapped:
            return model
    return None


def get_model_by_id(model_id: str) -> ModelConfig:
    """Resolve ``model_id`` like ``find_model`` but fall back to the default model."""
    model = find_model(model_id)
    if model is None:
        Log.warning(f"Model '{model_id}' not found, using default '{DEFAULT_MODEL_ID}'")
        default = find_model(DEFAULT_MODEL_ID)
        return default if default is not None else MODELS[0]
    return model


def get_models_by_provider(provider: Provider) -> list[ModelConfig]:
    return [model for model in MODELS if model.provider == provider]
