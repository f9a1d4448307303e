"""Chat models for the evaluation pipeline, built from settings and secrets."""

from __future__ import annotations

from langchain_core.language_models import BaseChatModel

from .config import LLMSecrets, LLMSettings, ModelSettings
from .provider import create_chat_model, ProviderType


class ModelFactory(object):
    def __init__(self, settings: LLMSettings, secrets: LLMSecrets) -> None:
        self.settings = settings
        self.secrets = secrets

    def api_key(self, provider: ProviderType) -> str:
        """The configured key for ``provider``; raises ValueError when there is none."""
        match provider:
            case ProviderType.OpenAI:
                key = self.secrets.openai_api_key
            case ProviderType.Anthropic:
                key = self.secrets.anthropic_api_key
        if key is None:
            raise ValueError(f"no API key configured for {provider.value}")
        return key.get_secret_value()

    def create_model(self, settings: ModelSettings) -> BaseChatModel:
        return create_chat_model(settings, self.api_key(settings.provider))

    def create_evaluation_model(self) -> BaseChatModel:
        """Create the model that grades sessions."""
        return self.create_model(self.evaluation_settings)

    @property
    def evaluation_settings(self) -> ModelSettings:
        return self.settings.models.evaluation
