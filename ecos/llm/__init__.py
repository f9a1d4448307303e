"""LLM integration module using LangChain."""

__all__ = [
    # Provider types
    "ProviderType",
    # Factory
    "ModelFactory",
    "create_chat_model",
    # Configuration
    "LLMSettings",
    "LLMSecrets",
    "ModelSettings",
    "EvaluationModels",
]

from .config import EvaluationModels, LLMSecrets, LLMSettings, ModelSettings
from .factory import ModelFactory
from .provider import create_chat_model, ProviderType
