"""LLM container for dependency injection."""

from __future__ import annotations

import typing as t

from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Provider, Singleton
from langchain_core.language_models import BaseChatModel

from ecos.llm import LLMSecrets, LLMSettings, ModelFactory
from ecos.llm.evaluation import ChatModelGradingCapability, GradingCapability


def provide_model_factory(settings: dict[str, t.Any], secrets: LLMSecrets) -> ModelFactory:
    return ModelFactory(LLMSettings.model_validate(settings), secrets)


def provide_evaluation_model(factory: ModelFactory) -> BaseChatModel:
    return factory.create_evaluation_model()


class LLMContainer(DeclarativeContainer):
    """Container for LLM services."""

    config: Configuration = Configuration()
    openai_secrets: Configuration = Configuration()
    anthropic_secrets: Configuration = Configuration()

    llm_secrets: Provider[LLMSecrets] = Singleton(
        LLMSecrets,
        openai_api_key=openai_secrets.secret_key,
        anthropic_api_key=anthropic_secrets.api_key,
    )

    model_factory: Provider[ModelFactory] = Singleton(provide_model_factory, settings=config, secrets=llm_secrets)
    evaluation_model: Provider[BaseChatModel] = Singleton(provide_evaluation_model, factory=model_factory)
    grading: Provider[GradingCapability] = Singleton(ChatModelGradingCapability, model=evaluation_model)
