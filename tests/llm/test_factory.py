"""Tests for ecos.llm.factory module."""

from __future__ import annotations

import pydantic as p
import pytest
from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

from ecos.llm import LLMSecrets, LLMSettings, ModelFactory, ModelSettings, ProviderType


class TestModelFactory(object):
    def test_evaluation_model_uses_configured_provider(self) -> None:
        """The default evaluation model is OpenAI at a low temperature."""
        factory = ModelFactory(LLMSettings(), LLMSecrets(openai_api_key=p.Secret[str]("sk-test")))

        model = factory.create_evaluation_model()

        assert isinstance(model, ChatOpenAI)
        assert model.model_name == "gpt-4o"
        assert model.temperature == 0.3

    def test_anthropic_model(self) -> None:
        factory = ModelFactory(LLMSettings(), LLMSecrets(anthropic_api_key=p.Secret[str]("sk-ant-test")))

        model = factory.create_model(ModelSettings(provider=ProviderType.Anthropic, model="claude-sonnet-4-5"))

        assert isinstance(model, ChatAnthropic)

    def test_missing_key(self) -> None:
        """A provider without a key cannot be used."""
        factory = ModelFactory(LLMSettings(), LLMSecrets(openai_api_key=None, anthropic_api_key=None))

        with pytest.raises(ValueError, match="anthropic"):
            factory.api_key(ProviderType.Anthropic)
