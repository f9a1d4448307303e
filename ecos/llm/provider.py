"""Chat models by provider, built through LangChain."""

from __future__ import annotations

import enum
import typing as t

from langchain_core.language_models import BaseChatModel
from pydantic import SecretStr

if t.TYPE_CHECKING:
    from .config import ModelSettings


class ProviderType(enum.Enum):
    OpenAI = "openai"
    Anthropic = "anthropic"


def create_chat_model(settings: ModelSettings, api_key: str) -> BaseChatModel:
    """Build the chat model described by ``settings``.

    With ``json_output`` an OpenAI model is put in JSON mode. Anthropic has
    no such mode; there the grading prompt alone asks for JSON.
    """
    match settings.provider:
        case ProviderType.OpenAI:
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(
                model=settings.model,
                temperature=settings.temperature,
                max_completion_tokens=settings.max_tokens,
                timeout=settings.timeout_seconds,
                max_retries=settings.max_retries,
                api_key=SecretStr(api_key),
                model_kwargs={"response_format": {"type": "json_object"}} if settings.json_output else {},
            )
        case ProviderType.Anthropic:
            from langchain_anthropic import ChatAnthropic

            return ChatAnthropic(
                model_name=settings.model,
                temperature=settings.temperature,
                max_tokens_to_sample=settings.max_tokens,
                timeout=settings.timeout_seconds,
                max_retries=settings.max_retries,
                api_key=SecretStr(api_key),
                stop=None,
            )
