"""Settings for the chat models used by evaluation."""

from __future__ import annotations

import typing as t

import annotated_types as ant
import pydantic as p
import pydantic_settings as ps

from .provider import ProviderType

Temperature = t.Annotated[float, ant.Interval(ge=0.0, le=2.0)]
PositiveInt = t.Annotated[int, ant.Gt(0)]


class ModelSettings(ps.BaseSettings):
    provider: ProviderType = ProviderType.OpenAI
    model: str = "gpt-4o"
    max_tokens: PositiveInt = 2000
    temperature: Temperature = 1.0
    max_retries: t.Annotated[int, ant.Ge(0)] = 3
    timeout_seconds: t.Annotated[float, ant.Gt(0)] = 60.0
    # ask the vendor for a JSON object rather than free text
    json_output: bool = False


class EvaluationModels(ps.BaseSettings):
    # grades a finished session against the scenario's criteria
    evaluation: ModelSettings = ModelSettings(temperature=0.3, json_output=True)


class LLMSettings(ps.BaseSettings):
    models: EvaluationModels = EvaluationModels()


class LLMSecrets(ps.BaseSettings):
    """API keys, one per vendor; a vendor without a key cannot be used."""

    openai_api_key: p.Secret[str] | None = None
    anthropic_api_key: p.Secret[str] | None = None
