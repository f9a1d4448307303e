from __future__ import annotations

import pydantic as p

from .base import BaseSecrets, RootedSettings
from .source import AnsibleVaultSecretsSource


class PostgresqlSecrets(BaseSecrets):
    username: p.Secret[str] | None = None
    password: p.Secret[str] | None = None


class OpenAISecrets(BaseSecrets):
    secret_key: p.Secret[str]


class AnthropicSecrets(BaseSecrets):
    api_key: p.Secret[str]


class LLMSecrets(BaseSecrets):
    # vendors left out cannot be selected as a model provider
    openai: OpenAISecrets | None = None
    anthropic: AnthropicSecrets | None = None


class Secrets(RootedSettings):
    """Credentials decrypted from the environment's ``secrets.vault.yaml``."""

    document_source = AnsibleVaultSecretsSource

    llm: LLMSecrets | None = None
    postgresql: PostgresqlSecrets = PostgresqlSecrets()
