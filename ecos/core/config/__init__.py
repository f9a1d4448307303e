__all__ = [
    "EvaluationSettings",
    "LLMSettings",
    "LoggingSettings",
    "Secrets",
    "Settings",
    "StorageSettings",
    "TemplateSettings",
]


from .evaluation import EvaluationSettings
from .llm import LLMSettings
from .logging import LoggingSettings
from .secrets import Secrets
from .settings import Settings
from .storage import StorageSettings
from .template import TemplateSettings
