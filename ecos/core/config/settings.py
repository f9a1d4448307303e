import pydantic as p

from .base import RootedSettings
from .evaluation import EvaluationSettings
from .llm import LLMSettings
from .logging import LoggingSettings
from .source import YAMLCascadingSettingsSource
from .storage import StorageSettings
from .template import TemplateSettings


class Settings(RootedSettings):
    """The whole configuration: one ``<field>.yaml`` per field under the config root."""

    document_source = YAMLCascadingSettingsSource

    root: p.FileUrl
    override: tuple[str, ...] = ()

    # no usable default, a document must exist
    logging: LoggingSettings
    storage: StorageSettings

    template: TemplateSettings = TemplateSettings()
    llm: LLMSettings = LLMSettings()
    evaluation: EvaluationSettings = EvaluationSettings()
