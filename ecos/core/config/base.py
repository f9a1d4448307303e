import typing as t

import pydantic as p
from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import PydanticBaseSettingsSource

from ecos.model import BaseModel, DeploymentEnvironment


# NOTE: BaseModel comes second in the MRO so that its by_alias=True
#       model_dump default wins over pydantic's
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        **_: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # values come from documents, never from the process environment
        return (init_settings,)


class BaseSecrets(BaseSettings):
    pass


class RootedSettings(BaseSettings):
    """Settings whose fields are read from documents under ``root``."""

    document_source: t.ClassVar[t.Callable[[type[PydanticBaseSettings]], PydanticBaseSettingsSource]]

    root: p.AnyUrl
    env: DeploymentEnvironment

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        **_: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, cls.document_source(settings_cls)
