"""Typed mirror of the ``logging.config.dictConfig`` document in ``logging.yaml``.

Field aliases carry dictConfig's special keys (``()`` and ``class``), so the
document must be dumped by alias before it is handed to dictConfig.
"""

import pathlib
import typing as t

import pydantic as p

from .base import BaseSettings

# the standard names plus TRACE, registered by LoggingProvider
LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "WARN", "ERROR", "FATAL", "CRITICAL"]


class FormatterSettings(BaseSettings):
    factory: t.Literal["ecos.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str = "logging.Formatter"
    format: str | None = None
    datefmt: str | None = None
    no_color: bool = False
    indent: bool | None = None
    # handed through to colorlog.ColoredFormatter
    log_colors: dict[str, str] | None = None


class StreamHandlerSettings(BaseSettings):
    handler: t.Literal["colorlog.StreamHandler", "logging.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    stream: str = "ext://sys.stderr"


class RotatingFileHandlerSettings(BaseSettings):
    handler: t.Literal["logging.handlers.TimedRotatingFileHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    filename: pathlib.Path
    when: str = "midnight"
    backupCount: int = 7


HandlerSettings = t.Annotated[
    StreamHandlerSettings | RotatingFileHandlerSettings,
    p.Field(discriminator="handler"),
]


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] | None = None


class LoggingSettings(BaseSettings):
    version: t.Literal[1] = 1
    disable_existing_loggers: bool = False
    formatters: dict[str, FormatterSettings]
    handlers: dict[str, HandlerSettings]
    root: LoggerSettings
    loggers: dict[str, LoggerSettings] = {}

    @p.model_validator(mode="after")
    def check_references(self) -> t.Self:
        for name, handler in self.handlers.items():
            if handler.formatter not in self.formatters:
                raise ValueError(f"handler {name!r} uses undefined formatter {handler.formatter!r}")
        for logger in [self.root, *self.loggers.values()]:
            if missing := set(logger.handlers or ()) - set(self.handlers):
                raise ValueError(f"undefined handlers: {', '.join(sorted(missing))}")
        return self
