import inspect
import logging
import logging.config
import typing as t

from ecos.lib.logging import TRACE

from .logging import TraceLogLevelLogger


class LoggingProvider(object):
    """Container resource applying the ``logging`` settings document.

    Constructing it registers the TRACE level and runs ``dictConfig``.
    """

    Function: t.Final[t.Literal["fn"]] = "fn"
    Module: t.Final[t.Literal["mod"]] = "mod"

    def __init__(self, config: dict[str, t.Any], debug: bool):
        logging.setLoggerClass(TraceLogLevelLogger)
        logging.addLevelName(TRACE, "TRACE")
        logging.config.dictConfig(config)
        self.capture_warnings(debug)

    def get_logger(
        self, scope: t.Literal["mod", "fn"] = "mod", name: str | None = None, n_frames: int = 1
    ) -> TraceLogLevelLogger:
        """Logger named after the calling module, or ``module.function`` for scope "fn"."""
        if name is None:
            frame = inspect.stack()[n_frames]
            name = frame.frame.f_globals["__name__"]
            if scope == self.Function:
                name = f"{name}.{frame.function}"
        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)
