import importlib
import logging
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

import ecos.lib.json as json

from .style import LogStyle

# attributes present on every record; anything else arrived through extra=
_RecordAttributes = frozenset(vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "log_color",
}


class ExtraFormatter(logging.Formatter):
    """Append the ``extra={...}`` payload of a record to the base formatter's output as JSON.

    ``base`` may be a formatter class or its dotted path, so the formatter can
    wrap e.g. ``colorlog.ColoredFormatter`` from a ``dictConfig`` document.
    Unknown keyword arguments are handed to the base formatter.
    """

    def __init__(
        self,
        base: type[logging.Formatter] | str = logging.Formatter,
        format: str | None = None,
        datefmt: str | None = None,
        indent: bool | None = None,
        no_color: bool = False,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        **kwargs: t.Any,
    ):
        if isinstance(base, str):
            module, _, name = base.rpartition(".")
            base = t.cast(type[logging.Formatter], getattr(importlib.import_module(module), name))
        super().__init__(format, datefmt, style)
        # unset options arrive as None from the settings dump
        options = {k: v for k, v in kwargs.items() if v is not None}
        self.base = base(format, datefmt=datefmt, style=style, **options)
        self.indent = 4 if indent else None
        self.no_color = no_color
        self.pyg_style = pyg_style

    def format(self, record: logging.LogRecord) -> str:
        message = self.base.format(record)
        extra = {k: v for k, v in vars(record).items() if k not in _RecordAttributes}
        if not extra:
            return message

        text = json.dumps(extra, sort_keys=True, indent=self.indent, default=_encode_or_repr)
        if not self.no_color:
            formatter = Terminal256Formatter(style=self.pyg_style)
            text = pygments.highlight(text, JsonLexer(), formatter).strip()  # pyright: ignore
        return f"{message} {text}"


def _encode_or_repr(obj: t.Any) -> json.JSONValue:
    try:
        return json.encode(obj)
    except TypeError:
        return repr(obj)
