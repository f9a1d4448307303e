"""Click, plus the parameter types the ``ecos`` commands share.

Commands import this module as ``click``.
"""

from __future__ import annotations

import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

E = t.TypeVar("E", bound=enum.Enum)


class EnumType(click.ParamType, t.Generic[E]):
    """Parameter holding a member of ``enum_cls``, given on the command line by value."""

    def __init__(self, enum_cls: type[E]):
        self.enum_cls = enum_cls
        self.name = enum_cls.__name__.lower()

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> E:
        if isinstance(value, self.enum_cls):
            return value
        try:
            return self.enum_cls(value)
        except ValueError:
            choices = ", ".join(str(m.value) for m in self.enum_cls)
            self.fail(f"{value!r} is not one of {choices}", param, ctx)

    def shell_complete(self, ctx: click.Context, param: click.Parameter, incomplete: str) -> list[t.Any]:
        from click.shell_completion import CompletionItem

        return [CompletionItem(m.value) for m in self.enum_cls if str(m.value).startswith(incomplete)]


class URIParamType(click.ParamType):
    """A URL, or a filesystem path which is turned into an absolute ``file://`` URL.

    Local paths must exist unless ``must_exist`` is false, and may only name
    a directory when ``dir_ok`` is set.
    """

    name = "uri"

    def __init__(self, dir_ok: bool = False, must_exist: bool = True):
        self.dir_ok = dir_ok
        self.must_exist = must_exist

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> p.AnyUrl:
        if isinstance(value, p.AnyUrl):
            return value

        text = str(value)
        if "://" in text:
            url = p.AnyUrl(text)
            if url.scheme != "file":
                return url
            path = pathlib.Path(url.path or "")
        else:
            path = pathlib.Path(text)

        path = path.absolute()
        if self.must_exist and not path.exists():
            self.fail(f"{path} does not exist", param, ctx)
        if path.is_dir() and not self.dir_ok:
            self.fail(f"{path} is a directory", param, ctx)
        return p.FileUrl(f"file://{path}")
