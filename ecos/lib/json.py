"""JSON helpers that understand the types found in reports and log records.

``dumps`` defaults to ``ensure_ascii=False``: feedback is often French and
is stored and printed as written.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import functools
import json as pyjson
import pathlib
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


@functools.singledispatch
def encode(obj: t.Any) -> JSONValue:
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@encode.register
def _(obj: p.BaseModel) -> JSONValue:
    return obj.model_dump(mode="json")


@encode.register(datetime.date)  # covers datetime.datetime
def _(obj: datetime.date) -> JSONValue:
    return obj.isoformat()


@encode.register
def _(obj: enum.Enum) -> JSONValue:
    return obj.value


@encode.register(decimal.Decimal)
@encode.register(pathlib.PurePath)
def _(obj: t.Any) -> JSONValue:
    return str(obj)


@encode.register(set)
@encode.register(frozenset)
def _(obj: t.Any) -> JSONValue:
    return list(obj)


class JSONEncoder(pyjson.JSONEncoder):
    def default(self, o: t.Any) -> JSONValue:
        return encode(o)


def dumps(obj: t.Any, *, ensure_ascii: bool = False, **kw: t.Any) -> str:
    kw.setdefault("cls", JSONEncoder)
    return pyjson.dumps(obj, ensure_ascii=ensure_ascii, **kw)


def loads(s: str | bytes | bytearray, **kw: t.Any) -> t.Any:
    return pyjson.loads(s, **kw)
