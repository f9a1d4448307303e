"""Prefixed shortuuid identifiers."""

from __future__ import annotations

import typing as t

import pydantic as p
import pydantic_core.core_schema as cs
import shortuuid

KEY_LENGTH = 22


class ShortUUIDKey(str):
    """A shortuuid with a type prefix, e.g. ``eval$mhvXdrZT4jP5T8vBxuvm75``.

    ``ShortUUIDKey()`` generates a new id, ``ShortUUIDKey(text)`` checks a full
    id and ``ShortUUIDKey(key=...)`` re-attaches the prefix to a bare key, as
    read from the database where only the key is stored.
    """

    prefix: t.ClassVar[str]
    separator: t.ClassVar[str] = "$"

    def __init_subclass__(cls, prefix: str, **kwargs: t.Any):
        super().__init_subclass__(**kwargs)
        if len(prefix) != 4:
            raise TypeError(f"{cls.__name__}: prefix must have four characters, got {prefix!r}")
        cls.prefix = prefix

    def __new__(cls, s: str | None = None, /, key: str | None = None) -> t.Self:
        if s is not None:
            key = cls.parse_key(s)
        elif key is None:
            key = shortuuid.uuid()
        return super().__new__(cls, f"{cls.prefix}{cls.separator}{key}")

    @classmethod
    def parse_key(cls, s: str) -> str:
        head, sep, key = s.partition(cls.separator)
        if head != cls.prefix or not sep:
            raise ValueError(f"{s!r} is not a {cls.__name__}: expected prefix {cls.prefix}{cls.separator}")
        if len(key) != KEY_LENGTH or not set(key) <= set(shortuuid.get_alphabet()):
            raise ValueError(f"{s!r} is not a {cls.__name__}: malformed key")
        return key

    @property
    def key(self) -> str:
        return self.partition(self.separator)[2]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source: t.Any, handler: p.GetCoreSchemaHandler) -> cs.CoreSchema:
        from_text = cs.no_info_after_validator_function(cls, cs.str_schema())
        return cs.json_or_python_schema(
            json_schema=from_text,
            python_schema=cs.union_schema([cs.is_instance_schema(cls), from_text]),
            serialization=cs.plain_serializer_function_ser_schema(str),
        )


class EvaluationID(ShortUUIDKey, prefix="eval"):
    pass
