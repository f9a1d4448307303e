import decimal
import re as regex
import typing as t
from collections.abc import Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]

_CodeFence = regex.compile(r"^\s*```(?:json)?\s*\n?|\n?\s*```\s*$", regex.IGNORECASE)


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(result[k], v)  # type: ignore
        else:
            result[k] = v
    return result


@t.overload
def round_half_up(value: float) -> int: ...


@t.overload
def round_half_up(value: float, ndigits: int) -> float: ...


def round_half_up(value: float, ndigits: int | None = None) -> int | float:
    """Round halves away from zero instead of to the nearest even digit."""
    quantum = decimal.Decimal(1).scaleb(-(ndigits or 0))
    rounded = decimal.Decimal(repr(value)).quantize(quantum, rounding=decimal.ROUND_HALF_UP)
    return int(rounded) if ndigits is None else float(rounded)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json fence and a trailing ``` fence, if present."""
    return _CodeFence.sub("", text).strip()
