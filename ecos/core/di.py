"""Thin re-exports of dependency_injector wiring with signatures kept intact."""

from __future__ import annotations

__all__ = ["NotReady", "Provide", "inject"]

import typing as t

import dependency_injector.wiring as wiring
from dependency_injector.wiring import Provide

P = t.ParamSpec("P")
R = t.TypeVar("R")


def inject(fn: t.Callable[P, R]) -> t.Callable[P, R]:
    return wiring.inject(fn)


class NotReady(object):
    """Stands in for a container value that is only known once the container is booted."""

    def __repr__(self) -> str:
        return "<NotReady>"

    def __bool__(self) -> bool:
        return False
