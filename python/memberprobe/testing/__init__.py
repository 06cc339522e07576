"""Testing helpers for the memberprobe package.

This module exposes small object factories used in unit tests. Keeping them
here prevents the public collector APIs from pulling in extra helpers as side
effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

__all__ = [
    "Base",
    "Child",
    "Frozen",
    "Slotted",
    "get_event_handlers",
    "get_hostile",
    "get_frozen",
]


class Base:
    kind = "base"

    def greet(self, name):
        return f"hello {name}"

    def fail(self):
        raise ValueError("boom")

    @staticmethod
    def add(a, b):
        return a + b

    @classmethod
    def create(cls):
        return cls()

    def _hidden(self):
        return "hidden"


class Child(Base):
    def greet(self, name):
        return super().greet(name).upper()

    def shout(self):
        return "HEY"


class Slotted:
    __slots__ = ("left", "right")

    def __init__(self):
        self.left = 1
        self.right = 2


@dataclass(frozen=True)
class Frozen:
    fn: Callable[..., Any]


class _Hostile:
    def __init__(self):
        self.ok = 1

    @property
    def boom(self):
        raise RuntimeError("getter exploded")


def get_event_handlers() -> dict[str, object]:
    return {
        "onClick": 1,
        "onKeyUp": 2,
        "other": 3,
    }


def get_hostile() -> _Hostile:
    """An object whose ``boom`` attribute raises on every read."""
    hostile = _Hostile()
    # make the property an own, enumerable name of the instance
    hostile.__dict__["boom"] = None
    return hostile


def get_frozen() -> Frozen:
    return Frozen(fn=lambda: "frozen")
