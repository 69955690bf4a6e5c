"""Typed string identifiers for manifest entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'


@dataclass(frozen=True)
class Id(Generic[T]):
    """A string key naming an entry of some kind.

    Two ids are equal, and hash alike, when their values are equal; the
    ``kind`` only labels what the id refers to.
    """

    value: str
    kind: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"id value must be a string, not {type(self.value).__name__}")

    def __repr__(self) -> str:
        return f"Id<{self.kind}>({_quote(self.value)})"