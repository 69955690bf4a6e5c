"""Recipe definitions and their durations."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from typing import Any

from .ids import Id

RECIPE_MANIFEST_PATH = "manifest/recipes.toml"

_SECOND = 1_000_000_000
_UNITS = {
    **dict.fromkeys(("nsec", "ns"), 1),
    **dict.fromkeys(("usec", "us", "\u00b5s"), 1_000),
    **dict.fromkeys(("msec", "ms"), 1_000_000),
    **dict.fromkeys(("seconds", "second", "sec", "s"), _SECOND),
    **dict.fromkeys(("minutes", "minute", "min", "m"), 60 * _SECOND),
    **dict.fromkeys(("hours", "hour", "hr", "h"), 3_600 * _SECOND),
    **dict.fromkeys(("days", "day", "d"), 86_400 * _SECOND),
    **dict.fromkeys(("weeks", "week", "w"), 604_800 * _SECOND),
    **dict.fromkeys(("months", "month", "M"), 2_630_016 * _SECOND),
    **dict.fromkeys(("years", "year", "y"), 31_557_600 * _SECOND),
}
_COMPONENT = re.compile(r"\s*(\d+)\s*([^\W\d_]+)")


def parse_duration(text: str) -> timedelta:
    """Parse a human-readable duration such as ``"1m 30s"`` or ``"500ms"``."""
    if not isinstance(text, str):
        raise ValueError("duration must be a string")
    if not text.strip():
        raise ValueError("empty duration")
    total_ns = 0
    position = 0
    while position < len(text) and text[position:].strip():
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"invalid duration: {text!r}")
        number, unit = match.groups()
        if unit not in _UNITS:
            raise ValueError(f"unknown time unit {unit!r} in {text!r}")
        total_ns += int(number) * _UNITS[unit]
        position = match.end()
    return timedelta(microseconds=total_ns // 1_000)


def _count(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer")
    if not 0 <= value < 2**32:
        raise ValueError(f"{what} out of range: {value}")
    return value


def _item_counts(data: Any, what: str) -> dict[Id, int]:
    if not isinstance(data, Mapping):
        raise ValueError(f"recipe {what} must be a table")
    return {Id(str(key), "Item"): _count(value, f"{what}.{key}") for key, value in data.items()}


class RecipeTagKind(StrEnum):
    STRUCTURE_ID = "structure_id"


@dataclass(frozen=True)
class RecipeTag:
    """A label attached to a recipe, such as the structure that makes it."""

    kind: RecipeTagKind
    value: Id

    @classmethod
    def structure_id(cls, structure: str) -> RecipeTag:
        return cls(RecipeTagKind.STRUCTURE_ID, Id(structure, "StructureTemplate"))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RecipeTag:
        if not isinstance(data, Mapping):
            raise ValueError("recipe tag must be a table")
        try:
            kind = RecipeTagKind(data["kind"])
        except KeyError:
            raise ValueError("recipe tag is missing 'kind'") from None
        except ValueError:
            raise ValueError(f"unknown recipe tag kind: {data['kind']!r}") from None
        if "value" not in data or not isinstance(data["value"], str):
            raise ValueError("recipe tag needs a string 'value'")
        return cls.structure_id(data["value"]) if kind is RecipeTagKind.STRUCTURE_ID else cls(kind, Id(data["value"]))


@dataclass
class Recipe:
    """Items in, items out, and how long the work takes."""

    name: str
    input: dict[Id, int] = field(default_factory=dict)
    output: dict[Id, int] = field(default_factory=dict)
    duration: timedelta = timedelta()
    tags: list[RecipeTag] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Recipe:
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("recipe needs a string 'name'")
        if "duration" not in data:
            raise ValueError("recipe is missing 'duration'")
        tags = data.get("tags", [])
        if not isinstance(tags, list):
            raise ValueError("recipe tags must be a list")
        return cls(
            name=name,
            input=_item_counts(data.get("input", {}), "input"),
            output=_item_counts(data.get("output", {}), "output"),
            duration=parse_duration(data["duration"]),
            tags=[RecipeTag.from_mapping(tag) for tag in tags],
        )