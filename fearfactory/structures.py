"""Structure templates read from the structure manifest."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from .ids import Id

STRUCTURE_MANIFEST_PATH = "manifest/structures.toml"
STRUCTURE_ANIMATIONS_PATH = "structures/"


class ConveyorHole(StrEnum):
    """Which way items pass through a conveyor hole."""

    OUTBOUND = "outbound"
    INBOUND = "inbound"


def _optional_number(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return float(value)


def _table(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be a table")
    return value


@dataclass(frozen=True)
class PowerTemplate:
    sockets: int | None = None
    consumption: float | None = None
    production: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PowerTemplate:
        data = _table(data, "power")
        sockets = data.get("sockets")
        if sockets is not None:
            if isinstance(sockets, bool) or not isinstance(sockets, int):
                raise ValueError("sockets must be an integer")
            if not 0 <= sockets <= 255:
                raise ValueError(f"sockets out of range: {sockets}")
        return cls(
            sockets=sockets,
            consumption=_optional_number(data, "consumption"),
            production=_optional_number(data, "production"),
        )


@dataclass(frozen=True)
class RecipeTemplate:
    default_recipe: Id | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RecipeTemplate:
        data = _table(data, "recipe")
        default = data.get("default_recipe")
        if default is None:
            return cls()
        if not isinstance(default, str):
            raise ValueError("default_recipe must be a string")
        return cls(Id(default, "Recipe"))


@dataclass(frozen=True)
class ConveyorHoleTemplate:
    direction: ConveyorHole
    translation: tuple[float, float, float]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ConveyorHoleTemplate:
        data = _table(data, "conveyor hole")
        if "direction" not in data or "translation" not in data:
            raise ValueError("conveyor hole needs 'direction' and 'translation'")
        try:
            direction = ConveyorHole(data["direction"])
        except ValueError:
            raise ValueError(f"unknown conveyor hole direction: {data['direction']!r}") from None
        translation = data["translation"]
        if not isinstance(translation, list) or len(translation) != 3:
            raise ValueError("translation must be a list of three numbers")
        if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in translation):
            raise ValueError("translation must be a list of three numbers")
        x, y, z = (float(v) for v in translation)
        return cls(direction, (x, y, z))


@dataclass(frozen=True)
class StructureTemplate:
    """A buildable structure: name, power needs, recipe and conveyor holes."""

    name: str
    power: PowerTemplate | None = None
    recipe: RecipeTemplate | None = None
    conveyor_holes: list[ConveyorHoleTemplate] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StructureTemplate:
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("structure needs a string 'name'")
        power = data.get("power")
        recipe = data.get("recipe")
        holes = data.get("conveyor_holes", [])
        if not isinstance(holes, list):
            raise ValueError("conveyor_holes must be a list")
        return cls(
            name=name,
            power=None if power is None else PowerTemplate.from_mapping(power),
            recipe=None if recipe is None else RecipeTemplate.from_mapping(recipe),
            conveyor_holes=[ConveyorHoleTemplate.from_mapping(hole) for hole in holes],
        )