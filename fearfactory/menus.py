"""The inspection menu for machines: viewing and choosing their recipe."""

from __future__ import annotations

import math
import struct
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from .ids import Id
from .items import Item
from .manifest import Definition, Manifest
from .process import Crafter
from .recipes import Recipe, RecipeTag

DEFAULT_RECIPE_STRUCTURE = "constructor"


class InspectionMenuState(Enum):
    """Which inspection menu, if any, is open."""

    CLOSED = "closed"
    RECIPE_SELECT = "recipe_select"
    RECIPE_INSPECT = "recipe_inspect"


@dataclass
class InspectionMenu:
    """The menu opened by interacting with a machine."""

    state: InspectionMenuState = InspectionMenuState.CLOSED
    inspected: Hashable | None = None

    def inspect(self, entity: Hashable, crafter: Crafter | None) -> InspectionMenuState:
        """Open the menu for ``entity``; entities that cannot craft are ignored."""
        if crafter is None:
            return self.state
        self.inspected = entity
        if crafter.recipe_id is not None:
            self.state = InspectionMenuState.RECIPE_INSPECT
        else:
            self.state = InspectionMenuState.RECIPE_SELECT
        return self.state

    def close(self) -> InspectionMenuState:
        self.state = InspectionMenuState.CLOSED
        return self.state

    def deselect_recipe(self, crafter: Crafter | None) -> InspectionMenuState:
        """Clear the machine's recipe and switch to recipe selection."""
        if crafter is not None:
            crafter.deselect()
        self.state = InspectionMenuState.RECIPE_SELECT
        return self.state

    def choose_recipe(
        self,
        crafter: Crafter | None,
        recipe_id: Id,
        recipes: Manifest[Recipe],
        items: Manifest[Item],
    ) -> InspectionMenuState:
        """Select ``recipe_id`` on the machine and show its details."""
        if crafter is not None:
            crafter.select_recipe(recipe_id, recipes, items)
        self.state = InspectionMenuState.RECIPE_INSPECT
        return self.state


class RecipeSummary(NamedTuple):
    name: str
    inputs: list[str]
    duration: str
    outputs: list[str]


def _as_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _format_seconds(seconds: float) -> str:
    value = _as_f32(seconds)
    if not math.isfinite(value):
        return str(value)
    for digits in range(60):
        text = f"{value:.{digits}f}"
        if _as_f32(float(text)) == value:
            return text
    return f"{value:f}"


def recipe_summary(recipe: Recipe) -> RecipeSummary:
    """The text shown in the recipe inspection menu."""
    inputs = [f"{item_id!r} {quantity}" for item_id, quantity in recipe.input.items()]
    outputs = [f"{item_id!r} {quantity}" for item_id, quantity in recipe.output.items()]
    duration = f"{_format_seconds(recipe.duration.total_seconds())} seconds"
    return RecipeSummary(recipe.name, inputs, duration, outputs)


def selectable_recipes(
    recipes: Manifest[Recipe] | Iterable[tuple[Id, Definition[Recipe]]],
    structure: str = DEFAULT_RECIPE_STRUCTURE,
) -> list[tuple[Id, str]]:
    """Ids and names of the recipes tagged for ``structure``."""
    tag = RecipeTag.structure_id(structure)
    chosen: list[tuple[Id, str]] = []
    for recipe_id, definition in recipes:
        recipe: Any = definition.value
        if tag in recipe.tags:
            chosen.append((recipe_id, recipe.name))
    return chosen