"""Resource deposits scattered over the map and mined by hand."""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from .ids import Id
from .inventory import Inventory, InventoryError
from .items import Item, Stack
from .manifest import Definition, Manifest
from .recipes import Recipe

MAP_SIZE = 1600.0
DEPOSIT_MANIFEST_PATH = "manifest/deposits.toml"
DEPOSIT_SPRITES_PATH = "deposits.aseprite"
TERRAIN_SPRITES_PATH = "terrain.aseprite"
DEPOSIT_DEPTH = 1.0
DEPOSIT_Y_SORT = 0.1


class WorldSpawnSystems(Enum):
    """Order in which the world is populated."""

    SPAWN_TERRAIN = auto()
    SPAWN_DEPOSITS = auto()


@dataclass(frozen=True)
class Deposit:
    """A kind of deposit: its name, what mining it yields, and how many to place."""

    name: str
    recipe_id: Id
    quantity: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Deposit:
        name = data.get("name")
        recipe_id = data.get("recipe_id")
        quantity = data.get("quantity")
        if not isinstance(name, str):
            raise ValueError("deposit needs a string 'name'")
        if not isinstance(recipe_id, str):
            raise ValueError("deposit needs a string 'recipe_id'")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError("deposit needs an integer 'quantity'")
        if not 0 <= quantity < 2**32:
            raise ValueError(f"quantity out of range: {quantity}")
        return cls(name, Id(recipe_id, "Recipe"), quantity)


@dataclass(frozen=True)
class PlacedDeposit:
    """One deposit placed on the map."""

    name: str
    deposit_id: Id
    recipe_id: Id
    position: tuple[float, float, float]
    y_sort: float = DEPOSIT_Y_SORT


def scatter_deposits(
    deposits: Manifest[Deposit] | Iterable[tuple[Id, Definition[Deposit]]],
    rng: random.Random,
    map_size: float = MAP_SIZE,
) -> list[PlacedDeposit]:
    """Place every deposit kind ``quantity`` times at random points on the map.

    Coordinates fall in ``[-map_size / 2, map_size / 2)``.
    """
    half = map_size / 2.0
    placed: list[PlacedDeposit] = []
    for deposit_id, definition in deposits:
        deposit = definition.value
        for _ in range(deposit.quantity):
            x = rng.random() * map_size - half
            y = rng.random() * map_size - half
            placed.append(
                PlacedDeposit(deposit.name, deposit_id, deposit.recipe_id, (x, y, DEPOSIT_DEPTH))
            )
    return placed


def mine_deposit(recipe: Recipe, items: Manifest[Item], inventory: Inventory) -> None:
    """Add the recipe's output to ``inventory``; what does not fit is lost."""
    for item_id, quantity in recipe.output.items():
        definition = items.get(item_id)
        if definition is None:
            raise KeyError(f"recipe refers to invalid item id {item_id!r}")
        stack = Stack.from_definition(definition).with_quantity(quantity)
        try:
            inventory.add_stack(stack)
        except InventoryError:
            pass