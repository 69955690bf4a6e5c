"""Item definitions and stacks of items."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .ids import Id
from .manifest import Definition

ITEM_MANIFEST_PATH = "manifest/items.toml"
ITEM_SPRITES_PATH = "items.aseprite"


def _count(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer")
    if not 0 <= value < 2**32:
        raise ValueError(f"{what} out of range: {value}")
    return value


@dataclass(frozen=True)
class Item:
    """An item kind: its display name and how many fit in one stack."""

    name: str
    stack_size: int

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Item:
        if "name" not in data:
            raise ValueError("item is missing 'name'")
        if "stack_size" not in data:
            raise ValueError("item is missing 'stack_size'")
        name = data["name"]
        if not isinstance(name, str):
            raise ValueError("item name must be a string")
        return cls(name=name, stack_size=_count(data["stack_size"], "stack_size"))


@dataclass
class Stack:
    """A quantity of one item, bounded by a maximum."""

    item_id: Id[Item]
    quantity: int = 0
    max_quantity: int = 0

    def with_quantity(self, quantity: int) -> Stack:
        """Return a copy holding ``quantity`` items."""
        return dataclasses.replace(self, quantity=quantity)

    def remaining_space(self) -> int:
        return max(0, self.max_quantity - self.quantity)

    def is_full(self) -> bool:
        return self.quantity >= self.max_quantity

    @classmethod
    def from_definition(cls, definition: Definition[Item]) -> Stack:
        """An empty stack of the defined item."""
        return cls(item_id=definition.id, quantity=0, max_quantity=definition.value.stack_size)