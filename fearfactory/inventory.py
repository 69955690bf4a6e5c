"""Slot-based inventories of item stacks."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .ids import Id
from .items import Item, Stack

if TYPE_CHECKING:
    from .recipes import Recipe


class InventoryError(Exception):
    """Base class for inventory failures."""


class InsufficientItems(InventoryError):
    def __init__(self, message: str = "Insufficient items") -> None:
        super().__init__(message)


class InventoryEmpty(InventoryError):
    def __init__(self, message: str = "Inventory empty") -> None:
        super().__init__(message)


class InventoryFull(InventoryError):
    def __init__(self, message: str = "Inventory full") -> None:
        super().__init__(message)


@dataclass
class Inventory:
    """A list of slots, each empty or holding a stack."""

    slots: list[Stack | None] = field(default_factory=list)

    @classmethod
    def sized(cls, max_slots: int) -> Inventory:
        """An inventory of ``max_slots`` empty slots."""
        return cls(slots=[None] * max_slots)

    def _stacks(self) -> Iterator[Stack]:
        return (slot for slot in self.slots if slot is not None)

    def add_slot(self, stack: Stack) -> None:
        self.slots.append(stack)

    def capacity(self) -> int:
        return len(self.slots)

    def __len__(self) -> int:
        """Number of occupied slots."""
        return sum(1 for _ in self._stacks())

    def is_full(self) -> bool:
        return len(self) >= self.capacity()

    def can_afford(self, recipe: Recipe) -> bool:
        """True when every input is held in more than the required quantity."""
        return all(
            self.total_quantity_of(item_id) > quantity
            for item_id, quantity in recipe.input.items()
        )

    def consume_input(self, recipe: Recipe) -> None:
        """Take the recipe's inputs out of the inventory."""
        if not self.can_afford(recipe):
            raise InsufficientItems()
        for item_id, quantity in recipe.input.items():
            remaining = quantity
            for stack in self._stacks():
                if stack.item_id == item_id:
                    take = min(remaining, stack.quantity)
                    stack.quantity -= take
                    remaining -= take
                if remaining == 0:
                    break

    def add_stack(self, stack: Stack) -> None:
        """Move ``stack`` into the inventory, emptying it.

        Matching stacks are topped up first; the rest goes into the first empty
        slot. Raises InventoryFull if items remain and no slot is free.
        """
        for slot in self._stacks():
            if slot.item_id == stack.item_id and stack.quantity > 0:
                add = min(stack.quantity, slot.remaining_space())
                slot.quantity += add
                stack.quantity -= add

        if stack.quantity > 0:
            for index, slot in enumerate(self.slots):
                if slot is None:
                    self.slots[index] = stack.with_quantity(stack.quantity)
                    stack.quantity = 0
                    break
            else:
                raise InventoryFull()

    def remove_stack(self, stack: Stack) -> None:
        """Take ``stack.quantity`` of its item out of the inventory."""
        if self.total_quantity_of(stack.item_id) < stack.quantity:
            raise InsufficientItems()
        remaining = stack.quantity
        for slot in self._stacks():
            if slot.item_id == stack.item_id and remaining > 0:
                take = min(remaining, slot.quantity)
                slot.quantity -= take
                remaining -= take

    def total_quantity_of(self, item_id: Id[Item]) -> int:
        return sum(stack.quantity for stack in self._stacks() if stack.item_id == item_id)

    def contains(self, other: Inventory) -> bool:
        """True when every stack of ``other`` is covered by this inventory."""
        return all(
            self.total_quantity_of(stack.item_id) >= stack.quantity
            for stack in other._stacks()
        )

    def add_inventory(self, other: Inventory) -> None:
        """Move every stack of ``other`` into this inventory."""
        for stack in other._stacks():
            self.add_stack(stack)

    def remove_inventory(self, other: Inventory) -> None:
        if not self.contains(other):
            raise InsufficientItems()
        for stack in other._stacks():
            self.remove_stack(stack)

    def pop(self) -> Id[Item]:
        """Take one item from the first non-empty stack."""
        for stack in self._stacks():
            if stack.quantity > 0:
                stack.quantity -= 1
                return stack.item_id
        raise InventoryEmpty()

    def push(self, item_id: Id[Item]) -> None:
        """Add one item to the first matching stack with room."""
        for stack in self._stacks():
            if stack.item_id == item_id and not stack.is_full():
                stack.quantity += 1
                return
        raise InventoryFull()

    def transfer_all(self, other: Inventory) -> None:
        """Move all stacks into ``other``, stopping at the first that does not fit."""
        for stack in self._stacks():
            try:
                other.add_stack(stack)
            except InventoryError:
                raise InventoryFull() from None