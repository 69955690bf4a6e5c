"""Conveyor belts carrying items from an outbound hole to an inbound hole."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from .ids import Id
from .inventory import Inventory, InventoryError
from .items import Item, Stack
from .manifest import Manifest
from .process import Timer, TimerMode
from .structures import ConveyorHole

CONVEYOR_BELT_TRAY_SIZE = 16.0
"""How much of the belt's length each item occupies."""

DEFAULT_CONVEYOR_SPEED = 100.0
CONVEYOR_BELT_HEIGHT = 32.0
CONVEYOR_BELT_Y_SORT = 0.5
CONVEYOR_BELT_SPRITES_PATH = "conveyor.aseprite"
CONVEYOR_HOLE_SPRITES_PATH = "conveyor_holes.aseprite"

_U8_MAX = 255


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


@dataclass
class ConveyoredItem:
    """An item riding a belt, positioned along the belt's local x axis."""

    item_id: Id[Item]
    position: float
    progress: float = 0.0


@dataclass
class ConveyorBelt:
    """A belt between two conveyor holes.

    ``source`` is the outbound hole items are picked up from; ``target`` is the
    inbound hole they are delivered to.
    """

    source: object
    target: object
    length: float
    speed: float = DEFAULT_CONVEYOR_SPEED
    items: list[ConveyoredItem] = field(default_factory=list)
    pickup_timer: Timer = field(init=False)

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError("belt length must not be negative")
        if self.speed <= 0:
            raise ValueError("belt speed must be positive")
        self.pickup_timer = Timer(60.0 / self.speed, TimerMode.REPEATING)

    def tray_count(self) -> int:
        """How many items fit on the belt at once."""
        return min(math.ceil(self.length / CONVEYOR_BELT_TRAY_SIZE), _U8_MAX)

    def capacity(self) -> float:
        """The belt's length measured in trays."""
        return self.length / CONVEYOR_BELT_TRAY_SIZE

    def place_item(
        self, delta: float | timedelta, output: Inventory | None
    ) -> ConveyoredItem | None:
        """Advance the pickup timer and, when it fires, take one item from ``output``.

        Returns the item placed on the belt, or None if nothing was picked up.
        """
        if not self.pickup_timer.tick(_seconds(delta)).finished():
            return None
        if output is None:
            return None
        if self.tray_count() == len(self.items) % (_U8_MAX + 1):
            return None
        try:
            item_id = output.pop()
        except InventoryError:
            return None
        item = ConveyoredItem(item_id, -self.length / 2.0, 0.0)
        self.items.append(item)
        return item

    def advance(self, delta: float | timedelta) -> None:
        """Move every item along the belt; items queue up behind one another."""
        step = self.speed / 60.0 * CONVEYOR_BELT_TRAY_SIZE * _seconds(delta)
        low = -self.length / 2.0
        for index, item in enumerate(self.items):
            high = self.length / 2.0 - CONVEYOR_BELT_TRAY_SIZE * index
            item.position = max(low, min(high, item.position + step))
            item.progress = (item.position + self.length / 2.0) / self.length

    def receive_items(
        self, input_inventory: Inventory | None, items: Manifest[Item]
    ) -> list[Id[Item]]:
        """Deliver items that reached the end of the belt into ``input_inventory``.

        Items that do not fit, or whose definition is unknown, stay on the belt.
        Returns the ids of the delivered items.
        """
        if input_inventory is None:
            return []
        delivered: list[Id[Item]] = []
        remaining: list[ConveyoredItem] = []
        for item in self.items:
            definition = items.get(item.item_id) if item.progress >= 1.0 else None
            if definition is None:
                remaining.append(item)
                continue
            stack = Stack.from_definition(definition).with_quantity(1)
            try:
                input_inventory.add_stack(stack)
            except InventoryError:
                remaining.append(item)
                continue
            delivered.append(item.item_id)
        self.items = remaining
        return delivered

    def pick_up(self, item: ConveyoredItem) -> None:
        """Take ``item`` off the belt by hand."""
        self.items.remove(item)


def belt_geometry(
    start: Sequence[float], end: Sequence[float]
) -> tuple[tuple[float, ...], float, float]:
    """Centre, rotation angle (radians) and length of a belt from ``start`` to ``end``."""
    if len(start) != len(end):
        raise ValueError("start and end must have the same number of components")
    direction = [b - a for a, b in zip(start, end)]
    center = tuple(a + d * 0.5 for a, d in zip(start, direction))
    angle = math.atan2(direction[1], direction[0])
    length = math.hypot(*direction)
    return center, angle, length


def resolve_drop(
    dropped: object,
    dropped_hole: ConveyorHole | None,
    target: object,
    target_hole: ConveyorHole | None,
) -> tuple[object, object] | None:
    """Order a dragged-and-dropped pair of holes as (outbound, inbound).

    Returns None unless both are conveyor holes of opposite directions.
    """
    if dropped_hole is None or target_hole is None:
        return None
    if dropped_hole == target_hole:
        return None
    if dropped_hole == ConveyorHole.OUTBOUND:
        return (dropped, target)
    return (target, dropped)