"""Player-facing controls: hotbar, camera, interaction prompts, highlighting."""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from .ids import Id
from .items import Item
from .manifest import Definition

HIGHLIGHT_HUE = 60.0
HIGHLIGHT_COLOR = (HIGHLIGHT_HUE, 1.0, 0.5)
"""Highlight colour as (hue, saturation, lightness)."""

CAMERA_DRAG_SMOOTHING = 0.5
CAMERA_ZOOM_INTERVAL = 0.1
CAMERA_ZOOM_MIN = 0.25
CAMERA_ZOOM_MAX = 2.0

INTERACTABLE_KEY = "KeyE"
COMPENDIUM_KEY = "KeyI"
DEBUG_TOGGLE_KEY = "Backquote"
PROMPT_SPRITES_PATH = "alphabet-prompts.aseprite"

DEFAULT_Y_SORT = 1.0

DEFAULT_HOTBAR_SLOTS: tuple[tuple[str, str], ...] = (
    ("Digit1", "windmill"),
    ("Digit2", "power_pole"),
    ("Digit3", "miner"),
    ("Digit4", "smelter"),
    ("Digit5", "constructor"),
    ("Digit6", "merger"),
)

_STRUCTURE_KIND = "StructureTemplate"


def _structure_id(structure_id: Id | str) -> Id:
    if isinstance(structure_id, Id):
        return structure_id
    return Id(structure_id, _STRUCTURE_KIND)


@dataclass(frozen=True)
class HotbarSlot:
    """One hotbar button: its keyboard shortcut and the structure it selects."""

    shortcut: str
    structure_id: Id

    @property
    def icon_path(self) -> str:
        return f"structures/{self.structure_id.value}.aseprite"


class Hotbar:
    """The build hotbar and the structure currently selected on it."""

    def __init__(self, slots: Iterable[tuple[str, Id | str]] = DEFAULT_HOTBAR_SLOTS) -> None:
        self.slots: list[HotbarSlot] = [
            HotbarSlot(shortcut, _structure_id(structure)) for shortcut, structure in slots
        ]
        self.selection: Id | None = None

    def select(self, structure_id: Id | str) -> Id | None:
        """Select a structure, or deselect it if it is already selected.

        Returns the selection afterwards.
        """
        chosen = _structure_id(structure_id)
        self.selection = None if self.selection == chosen else chosen
        return self.selection

    def press_shortcut(self, key: str) -> Id | None:
        """Apply every slot whose shortcut is ``key``; returns the selection."""
        for slot in self.slots:
            if slot.shortcut == key:
                self.select(slot.structure_id)
        return self.selection

    def deselect(self) -> None:
        """Clear the selection, as happens once a structure has been placed."""
        self.selection = None

    def is_highlighted(self, slot: HotbarSlot) -> bool:
        return self.selection is not None and self.selection == slot.structure_id


@dataclass
class Camera:
    """A 2D orthographic camera moved by dragging and zoomed by scrolling."""

    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0

    def drag(self, dx: float, dy: float, secondary: bool) -> tuple[float, float]:
        """Pan by a pointer drag; only the secondary button moves the camera."""
        if secondary:
            self.x += -dx * CAMERA_DRAG_SMOOTHING
            self.y += dy * CAMERA_DRAG_SMOOTHING
        return (self.x, self.y)

    def zoom(self, scroll: float) -> float:
        """Zoom by a scroll amount; returns the new, clamped scale."""
        self.scale *= 1.0 - scroll * CAMERA_ZOOM_INTERVAL
        self.scale = min(max(self.scale, CAMERA_ZOOM_MIN), CAMERA_ZOOM_MAX)
        return self.scale


@dataclass
class InteractionTracker:
    """The interactable under the pointer and the prompts shown over it."""

    hovered: Hashable | None = None
    indicators: set[Hashable] = field(default_factory=set)

    def hover(self, entity: Hashable, interactable: bool) -> bool:
        """Pointer entered ``entity``; returns True when it was handled."""
        if not interactable:
            return False
        self.hovered = entity
        self.indicators.add(entity)
        return True

    def leave(self, entity: Hashable, interactable: bool) -> bool:
        """Pointer left ``entity``; returns True when it was handled."""
        if not interactable:
            return False
        self.hovered = None
        self.indicators.discard(entity)
        return True

    def press(self, key: str) -> Hashable | None:
        """The entity to interact with when ``key`` is pressed, if any."""
        if key != INTERACTABLE_KEY:
            return None
        return self.hovered


class CompendiumState(Enum):
    """Whether the item compendium is open."""

    CLOSED = "closed"
    ITEM = "item"

    def toggled(self) -> CompendiumState:
        if self is CompendiumState.CLOSED:
            return CompendiumState.ITEM
        return CompendiumState.CLOSED


class CompendiumRow(NamedTuple):
    item_id: Id
    name: str
    stack_size: int


def compendium_rows(items: Iterable[tuple[Id, Any]]) -> list[CompendiumRow]:
    """Rows of the item compendium, ordered by item id."""
    rows = []
    for item_id, entry in items:
        item: Item = entry.value if isinstance(entry, Definition) else entry
        rows.append(CompendiumRow(item_id, item.name, item.stack_size))
    return sorted(rows, key=lambda row: row.item_id.value)


def y_sort_depth(y: float, weight: float = DEFAULT_Y_SORT) -> float:
    """Draw depth for a sprite at height ``y``: lower sprites are drawn in front."""
    atan_mapping = 1.0 - math.atan(y) / math.pi + 0.5
    return weight * atan_mapping


def dismantle_hue(fraction: float) -> float:
    """Highlight hue while dismantling: yellow fading to red as the hold completes."""
    return HIGHLIGHT_HUE * (1.0 - fraction)


def highlight_color(fraction: float) -> tuple[float, float, float]:
    """Selection highlight as (hue, saturation, lightness) for a dismantle fraction."""
    _, saturation, lightness = HIGHLIGHT_COLOR
    return (dismantle_hue(fraction), saturation, lightness)


def prompt_letter(key: str) -> str:
    """The letter shown in the button prompt for ``key``."""
    return "E" if key == "KeyE" else "?"