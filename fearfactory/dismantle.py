"""Selecting structures and dismantling them by holding a key."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from datetime import timedelta

from .process import Timer, TimerMode

DISMANTLE_KEY = "KeyF"
DISMANTLE_DURATION = 1.0


class Selection:
    """The structures currently selected for dismantling."""

    def __init__(self) -> None:
        self._entities: set[Hashable] = set()

    def hover(self, entity: Hashable, is_structure: bool) -> None:
        """Select ``entity`` when the pointer moves over it, if it is a structure."""
        if is_structure:
            self._entities.add(entity)

    def leave(self, entity: Hashable, shift_held: bool) -> None:
        """Deselect ``entity`` when the pointer leaves it, unless shift is held."""
        if not shift_held:
            self._entities.discard(entity)

    def clear(self) -> None:
        self._entities.clear()

    def drain(self) -> list[Hashable]:
        """Return every selected entity for dismantling and empty the selection."""
        entities = list(self._entities)
        self._entities.clear()
        return entities

    def __contains__(self, entity: object) -> bool:
        return entity in self._entities

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)


class DismantleTimer:
    """How long the dismantle key has been held."""

    def __init__(self, duration: float = DISMANTLE_DURATION) -> None:
        self._timer = Timer(duration, TimerMode.ONCE)

    def update(self, delta: float | timedelta, pressed: bool, just_released: bool) -> bool:
        """Reset on release, tick while held; returns whether the hold just completed."""
        if just_released:
            self._timer.reset()
        if pressed:
            self._timer.tick(delta)
        return self.just_finished()

    def just_finished(self) -> bool:
        return self._timer.just_finished()

    def fraction(self) -> float:
        """How far through the hold the key is, from 0 to 1."""
        return self._timer.fraction()