"""Machine work: consuming recipe inputs, timing the work, producing output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum, auto

from .ids import Id
from .inventory import Inventory, InventoryError
from .items import Item, Stack
from .manifest import Manifest
from .recipes import Recipe

logger = logging.getLogger(__name__)

PROGRESS_BAR_WIDTH = 64.0
PROGRESS_BAR_HEIGHT = 16.0
PROGRESS_BAR_OFFSET = (0.0, 48.0, 100.0)


def _seconds(value: float | timedelta) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class TimerMode(Enum):
    ONCE = auto()
    REPEATING = auto()


class Timer:
    """Counts elapsed time up to a duration, once or repeatedly."""

    def __init__(self, duration: float | timedelta, mode: TimerMode = TimerMode.ONCE) -> None:
        self.duration = _seconds(duration)
        if self.duration < 0:
            raise ValueError("timer duration must not be negative")
        self.mode = mode
        self.elapsed = 0.0
        self._finished = False
        self.times_finished_this_tick = 0

    def tick(self, delta: float | timedelta) -> Timer:
        """Advance the timer by ``delta`` seconds."""
        step = _seconds(delta)
        if step < 0:
            raise ValueError("cannot tick a timer backwards")
        if self.mode is TimerMode.ONCE and self._finished:
            self.times_finished_this_tick = 0
            return self
        self.elapsed += step
        self._finished = self.elapsed >= self.duration
        if not self._finished:
            self.times_finished_this_tick = 0
        elif self.mode is TimerMode.REPEATING:
            if self.duration == 0:
                self.times_finished_this_tick = 2**32 - 1
                self.elapsed = 0.0
            else:
                self.times_finished_this_tick = int(self.elapsed // self.duration)
                self.elapsed %= self.duration
        else:
            self.times_finished_this_tick = 1
            self.elapsed = self.duration
        return self

    def finished(self) -> bool:
        return self._finished

    def just_finished(self) -> bool:
        return self.times_finished_this_tick > 0

    def fraction(self) -> float:
        if self.duration == 0:
            return 1.0
        return self.elapsed / self.duration

    def reset(self) -> None:
        self.elapsed = 0.0
        self._finished = False
        self.times_finished_this_tick = 0


class ProcessPhase(Enum):
    INSUFFICIENT_INPUT = auto()
    WORKING = auto()
    COMPLETED = auto()


@dataclass
class ProcessState:
    """Where a machine is in its work cycle."""

    phase: ProcessPhase = ProcessPhase.INSUFFICIENT_INPUT
    timer: Timer | None = None
    output: list[Stack] = field(default_factory=list)

    @classmethod
    def insufficient_input(cls) -> ProcessState:
        return cls()

    @classmethod
    def working(cls, timer: Timer) -> ProcessState:
        return cls(ProcessPhase.WORKING, timer=timer)

    @classmethod
    def completed(cls, output: list[Stack]) -> ProcessState:
        return cls(ProcessPhase.COMPLETED, output=output)

    def progress(self) -> float:
        """Fraction of the current cycle done, from 0 to 1."""
        if self.phase is ProcessPhase.WORKING and self.timer is not None:
            return self.timer.fraction()
        if self.phase is ProcessPhase.COMPLETED:
            return 1.0
        return 0.0


def _recipe(recipes: Manifest[Recipe], recipe_id: Id) -> Recipe:
    definition = recipes.get(recipe_id)
    if definition is None:
        raise KeyError(f"selected recipe refers to non-existent recipe {recipe_id!r}")
    return definition.value


def _empty_stack(items: Manifest[Item], item_id: Id) -> Stack:
    definition = items.get(item_id)
    if definition is None:
        raise KeyError(f"recipe refers to non-existent item {item_id!r}")
    return Stack.from_definition(definition)


@dataclass
class Crafter:
    """A machine that turns the inputs of its selected recipe into outputs."""

    recipe_id: Id | None = None
    state: ProcessState = field(default_factory=ProcessState.insufficient_input)
    input: Inventory = field(default_factory=Inventory)
    output: Inventory = field(default_factory=Inventory)
    powered: bool = True

    def select_recipe(
        self, recipe_id: Id, recipes: Manifest[Recipe], items: Manifest[Item]
    ) -> bool:
        """Select a recipe and give the machine one empty slot per item it uses.

        Returns False, leaving the machine as it was, if the recipe is unknown.
        """
        definition = recipes.get(recipe_id)
        if definition is None:
            logger.warning("Attempted to select invalid recipe %r", recipe_id)
            return False
        recipe = definition.value
        input_inventory = Inventory([_empty_stack(items, item_id) for item_id in recipe.input])
        output_inventory = Inventory([_empty_stack(items, item_id) for item_id in recipe.output])
        self.recipe_id = recipe_id
        self.input = input_inventory
        self.output = output_inventory
        return True

    def deselect(self) -> None:
        self.recipe_id = None

    def consume_input(self, recipes: Manifest[Recipe]) -> None:
        """Start work if the inputs for the selected recipe are available."""
        if not self.powered or self.state.phase is not ProcessPhase.INSUFFICIENT_INPUT:
            return
        if self.recipe_id is None:
            return
        recipe = _recipe(recipes, self.recipe_id)
        try:
            self.input.consume_input(recipe)
        except InventoryError:
            return
        self.state = ProcessState.working(Timer(recipe.duration))

    def progress_work(
        self, delta: float | timedelta, recipes: Manifest[Recipe], items: Manifest[Item]
    ) -> None:
        """Advance the work timer; on completion prepare the output stacks."""
        if not self.powered or self.state.phase is not ProcessPhase.WORKING:
            return
        timer = self.state.timer
        if timer is None or not timer.tick(delta).finished():
            return
        if self.recipe_id is None:
            return
        recipe = _recipe(recipes, self.recipe_id)
        output = [
            _empty_stack(items, item_id).with_quantity(quantity)
            for item_id, quantity in recipe.output.items()
        ]
        self.state = ProcessState.completed(output)

    def produce_output(self) -> None:
        """Deposit completed stacks; the cycle ends once all of them fit."""
        if not self.powered or self.state.phase is not ProcessPhase.COMPLETED:
            return
        for stack in self.state.output:
            try:
                self.output.add_stack(stack)
            except InventoryError:
                return
        self.state = ProcessState.insufficient_input()

    def update(
        self, delta: float | timedelta, recipes: Manifest[Recipe], items: Manifest[Item]
    ) -> None:
        """Run one frame of work: consume, progress, produce."""
        self.consume_input(recipes)
        self.progress_work(delta, recipes, items)
        self.produce_output()


def progress_bar_size(
    progress: float,
    width: float = PROGRESS_BAR_WIDTH,
    height: float = PROGRESS_BAR_HEIGHT,
) -> tuple[float, float]:
    """Size of the filled part of a progress bar."""
    return (width * progress, height)