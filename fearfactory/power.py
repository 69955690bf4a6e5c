"""Power grids: sockets, power lines, production, consumption and fuses."""

from __future__ import annotations

import colorsys
import random
from collections.abc import Hashable
from dataclasses import dataclass, field

POWER_LINE_COLOR = (0.0, 0.0, 0.0)
GRID_INDICATOR_OFFSET = (32.0, 28.0, 2.0)
GRID_INDICATOR_SIZE = 16.0

Entity = Hashable


@dataclass
class PowerGrid:
    """A set of linked power nodes sharing production and consumption."""

    id: int
    hue: float
    members: list[Entity] = field(default_factory=list)
    power_production: float = 0.0
    power_consumption: float = 0.0

    @property
    def color(self) -> tuple[float, float, float]:
        """The grid's colour as RGB components in [0, 1]."""
        return colorsys.hls_to_rgb(self.hue / 360.0, 0.5, 1.0)

    @property
    def overloaded(self) -> bool:
        return self.power_consumption > self.power_production


@dataclass
class PowerNode:
    """An entity with power sockets, optionally producing or consuming power."""

    entity: Entity
    sockets: int
    grid: int
    connections: int = 0
    production: float | None = None
    consumption: float | None = None
    machine: bool = True
    powered: bool = True

    @property
    def has_free_socket(self) -> bool:
        return self.connections < self.sockets


@dataclass
class SocketDrag:
    """The socket a power line is currently being dragged from."""

    socket: Entity | None = None
    drag_delta: tuple[float, float] = (0.0, 0.0)

    def drag_start(self, entity: Entity, node: PowerNode | None) -> bool:
        """Start dragging from ``entity`` if it has a free socket."""
        if node is None or not node.has_free_socket:
            return False
        self.socket = entity
        return True

    def drag(self, distance: tuple[float, float]) -> None:
        """Record the pointer's distance from where the drag began."""
        dx, dy = distance
        self.drag_delta = (float(dx), float(dy))

    def drag_end(self) -> None:
        self.socket = None

    def line(
        self, start: tuple[float, float]
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        """The preview line from ``start``, or None when nothing is dragged.

        Pointer distances grow downwards, so the y component is flipped.
        """
        if self.socket is None:
            return None
        sx, sy = start
        dx, dy = self.drag_delta
        return ((sx, sy), (sx + dx, sy - dy))


class PowerNetwork:
    """Every power node, grid and line in the factory."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.nodes: dict[Entity, PowerNode] = {}
        self.grids: dict[int, PowerGrid] = {}
        self.lines: list[tuple[Entity, Entity]] = []
        self._next_grid = 0

    def _new_grid(self) -> PowerGrid:
        grid = PowerGrid(self._next_grid, self._rng.uniform(0.0, 360.0))
        while grid.hue >= 360.0:
            grid.hue = self._rng.uniform(0.0, 360.0)
        self._next_grid += 1
        self.grids[grid.id] = grid
        return grid

    def add_node(
        self,
        entity: Entity,
        sockets: int = 1,
        production: float | None = None,
        consumption: float | None = None,
        machine: bool = True,
    ) -> PowerNode:
        """Register ``entity`` as a power node in a fresh grid of its own."""
        if entity in self.nodes:
            raise ValueError(f"entity {entity!r} already has power sockets")
        if isinstance(sockets, bool) or not isinstance(sockets, int) or not 0 <= sockets <= 255:
            raise ValueError(f"socket count out of range: {sockets!r}")
        grid = self._new_grid()
        grid.members.append(entity)
        node = PowerNode(
            entity=entity,
            sockets=sockets,
            grid=grid.id,
            production=production,
            consumption=consumption,
            machine=machine,
            powered=machine,
        )
        self.nodes[entity] = node
        return node

    def grid_of(self, entity: Entity) -> PowerGrid:
        """The grid ``entity`` belongs to."""
        return self.grids[self.nodes[entity].grid]

    def can_link(self, dropped: Entity, target: Entity) -> bool:
        """True when both ends exist and have a free socket."""
        dropped_node = self.nodes.get(dropped)
        target_node = self.nodes.get(target)
        return (
            dropped_node is not None
            and target_node is not None
            and dropped_node.has_free_socket
            and target_node.has_free_socket
        )

    def link(self, dropped: Entity, target: Entity) -> bool:
        """Run a power line between two sockets and merge their grids.

        The dropped socket's grid is absorbed into the target's. Machines at
        either end are switched on. Returns False if the link is not possible.
        """
        if not self.can_link(dropped, target):
            return False
        left, right = self.nodes[target], self.nodes[dropped]
        left.connections += 1
        right.connections += 1
        self.lines.append((target, dropped))

        if left.grid != right.grid:
            absorbed = self.grids.pop(right.grid)
            survivor = self.grids[left.grid]
            for member in absorbed.members:
                self.nodes[member].grid = survivor.id
                survivor.members.append(member)

        for node in (left, right):
            if node.machine:
                node.powered = True
        return True

    def toggle_power(self, entity: Entity) -> bool:
        """Switch ``entity`` on or off; returns whether it is now powered."""
        node = self.nodes[entity]
        node.powered = not node.powered
        return node.powered

    def power_on_all(self) -> None:
        """Switch every machine on."""
        for node in self.nodes.values():
            if node.machine:
                node.powered = True

    def dismantle(self, entity: Entity) -> None:
        """Remove ``entity``, its power lines, and its grid if nothing else uses it."""
        node = self.nodes.get(entity)
        if node is None:
            return
        grid = self.grids.get(node.grid)
        if grid is not None and (not grid.members or grid.members == [entity]):
            del self.grids[grid.id]

        kept: list[tuple[Entity, Entity]] = []
        for start, end in self.lines:
            if entity in (start, end):
                for end_point in (start, end):
                    other = self.nodes.get(end_point)
                    if other is not None:
                        other.connections -= 1
            else:
                kept.append((start, end))
        self.lines = kept

        remaining = self.grids.get(node.grid)
        if remaining is not None and entity in remaining.members:
            remaining.members.remove(entity)
        del self.nodes[entity]

    def update(self) -> list[int]:
        """Recalculate every grid's power levels and blow overloaded fuses.

        Every powered node of an overloaded grid is switched off. Returns the
        ids of the grids whose fuse blew.
        """
        for grid in self.grids.values():
            grid.power_production = 0.0
            grid.power_consumption = 0.0

        for node in self.nodes.values():
            if not node.powered:
                continue
            grid = self.grids.get(node.grid)
            if grid is None:
                continue
            if node.production is not None:
                grid.power_production += node.production
            if node.consumption is not None:
                grid.power_consumption += node.consumption

        blown = [grid.id for grid in self.grids.values() if grid.overloaded]
        for grid_id in blown:
            for node in self.nodes.values():
                if node.grid == grid_id:
                    node.powered = False
        return blown