"""The factory simulation: placing structures and running them frame by frame."""

from __future__ import annotations

import argparse
import random
import sys
from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from enum import IntEnum, auto
from os import PathLike
from pathlib import Path

from .conveyor import ConveyorBelt, belt_geometry, resolve_drop
from .deposits import DEPOSIT_MANIFEST_PATH, MAP_SIZE, Deposit, PlacedDeposit, scatter_deposits
from .ids import Id
from .inventory import Inventory
from .items import ITEM_MANIFEST_PATH, Item
from .manifest import Manifest, ManifestLoaderError, load_manifest_file
from .process import Crafter
from .recipes import RECIPE_MANIFEST_PATH, Recipe
from .structures import (
    STRUCTURE_MANIFEST_PATH,
    ConveyorHoleTemplate,
    PowerTemplate,
    StructureTemplate,
)

WINDOW_TITLE = "Fear Factory"
STRUCTURE_DEPTH = 1.0
MERGER_SLOTS = 10
TERRAIN = 0

_STRUCTURE_KIND = "StructureTemplate"


class FactorySystems(IntEnum):
    """The phases of one simulation frame, in the order they run."""

    INPUT = auto()
    BUILD = auto()
    POWER = auto()
    LOGISTICS = auto()
    WORK = auto()
    DISMANTLE = auto()
    UI = auto()


@dataclass
class PlacedStructure:
    """A structure built on the terrain."""

    entity: int
    structure_id: Id
    name: str
    position: tuple[float, float]
    crafter: Crafter | None = None
    storage_input: Inventory | None = None
    storage_output: Inventory | None = None
    holes: dict[int, ConveyorHoleTemplate] = field(default_factory=dict)

    @property
    def translation(self) -> tuple[float, float, float]:
        x, y = self.position
        return (x, y, STRUCTURE_DEPTH)

    @property
    def sprite_path(self) -> str:
        return f"structures/{self.structure_id.value}.aseprite"

    @property
    def input_inventory(self) -> Inventory | None:
        if self.crafter is not None:
            return self.crafter.input
        return self.storage_input

    @property
    def output_inventory(self) -> Inventory | None:
        if self.crafter is not None:
            return self.crafter.output
        return self.storage_output


class Factory:
    """Every structure, power grid, belt and deposit on the map."""

    def __init__(
        self,
        items: Manifest[Item],
        recipes: Manifest[Recipe],
        structures: Manifest[StructureTemplate],
        deposits: Manifest[Deposit] | None = None,
        rng: random.Random | None = None,
        map_size: float = MAP_SIZE,
    ) -> None:
        self.items = items
        self.recipes = recipes
        self.structure_templates = structures
        self.rng = rng if rng is not None else random.Random()
        self.terrain = TERRAIN
        self._next_entity = TERRAIN + 1
        from .power import PowerNetwork

        self.power = PowerNetwork(self.rng)
        self.structures: dict[int, PlacedStructure] = {}
        self.belts: list[ConveyorBelt] = []
        self.deposits: dict[int, PlacedDeposit] = {}
        self._hole_owners: dict[int, int] = {}
        if deposits is not None:
            for placed in scatter_deposits(deposits, self.rng, map_size):
                self.deposits[self._spawn()] = placed

    def _spawn(self) -> int:
        entity = self._next_entity
        self._next_entity += 1
        return entity

    def _select(self, recipe_id: Id) -> Crafter | None:
        crafter = Crafter()
        if crafter.select_recipe(recipe_id, self.recipes, self.items):
            return crafter
        return None

    def spawn_structure(
        self,
        structure_id: Id | str,
        position: Sequence[float],
        placed_on: Hashable = TERRAIN,
    ) -> PlacedStructure | None:
        """Build a structure at ``position`` on top of ``placed_on``.

        A miner must be placed on a deposit; elsewhere nothing is built and
        None is returned. Raises KeyError for an unknown structure.
        """
        if not isinstance(structure_id, Id):
            structure_id = Id(structure_id, _STRUCTURE_KIND)
        definition = self.structure_templates.get(structure_id)
        if definition is None:
            raise KeyError(f"Attempted to spawn non-existent structure {structure_id!r}")
        template = definition.value
        kind = definition.id.value

        crafter: Crafter | None = None
        storage_input: Inventory | None = None
        storage_output: Inventory | None = None
        if kind in ("constructor", "smelter"):
            default = template.recipe.default_recipe if template.recipe is not None else None
            if default is not None:
                crafter = self._select(default)
        elif kind == "miner":
            deposit = self.deposits.get(placed_on)
            if deposit is None:
                return None
            crafter = self._select(deposit.recipe_id)
        elif kind == "merger":
            storage_input = Inventory.sized(MERGER_SLOTS)
            storage_output = Inventory.sized(MERGER_SLOTS)

        x, y = position
        entity = self._spawn()
        power = template.power if template.power is not None else PowerTemplate()
        sockets = power.sockets if power.sockets is not None else 1
        self.power.add_node(entity, sockets, power.production, power.consumption, machine=True)

        holes: dict[int, ConveyorHoleTemplate] = {}
        for hole in template.conveyor_holes:
            hole_entity = self._spawn()
            holes[hole_entity] = hole
            self._hole_owners[hole_entity] = entity

        placed = PlacedStructure(
            entity=entity,
            structure_id=definition.id,
            name=template.name,
            position=(float(x), float(y)),
            crafter=crafter,
            storage_input=storage_input,
            storage_output=storage_output,
            holes=holes,
        )
        self.structures[entity] = placed
        return placed

    def link_power(self, dropped: Hashable, target: Hashable) -> bool:
        """Run a power line between two structures' sockets."""
        return self.power.link(dropped, target)

    def _hole_position(self, hole: int) -> tuple[float, float, float]:
        owner = self.structures[self._hole_owners[hole]]
        ox, oy, oz = owner.translation
        tx, ty, tz = owner.holes[hole].translation
        return (ox + tx, oy + ty, oz + tz)

    def _hole_direction(self, hole: Hashable):
        owner = self._hole_owners.get(hole)
        if owner is None:
            return None
        return self.structures[owner].holes[hole].direction

    def connect_conveyor(self, dropped: Hashable, target: Hashable) -> ConveyorBelt | None:
        """Lay a belt between two conveyor holes of opposite directions."""
        pair = resolve_drop(
            dropped, self._hole_direction(dropped), target, self._hole_direction(target)
        )
        if pair is None:
            return None
        source, sink = pair
        _, _, length = belt_geometry(self._hole_position(source), self._hole_position(sink))
        if length <= 0:
            return None
        belt = ConveyorBelt(source, sink, length)
        self.belts.append(belt)
        return belt

    def dismantle(self, entity: Hashable) -> bool:
        """Remove a structure with its holes, belts and power lines."""
        placed = self.structures.pop(entity, None)
        if placed is None:
            return False
        doomed = {entity, *placed.holes}
        for hole in placed.holes:
            del self._hole_owners[hole]
        self.belts = [
            belt for belt in self.belts if belt.source not in doomed and belt.target not in doomed
        ]
        self.power.dismantle(entity)
        return True

    def _owner(self, hole: Hashable) -> PlacedStructure | None:
        owner = self._hole_owners.get(hole)
        return None if owner is None else self.structures.get(owner)

    def update(self, delta: float | timedelta) -> list[int]:
        """Run one frame: power, then logistics, then work.

        Returns the ids of grids whose fuse blew this frame.
        """
        blown = self.power.update()

        for belt in self.belts:
            source = self._owner(belt.source)
            belt.place_item(delta, source.output_inventory if source is not None else None)
        for belt in self.belts:
            belt.advance(delta)
        for belt in self.belts:
            sink = self._owner(belt.target)
            belt.receive_items(sink.input_inventory if sink is not None else None, self.items)

        for placed in self.structures.values():
            if placed.crafter is None:
                continue
            node = self.power.nodes.get(placed.entity)
            placed.crafter.powered = node is not None and node.powered
            placed.crafter.update(delta, self.recipes, self.items)
        return blown


def load_factory(directory: str | PathLike[str], seed: int | None = None) -> Factory:
    """Load every manifest under ``directory`` and build a factory from them."""
    root = Path(directory)
    items = load_manifest_file(root / ITEM_MANIFEST_PATH, Item.from_mapping)
    recipes = load_manifest_file(root / RECIPE_MANIFEST_PATH, Recipe.from_mapping)
    structures = load_manifest_file(root / STRUCTURE_MANIFEST_PATH, StructureTemplate.from_mapping)
    deposits = load_manifest_file(root / DEPOSIT_MANIFEST_PATH, Deposit.from_mapping)
    return Factory(items, recipes, structures, deposits, random.Random(seed))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fearfactory", description="Load the factory assets and run the simulation."
    )
    parser.add_argument("assets", type=Path, help="directory holding the manifest/ folder")
    parser.add_argument("--seed", type=int, default=None, help="seed for deposit placement")
    parser.add_argument("--frames", type=int, default=0, help="frames to simulate")
    parser.add_argument("--delta", type=float, default=1 / 60, help="seconds per frame")
    args = parser.parse_args(argv)

    try:
        factory = load_factory(args.assets, args.seed)
    except ManifestLoaderError as exc:
        print(f"{parser.prog}: {exc}", file=sys.stderr)
        return 1

    for _ in range(max(0, args.frames)):
        factory.update(args.delta)

    print(f"items: {len(factory.items)}")
    print(f"recipes: {len(factory.recipes)}")
    print(f"structures: {len(factory.structure_templates)}")
    print(f"deposits: {len(factory.deposits)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())