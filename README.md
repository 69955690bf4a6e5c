# fearfactory

The simulation core of a small factory-building game. Structures are placed
on a map, linked into power grids, fed by conveyor belts and work through
recipes that turn input items into output items.

The game's content comes from TOML manifests: items, recipes, structures
and resource deposits. The package reads those manifests and runs the
factory frame by frame, without graphics.

## Installing

```
pip install .
```

Python 3.11 or later is required. There are no runtime dependencies.

## The command

```
fearfactory ASSETS [--seed N] [--frames N] [--delta SECONDS]
```

`ASSETS` is a directory holding a `manifest/` folder with `items.toml`,
`recipes.toml`, `structures.toml` and `deposits.toml`. The command loads the
four manifests, scatters the deposits over the map (`--seed` makes placement
repeatable), runs `--frames` frames of `--delta` seconds each (defaults: 0
frames, 1/60 s) and prints how many items, recipes, structures and placed
deposits there are. A manifest that cannot be read or parsed is reported on
standard error and the command exits with status 1.

## Manifests

Each top-level table of a manifest is one entry; its key becomes the entry's
`Id`.

```toml
# manifest/items.toml
[iron_ore]
name = "Iron Ore"
stack_size = 100

# manifest/recipes.toml
[iron_ingot]
name = "Iron Ingot"
input = { iron_ore = 1 }
output = { iron_ingot = 1 }
duration = "2s"
tags = [{ kind = "structure_id", value = "smelter" }]

# manifest/structures.toml
[smelter]
name = "Smelter"
power = { consumption = 10.0 }
recipe = { default_recipe = "iron_ingot" }
conveyor_holes = [
  { direction = "inbound", translation = [-32.0, 0.0, 1.0] },
  { direction = "outbound", translation = [32.0, 0.0, 1.0] },
]

# manifest/deposits.toml
[iron_deposit]
name = "Iron Deposit"
recipe_id = "mine_iron"
quantity = 5
```

Durations accept units such as `ms`, `s`, `m`, `h` and combinations like
`"1m 30s"` (`fearfactory.recipes.parse_duration`).

## Modules

- `fearfactory.ids` – `Id`, a string identifier compared by value.
- `fearfactory.manifest` – `Manifest`, `Definition`, `load_manifest`,
  `load_manifest_file` and `ManifestLoaderError`.
- `fearfactory.items` – `Item` and `Stack`, a bounded pile of one item.
- `fearfactory.inventory` – `Inventory`, slots holding stacks, raising
  `InsufficientItems`, `InventoryEmpty` or `InventoryFull` (all
  `InventoryError`). Note that `can_afford` requires strictly more of each
  input than the recipe asks for.
- `fearfactory.recipes` – `Recipe`, `RecipeTag`, `parse_duration`.
- `fearfactory.process` – `Timer`, `ProcessState`, `Crafter` (consume inputs,
  work for the recipe's duration, deliver outputs) and `progress_bar_size`.
- `fearfactory.structures` – `StructureTemplate`, `PowerTemplate`,
  `RecipeTemplate`, `ConveyorHoleTemplate`, `ConveyorHole`.
- `fearfactory.deposits` – `Deposit`, `PlacedDeposit`, `scatter_deposits`,
  `mine_deposit`.
- `fearfactory.power` – `PowerNetwork`, `PowerGrid`, `PowerNode`,
  `SocketDrag`: socket linking, grid merging, production and consumption
  totals, and blown fuses that switch an overloaded grid off.
- `fearfactory.conveyor` – `ConveyorBelt`, `ConveyoredItem`,
  `belt_geometry`, `resolve_drop`.
- `fearfactory.dismantle` – `Selection` and `DismantleTimer`.
- `fearfactory.ui` – `Hotbar`, `Camera`, `InteractionTracker`,
  `CompendiumState`, `compendium_rows`, `y_sort_depth`, `dismantle_hue`,
  `prompt_letter`.
- `fearfactory.screens` – `Screen` and `LoadingScreen`.
- `fearfactory.menus` – `InspectionMenu`, `InspectionMenuState`,
  `recipe_summary`, `selectable_recipes`.
- `fearfactory.factory` – `Factory` (`spawn_structure`, `link_power`,
  `connect_conveyor`, `dismantle`, `update`), `load_factory` and `main`.

## Example

```python
from fearfactory.ids import Id
from fearfactory.inventory import Inventory, InventoryFull
from fearfactory.items import Stack

inventory = Inventory.sized(1)
inventory.add_stack(Stack(item_id=Id("iron_ore"), quantity=50, max_quantity=100))

print(inventory.total_quantity_of(Id("iron_ore")))  # 50

try:
    inventory.add_stack(Stack(item_id=Id("copper_ore"), quantity=1, max_quantity=100))
except InventoryFull:
    print("no room left")
```

## What it does not do

There is no window, rendering, sound or live input handling. The UI modules
keep the state of the hotbar, camera, menus and loading screen, but nothing
draws them; the `fearfactory` command only loads manifests and steps the
simulation. Sprite and sound files are not read. A running game is not saved.

## Tests

```
pip install .[test]
pytest
```