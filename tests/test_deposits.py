import random

import pytest

from fearfactory.deposits import Deposit, PlacedDeposit, mine_deposit, scatter_deposits
from fearfactory.ids import Id
from fearfactory.inventory import Inventory
from fearfactory.items import Item, Stack
from fearfactory.manifest import load_manifest
from fearfactory.recipes import Recipe

DEPOSITS = """
[iron]
name = "Iron Deposit"
recipe_id = "mine_iron"
quantity = 3

[copper]
name = "Copper Deposit"
recipe_id = "mine_copper"
quantity = 2
"""

ITEMS = """
[iron_ore]
name = "Iron Ore"
stack_size = 100
"""


@pytest.fixture
def deposits():
    return load_manifest(DEPOSITS, Deposit.from_mapping)


@pytest.fixture
def items():
    return load_manifest(ITEMS, Item.from_mapping)


def test_deposit_from_mapping():
    deposit = Deposit.from_mapping({"name": "Iron", "recipe_id": "mine_iron", "quantity": 3})
    assert deposit.recipe_id == Id("mine_iron")
    assert deposit.quantity == 3


def test_deposit_requires_quantity():
    with pytest.raises(ValueError):
        Deposit.from_mapping({"name": "Iron", "recipe_id": "mine_iron"})


def test_scatter_places_each_quantity(deposits):
    placed = scatter_deposits(deposits, random.Random(1))
    names = [p.name for p in placed]
    assert names.count("Iron Deposit") == 3
    assert names.count("Copper Deposit") == 2


def test_scatter_stays_on_map(deposits):
    size = 100.0
    placed = scatter_deposits(deposits, random.Random(7), size)
    for deposit in placed:
        x, y, _ = deposit.position
        assert -size / 2 <= x < size / 2
        assert -size / 2 <= y < size / 2


def test_scatter_is_deterministic(deposits):
    first = scatter_deposits(deposits, random.Random(3))
    second = scatter_deposits(deposits, random.Random(3))
    assert first == second
    assert all(isinstance(p, PlacedDeposit) for p in first) and len(first) == 5


def test_mine_adds_output(items):
    recipe = Recipe.from_mapping(
        {"name": "Mine Iron", "duration": "1s", "output": {"iron_ore": 2}}
    )
    inventory = Inventory.sized(9)
    mine_deposit(recipe, items, inventory)
    assert inventory.total_quantity_of(Id("iron_ore")) == 2


def test_mine_into_full_inventory_is_ignored(items):
    recipe = Recipe.from_mapping(
        {"name": "Mine Iron", "duration": "1s", "output": {"iron_ore": 2}}
    )
    inventory = Inventory([Stack(Id("iron_ore"), 100, 100)])
    mine_deposit(recipe, items, inventory)
    assert inventory.total_quantity_of(Id("iron_ore")) == 100


def test_mine_unknown_item_raises(items):
    recipe = Recipe.from_mapping(
        {"name": "Mine Gold", "duration": "1s", "output": {"gold_ore": 1}}
    )
    with pytest.raises(KeyError):
        mine_deposit(recipe, items, Inventory.sized(1))