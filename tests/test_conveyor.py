import math

import pytest

from fearfactory.conveyor import (
    CONVEYOR_BELT_TRAY_SIZE,
    ConveyorBelt,
    ConveyoredItem,
    belt_geometry,
    resolve_drop,
)
from fearfactory.ids import Id
from fearfactory.inventory import Inventory
from fearfactory.items import Item, Stack
from fearfactory.manifest import load_manifest
from fearfactory.structures import ConveyorHole

IRON = Id("iron", "Item")


@pytest.fixture
def items():
    return load_manifest('[iron]\nname = "Iron"\nstack_size = 100\n', Item.from_mapping)


def _output(quantity=5):
    return Inventory([Stack(IRON, quantity, 100)])


def test_place_item_waits_for_pickup_timer():
    belt = ConveyorBelt("a", "b", 64.0)
    output = _output()
    assert belt.place_item(0.0, output) is None
    assert output.total_quantity_of(IRON) == 5
    item = belt.place_item(10.0, output)
    assert item is not None
    assert item.item_id == IRON
    assert item.position == -belt.length / 2.0
    assert item.progress == 0.0
    assert output.total_quantity_of(IRON) == 4
    assert belt.items == [item]


def test_place_item_without_output_does_nothing():
    belt = ConveyorBelt("a", "b", 64.0)
    assert belt.place_item(10.0, None) is None
    assert belt.items == []


def test_place_item_from_empty_output_does_nothing():
    belt = ConveyorBelt("a", "b", 64.0)
    assert belt.place_item(10.0, Inventory.sized(3)) is None
    assert belt.items == []


def test_belt_stops_taking_items_when_full():
    belt = ConveyorBelt("a", "b", CONVEYOR_BELT_TRAY_SIZE)
    output = _output()
    for _ in range(4):
        belt.place_item(10.0, output)
    assert len(belt.items) == belt.tray_count()
    assert output.total_quantity_of(IRON) == 5 - belt.tray_count()


def test_tray_count_rounds_up():
    assert ConveyorBelt("a", "b", 40.0).tray_count() == 3


def test_invalid_speed_is_rejected():
    with pytest.raises(ValueError):
        ConveyorBelt("a", "b", 32.0, speed=0.0)


def test_advance_moves_items_forward():
    belt = ConveyorBelt("a", "b", 320.0)
    belt.place_item(10.0, _output())
    before = belt.items[0].position
    belt.advance(0.1)
    assert belt.items[0].position > before
    assert 0.0 < belt.items[0].progress < 1.0


def test_advance_clamps_and_queues_items():
    belt = ConveyorBelt("a", "b", 64.0)
    belt.items = [ConveyoredItem(IRON, -32.0), ConveyoredItem(IRON, -32.0)]
    belt.advance(100.0)
    first, second = belt.items
    assert first.position == belt.length / 2.0
    assert first.progress == 1.0
    assert second.position == belt.length / 2.0 - CONVEYOR_BELT_TRAY_SIZE
    assert second.progress < 1.0


def test_receive_items_delivers_finished_items(items):
    belt = ConveyorBelt("a", "b", 64.0)
    belt.items = [ConveyoredItem(IRON, 32.0, 1.0), ConveyoredItem(IRON, 0.0, 0.5)]
    target = Inventory([Stack(IRON, 0, 100)])
    delivered = belt.receive_items(target, items)
    assert delivered == [IRON]
    assert target.total_quantity_of(IRON) == 1
    assert [item.progress for item in belt.items] == [0.5]


def test_receive_items_keeps_items_that_do_not_fit(items):
    belt = ConveyorBelt("a", "b", 64.0)
    belt.items = [ConveyoredItem(IRON, 32.0, 1.0)]
    assert belt.receive_items(Inventory.sized(0), items) == []
    assert len(belt.items) == 1


def test_receive_items_keeps_unknown_items(items):
    belt = ConveyorBelt("a", "b", 64.0)
    belt.items = [ConveyoredItem(Id("gold"), 32.0, 1.0)]
    assert belt.receive_items(Inventory.sized(4), items) == []
    assert len(belt.items) == 1


def test_receive_items_without_input(items):
    belt = ConveyorBelt("a", "b", 64.0)
    belt.items = [ConveyoredItem(IRON, 32.0, 1.0)]
    assert belt.receive_items(None, items) == []
    assert len(belt.items) == 1


def test_pick_up_removes_item():
    belt = ConveyorBelt("a", "b", 64.0)
    item = ConveyoredItem(IRON, 0.0)
    belt.items = [item]
    belt.pick_up(item)
    assert belt.items == []


def test_belt_geometry():
    start = (0.0, 0.0, 0.0)
    end = (0.0, 10.0, 0.0)
    center, angle, length = belt_geometry(start, end)
    assert length == pytest.approx(10.0)
    assert angle == pytest.approx(math.pi / 2)
    assert math.dist(center, start) == pytest.approx(length / 2)
    assert math.dist(center, end) == pytest.approx(length / 2)


def test_belt_geometry_mismatched_dimensions():
    with pytest.raises(ValueError):
        belt_geometry((0.0, 0.0), (1.0, 1.0, 1.0))


def test_resolve_drop_orders_outbound_first():
    assert resolve_drop("d", ConveyorHole.OUTBOUND, "t", ConveyorHole.INBOUND) == ("d", "t")
    assert resolve_drop("d", ConveyorHole.INBOUND, "t", ConveyorHole.OUTBOUND) == ("t", "d")


def test_resolve_drop_rejects_same_direction_and_non_holes():
    assert resolve_drop("d", ConveyorHole.INBOUND, "t", ConveyorHole.INBOUND) is None
    assert resolve_drop("d", None, "t", ConveyorHole.INBOUND) is None
    assert resolve_drop("d", ConveyorHole.OUTBOUND, "t", None) is None