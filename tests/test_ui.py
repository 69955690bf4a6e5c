import math

import pytest

from fearfactory.ids import Id
from fearfactory.items import Item
from fearfactory.manifest import load_manifest
from fearfactory.ui import (
    CAMERA_ZOOM_MAX,
    CAMERA_ZOOM_MIN,
    Camera,
    CompendiumState,
    Hotbar,
    InteractionTracker,
    compendium_rows,
    dismantle_hue,
    highlight_color,
    prompt_letter,
    y_sort_depth,
)


def test_default_hotbar_shortcuts():
    hotbar = Hotbar()
    mapping = {slot.shortcut: slot.structure_id.value for slot in hotbar.slots}
    assert mapping == {
        "Digit1": "windmill",
        "Digit2": "power_pole",
        "Digit3": "miner",
        "Digit4": "smelter",
        "Digit5": "constructor",
        "Digit6": "merger",
    }


def test_select_toggles():
    hotbar = Hotbar()
    assert hotbar.select(Id("miner")) == Id("miner")
    assert hotbar.selection == Id("miner")
    assert hotbar.select("miner") is None
    assert hotbar.selection is None


def test_select_other_replaces():
    hotbar = Hotbar()
    hotbar.select("miner")
    assert hotbar.select("smelter") == Id("smelter")


def test_press_shortcut():
    hotbar = Hotbar()
    assert hotbar.press_shortcut("Digit3") == Id("miner")
    assert hotbar.press_shortcut("KeyQ") == Id("miner")
    assert hotbar.press_shortcut("Digit3") is None


def test_deselect_and_highlight():
    hotbar = Hotbar()
    hotbar.select("merger")
    highlighted = [slot.structure_id.value for slot in hotbar.slots if hotbar.is_highlighted(slot)]
    assert highlighted == ["merger"]
    hotbar.deselect()
    assert hotbar.selection is None
    assert not any(hotbar.is_highlighted(slot) for slot in hotbar.slots)


def test_icon_path():
    hotbar = Hotbar()
    assert hotbar.slots[2].icon_path == "structures/miner.aseprite"


def test_camera_drag_secondary_round_trip():
    camera = Camera()
    x, y = camera.drag(10.0, 4.0, True)
    assert x < 0 and y > 0
    assert camera.drag(-10.0, -4.0, True) == (0.0, 0.0)


def test_camera_drag_primary_ignored():
    camera = Camera(x=3.0, y=7.0)
    assert camera.drag(10.0, 4.0, False) == (3.0, 7.0)


def test_camera_zoom_clamped():
    camera = Camera()
    assert camera.zoom(-100.0) == CAMERA_ZOOM_MAX
    assert camera.zoom(100.0) == CAMERA_ZOOM_MIN


def test_camera_zoom_in_shrinks_scale():
    camera = Camera()
    assert camera.zoom(1.0) < 1.0
    assert camera.zoom(0.0) == camera.scale


def test_interaction_tracker():
    tracker = InteractionTracker()
    assert tracker.hover("rock", False) is False
    assert tracker.press("KeyE") is None
    assert tracker.hover("ore", True) is True
    assert tracker.indicators == {"ore"}
    assert tracker.press("KeyE") == "ore"
    assert tracker.press("KeyF") is None
    assert tracker.leave("ore", True) is True
    assert tracker.indicators == set()
    assert tracker.press("KeyE") is None


def test_leave_non_interactable_keeps_hover():
    tracker = InteractionTracker()
    tracker.hover("ore", True)
    assert tracker.leave("rock", False) is False
    assert tracker.press("KeyE") == "ore"


def test_compendium_toggle():
    assert CompendiumState.CLOSED.toggled() is CompendiumState.ITEM
    assert CompendiumState.ITEM.toggled() is CompendiumState.CLOSED


def test_compendium_rows_sorted():
    manifest = load_manifest(
        '[plate]\nname = "Plate"\nstack_size = 50\n[ore]\nname = "Ore"\nstack_size = 100\n',
        Item.from_mapping,
    )
    rows = compendium_rows(manifest)
    assert [row.item_id.value for row in rows] == ["ore", "plate"]
    assert rows[0].name == "Ore"
    assert rows[0].stack_size == 100


def test_y_sort_depth_invariants():
    depths = [y_sort_depth(y) for y in (-500.0, -1.0, 0.0, 1.0, 500.0)]
    assert depths == sorted(depths, reverse=True)
    assert all(1.0 < d < 2.0 for d in depths)
    assert y_sort_depth(3.0, 0.5) == pytest.approx(y_sort_depth(3.0) * 0.5)


def test_dismantle_hue():
    assert dismantle_hue(0.0) == 60.0
    assert dismantle_hue(1.0) == 0.0
    assert highlight_color(0.0) == (60.0, 1.0, 0.5)
    assert math.isclose(highlight_color(0.5)[0], dismantle_hue(0.5))


def test_prompt_letter():
    assert prompt_letter("KeyE") == "E"
    assert prompt_letter("KeyZ") == "?"