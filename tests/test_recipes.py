from datetime import timedelta

import pytest

from fearfactory.ids import Id
from fearfactory.manifest import load_manifest
from fearfactory.recipes import Recipe, RecipeTag, parse_duration


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1s", timedelta(seconds=1)),
        ("500ms", timedelta(milliseconds=500)),
        ("1m 30s", timedelta(minutes=1, seconds=30)),
        ("2h", timedelta(hours=2)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("3 seconds", timedelta(seconds=3)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


def test_parse_duration_is_additive():
    assert parse_duration("2s 2s") == parse_duration("4s")


@pytest.mark.parametrize("text", ["", "5", "5 parsecs", "s", "1s x"])
def test_parse_duration_rejects(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_recipe_from_mapping():
    recipe = Recipe.from_mapping(
        {
            "name": "Iron Ingot",
            "input": {"iron_ore": 2},
            "output": {"iron_ingot": 1},
            "duration": "2s",
            "tags": [{"kind": "structure_id", "value": "smelter"}],
        }
    )
    assert recipe.name == "Iron Ingot"
    assert recipe.input == {Id("iron_ore"): 2}
    assert recipe.output == {Id("iron_ingot"): 1}
    assert recipe.duration == timedelta(seconds=2)
    assert recipe.tags == [RecipeTag.structure_id("smelter")]


def test_recipe_defaults():
    recipe = Recipe.from_mapping({"name": "Nothing", "duration": "1s"})
    assert recipe.input == {}
    assert recipe.output == {}
    assert recipe.tags == []


@pytest.mark.parametrize(
    "data",
    [
        {"name": "No duration"},
        {"duration": "1s"},
        {"name": "Bad", "duration": "1s", "input": {"iron_ore": -1}},
        {"name": "Bad", "duration": "soon"},
    ],
)
def test_recipe_rejects_bad_data(data):
    with pytest.raises(ValueError):
        Recipe.from_mapping(data)


def test_tag_unknown_kind():
    with pytest.raises(ValueError):
        RecipeTag.from_mapping({"kind": "colour", "value": "red"})


def test_tag_membership_by_structure():
    recipe = Recipe.from_mapping(
        {"name": "Plate", "duration": "1s", "tags": [{"kind": "structure_id", "value": "constructor"}]}
    )
    assert RecipeTag.structure_id("constructor") in recipe.tags
    assert RecipeTag.structure_id("smelter") not in recipe.tags


def test_recipes_load_from_manifest():
    document = """
[iron_plate]
name = "Iron Plate"
duration = "3s"
input = { iron_ingot = 3 }
output = { iron_plate = 2 }
"""
    manifest = load_manifest(document, Recipe.from_mapping)
    definition = manifest.get(Id("iron_plate"))
    assert definition.output == {Id("iron_plate"): 2}
    assert definition.id.kind == "Recipe"