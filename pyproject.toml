[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fearfactory"
version = "0.1.0"
description = "Simulation core of a small factory-building game: items, inventories, recipes, power grids and conveyor belts, driven by TOML manifests."
requires-python = ">=3.11"
dependencies = []
keywords = ["factory", "simulation", "game", "automation", "conveyor", "crafting", "toml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fearfactory = "fearfactory.factory:main"

[tool.hatch.build.targets.wheel]
packages = ["fearfactory"]

[tool.pytest.ini_options]
addopts = "-ra"
