"""Simulation core of a factory-building game: manifests, inventories, recipes, power and conveyors."""

__version__ = "0.1.0"