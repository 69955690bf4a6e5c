"""Manifests: TOML tables of named definitions."""

from __future__ import annotations

import tomllib
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any, Generic, TypeVar

from .ids import Id

T = TypeVar("T")

UNSET_ID = "<unset>"


class ManifestLoaderError(Exception):
    """Raised when a manifest cannot be read or parsed."""


@dataclass
class Definition(Generic[T]):
    """A manifest entry: its id and its value.

    Attributes not found on the definition are looked up on the value.
    """

    id: Id[T]
    value: T

    def __getattr__(self, name: str) -> Any:
        if name in ("id", "value") or name.startswith("__"):
            raise AttributeError(name)
        return getattr(self.value, name)


class Manifest(Generic[T]):
    """Definitions keyed by their ids."""

    def __init__(self, entries: Mapping[Id[T], Definition[T]] | None = None) -> None:
        self._entries: dict[Id[T], Definition[T]] = dict(entries or {})

    def get(self, id: Id[T]) -> Definition[T] | None:
        """Return the definition with this id, or None."""
        return self._entries.get(id)

    def contains(self, id: Id[T]) -> bool:
        return id in self._entries

    def __contains__(self, id: object) -> bool:
        return id in self._entries

    def __iter__(self) -> Iterator[tuple[Id[T], Definition[T]]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Manifest({list(self._entries.values())!r})"


def _kind_of(factory: Callable[..., Any]) -> str:
    owner = getattr(factory, "__self__", factory)
    if isinstance(owner, type):
        return owner.__name__
    return getattr(factory, "__name__", type(factory).__name__)


def load_manifest(data: str | bytes, factory: Callable[[Mapping[str, Any]], T]) -> Manifest[T]:
    """Parse TOML text into a manifest, building each value with ``factory``.

    Every top-level table becomes one definition whose id is the table's key.
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ManifestLoaderError(f"Could not parse TOML: {exc}") from exc
    else:
        text = data

    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestLoaderError(f"Could not parse TOML: {exc}") from exc

    kind = _kind_of(factory)
    entries: dict[Id[T], Definition[T]] = {}
    for key, table in document.items():
        if not isinstance(table, dict):
            raise ManifestLoaderError(f"Could not parse TOML: entry {key!r} is not a table")
        try:
            value = factory(table)
        except (KeyError, TypeError, ValueError) as exc:
            raise ManifestLoaderError(f"Could not parse TOML: entry {key!r}: {exc}") from exc
        entry_id: Id[T] = Id(key, kind)
        entries[entry_id] = Definition(entry_id, value)
    return Manifest(entries)


def load_manifest_file(
    path: str | PathLike[str], factory: Callable[[Mapping[str, Any]], T]
) -> Manifest[T]:
    """Read a TOML manifest from a file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ManifestLoaderError(f"Could not load asset: {exc}") from exc
    return load_manifest(data, factory)