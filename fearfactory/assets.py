"""Tracking of resources that wait for their assets to finish loading."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class _Pending:
    handle: Any
    is_loaded: Callable[[Any], bool]
    insert: Callable[[Any], None]


class ResourceHandles:
    """Handles waiting to be loaded, in the order they were queued."""

    def __init__(self) -> None:
        self._waiting: deque[_Pending] = deque()
        self._finished: list[Any] = []

    @property
    def waiting(self) -> list[Any]:
        """Handles still waiting, in queue order."""
        return [pending.handle for pending in self._waiting]

    @property
    def finished(self) -> list[Any]:
        """Handles whose resources have been inserted, in completion order."""
        return list(self._finished)

    def load_resource(
        self,
        handle: Any,
        is_loaded: Callable[[Any], bool],
        insert: Callable[[Any], None],
    ) -> Any:
        """Queue ``handle``; ``insert`` runs once ``is_loaded`` reports it ready."""
        self._waiting.append(_Pending(handle, is_loaded, insert))
        return handle

    def update(self) -> list[Any]:
        """Check every waiting handle once and insert those that are loaded.

        Handles that are not ready keep their relative order. Returns the
        handles finished by this pass.
        """
        pending_now = list(self._waiting)
        self._waiting.clear()
        done: list[Any] = []
        for pending in pending_now:
            if pending.is_loaded(pending.handle):
                pending.insert(pending.handle)
                self._finished.append(pending.handle)
                done.append(pending.handle)
            else:
                self._waiting.append(pending)
        return done

    def is_all_done(self) -> bool:
        return not self._waiting


def is_finished_loading(handles: ResourceHandles) -> bool:
    """True once no resource is waiting for its assets."""
    return handles.is_all_done()