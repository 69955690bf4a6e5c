"""Top-level screens and the loading screen's transition to gameplay."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum

from .process import Timer, TimerMode

LOADING_DELAY = 1.0
LOADING_TEXT = "Loading..."


class Screen(Enum):
    """Which screen the game is showing."""

    LOADING = "loading"
    GAMEPLAY = "gameplay"


class LoadingScreen:
    """Moves from loading to gameplay once, after a short delay.

    The delay timer runs every frame; the switch happens only on the frame it
    elapses, and only if loading has finished by then.
    """

    def __init__(self, delay: float = LOADING_DELAY) -> None:
        self.screen = Screen.LOADING
        self._delay = Timer(delay, TimerMode.ONCE)

    @property
    def text(self) -> str | None:
        return LOADING_TEXT if self.screen is Screen.LOADING else None

    def update(self, delta: float | timedelta, finished_loading: bool) -> Screen:
        """Run one frame; returns the current screen."""
        delay_elapsed = self._delay.tick(delta).just_finished()
        if delay_elapsed and self.screen is Screen.LOADING and finished_loading:
            self.screen = Screen.GAMEPLAY
        return self.screen