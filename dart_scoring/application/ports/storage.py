"""Storage abstraction combining repositories behind a single backend."""

from __future__ import annotations

from typing import Protocol

from .repositories import GameStatsRepo, LegsRepo, ResultsRepo


class Storage(Protocol):
    """Provides access to persistence backends grouped under a single facade."""

    @property
    def legs(self) -> LegsRepo:
        """Return repository managing sealed legs."""

    @property
    def game_stats(self) -> GameStatsRepo:
        """Return repository managing per-side game statistics."""

    @property
    def results(self) -> ResultsRepo:
        """Return repository managing match results."""

    async def init(self) -> None:
        """Initialise underlying connections or schemas if needed."""

    async def close(self) -> None:
        """Release any allocated resources (connections, pools, caches)."""
