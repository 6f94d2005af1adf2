"""Repository contracts for persisting finished match data."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from dart_scoring.domain.models import GameResult, LegData, PlayerGameStats, Side


class LegsRepo(Protocol):
    """Stores sealed legs, one row per side and leg."""

    async def upsert(self, match_id: str, leg: LegData) -> LegData:
        """Create or replace the leg keyed by match, leg number and side."""

    async def list_by_match(self, match_id: str) -> Sequence[LegData]:
        """Return legs of a match ordered by leg number then side."""


class GameStatsRepo(Protocol):
    """Stores per-side aggregated game statistics."""

    async def upsert(
        self, match_id: str, side: Side, stats: PlayerGameStats, *, played_at: datetime
    ) -> PlayerGameStats:
        """Create or replace statistics for one side of a match.

        ``played_at`` orders the player history. It is fixed by the first
        write of a row and kept when the row is replaced.
        """

    async def get(self, match_id: str, side: Side) -> Optional[PlayerGameStats]:
        """Fetch statistics for one side of a match."""

    async def list_by_player(self, player_id: str) -> Sequence[PlayerGameStats]:
        """Return every stored game of a player ordered by ``played_at``."""


class ResultsRepo(Protocol):
    """Stores final match outcomes."""

    async def upsert(self, result: GameResult) -> GameResult:
        """Create or replace the result keyed by match id."""

    async def get(self, match_id: str) -> Optional[GameResult]:
        """Fetch a match result."""
