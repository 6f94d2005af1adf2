"""In-process storage backend used for practice sessions and tests."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from dart_scoring.application.ports.repositories import GameStatsRepo, LegsRepo, ResultsRepo
from dart_scoring.application.ports.storage import Storage
from dart_scoring.domain.models import GameResult, LegData, PlayerGameStats, Side


class MemoryLegsRepo(LegsRepo):
    def __init__(self) -> None:
        self._rows: dict[tuple[str, int, Side], LegData] = {}

    async def upsert(self, match_id: str, leg: LegData) -> LegData:
        self._rows[(match_id, leg.leg_number, leg.side)] = leg
        return leg

    async def list_by_match(self, match_id: str) -> Sequence[LegData]:
        keys = sorted(
            (key for key in self._rows if key[0] == match_id),
            key=lambda key: (key[1], key[2].value),
        )
        return tuple(self._rows[key] for key in keys)


class MemoryGameStatsRepo(GameStatsRepo):
    def __init__(self) -> None:
        self._rows: dict[tuple[str, Side], tuple[datetime, PlayerGameStats]] = {}

    async def upsert(
        self, match_id: str, side: Side, stats: PlayerGameStats, *, played_at: datetime
    ) -> PlayerGameStats:
        previous = self._rows.get((match_id, side))
        self._rows[(match_id, side)] = (previous[0] if previous else played_at, stats)
        return stats

    async def get(self, match_id: str, side: Side) -> Optional[PlayerGameStats]:
        row = self._rows.get((match_id, side))
        return row[1] if row else None

    async def list_by_player(self, player_id: str) -> Sequence[PlayerGameStats]:
        keys = sorted(
            (key for key, (_, stats) in self._rows.items() if stats.player_id == player_id),
            key=lambda key: (self._rows[key][0], key[0]),
        )
        return tuple(self._rows[key][1] for key in keys)


class MemoryResultsRepo(ResultsRepo):
    def __init__(self) -> None:
        self._rows: dict[str, GameResult] = {}

    async def upsert(self, result: GameResult) -> GameResult:
        self._rows[result.match_id] = result
        return result

    async def get(self, match_id: str) -> Optional[GameResult]:
        return self._rows.get(match_id)


class MemoryStorage(Storage):
    """Storage facade keeping every row in dictionaries."""

    def __init__(self) -> None:
        self._legs = MemoryLegsRepo()
        self._game_stats = MemoryGameStatsRepo()
        self._results = MemoryResultsRepo()

    async def init(self) -> None:
        return None

    async def close(self) -> None:
        return None

    @property
    def legs(self) -> LegsRepo:
        return self._legs

    @property
    def game_stats(self) -> GameStatsRepo:
        return self._game_stats

    @property
    def results(self) -> ResultsRepo:
        return self._results
