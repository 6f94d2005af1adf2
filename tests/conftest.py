from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.match_service import MatchService


class TickingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 3, 1, 19, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def match_factory(clock: TickingClock) -> Callable[..., MatchService]:
    """Return a builder for started matches sharing the test clock."""

    def build(
        *,
        starting_score: int = 501,
        leg_format: str = "single",
        first_thrower: str = "home",
        undo_limit: int | None = None,
    ) -> MatchService:
        counter = iter(range(1, 10_000))
        service = MatchService(
            clock=clock,
            undo_limit=undo_limit,
            id_factory=lambda: f"dart-{next(counter):04d}",
        )
        service.start(
            "match-001",
            "Home Side",
            "Away Side",
            starting_score=starting_score,
            leg_format=leg_format,
            first_thrower=first_thrower,
            home_player_id="player-home",
            away_player_id="player-away",
        )
        return service

    return build


@pytest.fixture
def match(match_factory) -> MatchService:
    return match_factory()
