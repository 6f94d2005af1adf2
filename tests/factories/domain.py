"""Domain factories for darts scoring tests."""

from __future__ import annotations

import datetime as dt
from typing import Sequence

import factory

from dart_scoring.domain.models import DartThrow, LegData, PlayerGameStats, Side


class DartThrowFactory(factory.Factory):
    """Factory building :class:`~dart_scoring.domain.models.DartThrow` values."""

    id = factory.Sequence(lambda n: f"dart-{n:05d}")
    side = Side.HOME
    leg_number = 1
    turn_number = 1
    dart_number = 1
    score = 20
    running_score = 481
    is_double_attempt = False
    is_checkout_attempt = False
    checkout_successful = False
    is_bust = False
    timestamp = factory.LazyFunction(
        lambda: dt.datetime(2024, 3, 1, 19, 30, tzinfo=dt.timezone.utc)
    )
    player_id = "player-home"

    class Meta:
        model = DartThrow
        abstract = False


def turn_of(
    scores: Sequence[int], *, turn_number: int, leg_number: int = 1, **overrides: object
) -> list[DartThrow]:
    """Build the darts of one turn with consecutive dart numbers."""

    return [
        DartThrowFactory(
            score=score,
            turn_number=turn_number,
            leg_number=leg_number,
            dart_number=index,
            **overrides,
        )
        for index, score in enumerate(scores, start=1)
    ]


class LegDataFactory(factory.Factory):
    """Factory constructing :class:`~dart_scoring.domain.models.LegData` values."""

    leg_number = factory.Sequence(lambda n: n + 1)
    side = Side.HOME
    starting_score = 501
    final_score = 0
    won = True
    started_at = factory.LazyFunction(
        lambda: dt.datetime(2024, 3, 1, 19, 30, tzinfo=dt.timezone.utc)
    )
    ended_at = factory.LazyAttribute(lambda obj: obj.started_at + dt.timedelta(minutes=4))
    darts = ()
    player_id = "player-home"

    class Meta:
        model = LegData
        abstract = False


class PlayerGameStatsFactory(factory.Factory):
    """Factory generating :class:`~dart_scoring.domain.models.PlayerGameStats` rows."""

    player_id = "player-home"
    player_name = factory.Faker("name")
    game_won = True
    legs_played = 1
    legs_won = 1
    total_darts = 30
    total_points = 501
    average = factory.LazyAttribute(
        lambda obj: round(obj.total_points / obj.total_darts, 2) if obj.total_darts else 0.0
    )
    three_dart_average = factory.LazyAttribute(
        lambda obj: round(obj.total_points * 3 / obj.total_darts, 2) if obj.total_darts else 0.0
    )
    double_attempts = 4
    double_hits = 1
    double_percentage = 25.0
    checkout_attempts = 4
    checkout_hits = 1
    checkout_percentage = 25.0
    highest_checkout = 40
    highest_score = 100
    finish_positions = (40,)

    class Meta:
        model = PlayerGameStats
        abstract = False
