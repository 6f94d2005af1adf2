"""Domain data transfer objects used across the scoring core."""

from .entities import (
    DARTS_PER_TURN,
    STARTING_SCORES,
    CheckoutData,
    CheckoutRoute,
    DartThrow,
    GameResult,
    GameState,
    GameType,
    LegData,
    LegFormat,
    LegStartStatus,
    MatchStatus,
    PlayerGameStats,
    Side,
    TurnData,
)

__all__ = [
    "DARTS_PER_TURN",
    "STARTING_SCORES",
    "CheckoutData",
    "CheckoutRoute",
    "DartThrow",
    "GameResult",
    "GameState",
    "GameType",
    "LegData",
    "LegFormat",
    "LegStartStatus",
    "MatchStatus",
    "PlayerGameStats",
    "Side",
    "TurnData",
]
