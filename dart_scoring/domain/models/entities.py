"""Domain entities shared between the scoring engine and adapters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


STARTING_SCORES: tuple[int, ...] = (301, 501, 701)
"""Starting scores supported by the match engine."""

DARTS_PER_TURN = 3


class Side(str, Enum):
    """One of the two competing sides of a match."""

    HOME = "home"
    AWAY = "away"

    @property
    def opponent(self) -> "Side":
        return Side.AWAY if self is Side.HOME else Side.HOME


class GameType(str, Enum):
    """Kind of match being scored."""

    LEAGUE = "league"
    PRACTICE = "practice"
    WARMUP = "warmup"


class LegFormat(str, Enum):
    """Match length expressed as a best-of format."""

    SINGLE = "single"
    BEST_OF_3 = "bo3"
    BEST_OF_5 = "bo5"
    BEST_OF_7 = "bo7"

    @property
    def required_legs(self) -> int:
        """Legs a side must win to take the match."""

        return {
            LegFormat.SINGLE: 1,
            LegFormat.BEST_OF_3: 2,
            LegFormat.BEST_OF_5: 3,
            LegFormat.BEST_OF_7: 4,
        }[self]


class MatchStatus(str, Enum):
    """Lifecycle of a scored match."""

    SETUP = "setup"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(slots=True, frozen=True)
class DartThrow:
    """A single recorded dart.

    ``running_score`` is the thrower's remaining score right after this dart,
    before a bust is rolled back.
    """

    id: str
    side: Side
    leg_number: int
    turn_number: int
    dart_number: int
    score: int
    running_score: int
    is_double_attempt: bool = False
    is_checkout_attempt: bool = False
    checkout_successful: bool = False
    is_bust: bool = False
    timestamp: datetime = field(default_factory=_utcnow)
    player_id: Optional[str] = None


@dataclass(slots=True, frozen=True)
class TurnData:
    """Up to three consecutive darts sharing a turn number."""

    leg_number: int
    turn_number: int
    darts: tuple[DartThrow, ...] = ()
    bust: bool = False
    side: Optional[Side] = None

    @property
    def total_score(self) -> int:
        return sum(dart.score for dart in self.darts)

    @property
    def checkout_attempt(self) -> bool:
        return any(dart.is_checkout_attempt for dart in self.darts)

    @property
    def checkout_successful(self) -> bool:
        return any(dart.checkout_successful for dart in self.darts)


@dataclass(slots=True, frozen=True)
class LegData:
    """One side's view of a sealed leg."""

    leg_number: int
    side: Side
    starting_score: int
    final_score: int
    won: bool
    started_at: datetime
    darts: tuple[DartThrow, ...] = ()
    ended_at: Optional[datetime] = None
    player_id: Optional[str] = None

    @property
    def total_darts(self) -> int:
        return len(self.darts)

    @property
    def points_scored(self) -> int:
        return self.starting_score - self.final_score

    @property
    def duration_seconds(self) -> float | None:
        if self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds()


@dataclass(slots=True, frozen=True)
class LegStartStatus:
    """Whether each side has thrown its opening double in the current leg."""

    home_started: bool = False
    away_started: bool = False

    def started(self, side: Side) -> bool:
        return self.home_started if side is Side.HOME else self.away_started

    def mark(self, side: Side) -> "LegStartStatus":
        if side is Side.HOME:
            return replace(self, home_started=True)
        return replace(self, away_started=True)


@dataclass(slots=True, frozen=True)
class GameState:
    """Authoritative record of an in-progress match."""

    match_id: str
    home_name: str
    away_name: str
    starting_score: int = 501
    leg_format: LegFormat = LegFormat.SINGLE
    game_type: GameType = GameType.LEAGUE
    current_leg: int = 1
    turn_number: int = 1
    home_score: int = 501
    away_score: int = 501
    current_thrower: Side = Side.HOME
    leg_starter: Side = Side.HOME
    darts_thrown: int = 0
    home_legs_won: int = 0
    away_legs_won: int = 0
    game_complete: bool = False
    winner: Optional[Side] = None
    home_player_id: Optional[str] = None
    away_player_id: Optional[str] = None

    @property
    def required_legs(self) -> int:
        return self.leg_format.required_legs

    def score_for(self, side: Side) -> int:
        return self.home_score if side is Side.HOME else self.away_score

    def legs_won_for(self, side: Side) -> int:
        return self.home_legs_won if side is Side.HOME else self.away_legs_won

    def name_for(self, side: Side) -> str:
        return self.home_name if side is Side.HOME else self.away_name

    def player_id_for(self, side: Side) -> Optional[str]:
        return self.home_player_id if side is Side.HOME else self.away_player_id

    def with_score(self, side: Side, score: int) -> "GameState":
        if side is Side.HOME:
            return replace(self, home_score=score)
        return replace(self, away_score=score)


@dataclass(slots=True, frozen=True)
class PlayerGameStats:
    """Aggregated numbers for one side over one game."""

    player_id: str
    player_name: str
    game_won: bool = False
    legs_played: int = 0
    legs_won: int = 0
    total_darts: int = 0
    total_points: int = 0
    average: float = 0.0
    three_dart_average: float = 0.0
    scores_80_plus: int = 0
    scores_100_plus: int = 0
    scores_140_plus: int = 0
    scores_180: int = 0
    double_attempts: int = 0
    double_hits: int = 0
    double_percentage: float = 0.0
    checkout_attempts: int = 0
    checkout_hits: int = 0
    checkout_percentage: float = 0.0
    highest_checkout: int = 0
    highest_score: int = 0
    finish_positions: tuple[int, ...] = ()


@dataclass(slots=True, frozen=True)
class GameResult:
    """Outcome of a finished match."""

    match_id: str
    home_name: str
    away_name: str
    starting_score: int
    leg_format: LegFormat
    game_type: GameType
    home_legs_won: int
    away_legs_won: int
    winner: Optional[Side]
    completed_at: datetime = field(default_factory=_utcnow)


@dataclass(slots=True, frozen=True)
class CheckoutRoute:
    """A ranked finishing combination."""

    darts: tuple[int, ...]
    difficulty: int
    description: str


@dataclass(slots=True, frozen=True)
class CheckoutData:
    """Every finishing combination for one remaining score."""

    score: int
    possible: bool
    single_dart: tuple[tuple[int, ...], ...] = ()
    two_dart: tuple[tuple[int, ...], ...] = ()
    three_dart: tuple[tuple[int, ...], ...] = ()
    recommended: tuple[CheckoutRoute, ...] = ()
