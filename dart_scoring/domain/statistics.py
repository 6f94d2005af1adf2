"""Statistics aggregation for recorded darts.

Every function here is a pure transformation from dart, leg or game history
to summary numbers. Nothing performs I/O and nothing raises on empty input:
missing data produces zeroed aggregates.

Averages are exposed both per dart and per three darts. Turn totals are the
raw sum of the darts thrown, so a bust turn still counts toward the score
buckets, the highest score and the points total. All percentages and
averages are rounded to two decimals, half away from zero.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Literal, Sequence

from dart_scoring.domain.models import DartThrow, LegData, PlayerGameStats, TurnData
from utils import fmt_average, fmt_count, fmt_percentage

DEFAULT_FORM_GAMES = 5
DEFAULT_TREND_THRESHOLD = 1.0
MIN_TREND_GAMES = 4

StatKind = Literal["average", "percentage", "count"]


class FormTrend(str, Enum):
    """Direction of a player's recent scoring."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class StreakType(str, Enum):
    """Run of consecutive results at the end of the form window."""

    WINNING = "winning"
    LOSING = "losing"
    NONE = "none"


class ConsistencyRating(str, Enum):
    """Coarse grading of a single game performance."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    BELOW_AVERAGE = "below-average"


@dataclass(slots=True, frozen=True)
class TurnScoreCounts:
    """Cumulative high-score buckets over a set of turns."""

    scores_80_plus: int = 0
    scores_100_plus: int = 0
    scores_140_plus: int = 0
    scores_180: int = 0
    highest_score: int = 0


@dataclass(slots=True, frozen=True)
class LegStats:
    """Live numbers for a single leg."""

    leg_number: int
    total_darts: int = 0
    total_points: int = 0
    average: float = 0.0
    three_dart_average: float = 0.0
    scores_80_plus: int = 0
    scores_100_plus: int = 0
    scores_140_plus: int = 0
    scores_180: int = 0
    highest_score: int = 0


@dataclass(slots=True, frozen=True)
class LegSummary:
    """Leg number and darts needed to win it."""

    leg_number: int
    darts: int


@dataclass(slots=True, frozen=True)
class MatchStats:
    """Aggregate over the legs of one match."""

    total_legs: int = 0
    legs_won: int = 0
    total_darts: int = 0
    total_points: int = 0
    win_percentage: float = 0.0
    average_darts_per_leg: float = 0.0
    best_leg: LegSummary | None = None
    worst_leg: LegSummary | None = None


@dataclass(slots=True, frozen=True)
class SeasonStats:
    """Aggregate over a season of games."""

    games_played: int = 0
    games_won: int = 0
    win_percentage: float = 0.0
    total_darts: int = 0
    overall_average: float = 0.0
    overall_three_dart_average: float = 0.0
    total_180s: int = 0
    best_average: float = 0.0
    worst_average: float = 0.0
    checkout_percentage: float = 0.0
    double_percentage: float = 0.0
    highest_checkout: int = 0
    favourite_finish: int | None = None


@dataclass(slots=True, frozen=True)
class FormGuide:
    """Recent results and scoring trend."""

    recent_form: tuple[bool, ...] = ()
    recent_win_percentage: float = 0.0
    recent_average: float = 0.0
    trend: FormTrend = FormTrend.STABLE
    streak_type: StreakType = StreakType.NONE
    streak_length: int = 0


@dataclass(slots=True, frozen=True)
class ComparativeStats:
    """Player performance relative to a team baseline."""

    average_comparison: float
    win_rate_comparison: float
    checkout_comparison: float
    double_comparison: float
    consistency_rating: ConsistencyRating


def round_stat(value: float) -> float:
    """Round to two decimals, ties away from zero.

    >>> round_stat(2.675), round_stat(-2.675), round_stat(1 / 3)
    (2.68, -2.68, 0.33)
    """

    quantised = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(quantised)


def percentage(hits: int, attempts: int) -> float:
    """Return ``hits / attempts`` as a rounded percentage.

    >>> percentage(1, 3), percentage(2, 3), percentage(5, 0)
    (33.33, 66.67, 0.0)
    """

    if attempts <= 0:
        return 0.0
    return round_stat(hits / attempts * 100)


def group_turns(darts: Iterable[DartThrow]) -> tuple[TurnData, ...]:
    """Group darts by ``(leg, turn)`` keeping first-seen order."""

    grouped: dict[tuple[int, int], list[DartThrow]] = {}
    for dart in darts:
        grouped.setdefault((dart.leg_number, dart.turn_number), []).append(dart)
    return tuple(
        TurnData(
            leg_number=leg_number,
            turn_number=turn_number,
            darts=tuple(items),
            bust=any(dart.is_bust for dart in items),
            side=items[0].side,
        )
        for (leg_number, turn_number), items in grouped.items()
    )


def _count_turns(turns: Sequence[TurnData]) -> TurnScoreCounts:
    scores = [turn.total_score for turn in turns]
    return TurnScoreCounts(
        scores_80_plus=sum(1 for score in scores if score >= 80),
        scores_100_plus=sum(1 for score in scores if score >= 100),
        scores_140_plus=sum(1 for score in scores if score >= 140),
        scores_180=sum(1 for score in scores if score == 180),
        highest_score=max(scores, default=0),
    )


def turn_score_counts(darts: Iterable[DartThrow]) -> TurnScoreCounts:
    """Classify turn totals into the 80+/100+/140+/180 buckets.

    Buckets are cumulative: a 180 counts in all four.
    """

    return _count_turns(group_turns(darts))


def checkout_value(dart: DartThrow, darts: Iterable[DartThrow]) -> int:
    """Return the score a successful checkout was taken from.

    That is the sum of the finishing turn up to and including ``dart``.
    """

    return sum(
        other.score
        for other in darts
        if other.side == dart.side
        and other.leg_number == dart.leg_number
        and other.turn_number == dart.turn_number
        and other.dart_number <= dart.dart_number
    )


def _points(turns: Iterable[TurnData]) -> int:
    return sum(turn.total_score for turn in turns)


def calculate_game_stats(
    player_id: str,
    player_name: str,
    darts: Iterable[DartThrow],
    legs: Iterable[LegData],
    game_won: bool,
) -> PlayerGameStats:
    """Aggregate one player's darts and legs into :class:`PlayerGameStats`."""

    history = tuple(darts)
    leg_list = tuple(legs)
    turns = group_turns(history)
    counts = _count_turns(turns)

    total_darts = len(history)
    total_points = _points(turns)
    average = total_points / total_darts if total_darts else 0.0

    double_attempts = sum(1 for dart in history if dart.is_double_attempt)
    double_hits = sum(
        1 for dart in history if dart.is_double_attempt and dart.checkout_successful
    )
    checkout_attempts = sum(1 for dart in history if dart.is_checkout_attempt)
    finishes = tuple(
        checkout_value(dart, history) for dart in history if dart.checkout_successful
    )

    return PlayerGameStats(
        player_id=player_id,
        player_name=player_name,
        game_won=game_won,
        legs_played=len(leg_list),
        legs_won=sum(1 for leg in leg_list if leg.won),
        total_darts=total_darts,
        total_points=total_points,
        average=round_stat(average),
        three_dart_average=round_stat(average * 3),
        scores_80_plus=counts.scores_80_plus,
        scores_100_plus=counts.scores_100_plus,
        scores_140_plus=counts.scores_140_plus,
        scores_180=counts.scores_180,
        double_attempts=double_attempts,
        double_hits=double_hits,
        double_percentage=percentage(double_hits, double_attempts),
        checkout_attempts=checkout_attempts,
        checkout_hits=len(finishes),
        checkout_percentage=percentage(len(finishes), checkout_attempts),
        highest_checkout=max(finishes, default=0),
        highest_score=counts.highest_score,
        finish_positions=finishes,
    )


def calculate_leg_stats(darts: Iterable[DartThrow], leg_number: int) -> LegStats:
    """Return live statistics for ``leg_number``."""

    leg_darts = tuple(dart for dart in darts if dart.leg_number == leg_number)
    if not leg_darts:
        return LegStats(leg_number=leg_number)

    turns = group_turns(leg_darts)
    counts = _count_turns(turns)
    total_points = _points(turns)
    average = total_points / len(leg_darts)
    return LegStats(
        leg_number=leg_number,
        total_darts=len(leg_darts),
        total_points=total_points,
        average=round_stat(average),
        three_dart_average=round_stat(average * 3),
        scores_80_plus=counts.scores_80_plus,
        scores_100_plus=counts.scores_100_plus,
        scores_140_plus=counts.scores_140_plus,
        scores_180=counts.scores_180,
        highest_score=counts.highest_score,
    )


def calculate_match_stats(legs: Iterable[LegData]) -> MatchStats:
    """Summarise a player's legs in one match."""

    leg_list = tuple(legs)
    if not leg_list:
        return MatchStats()

    won = [leg for leg in leg_list if leg.won]
    total_darts = sum(leg.total_darts for leg in leg_list)
    best = min(won, key=lambda leg: leg.total_darts, default=None)
    worst = max(won, key=lambda leg: leg.total_darts, default=None)
    return MatchStats(
        total_legs=len(leg_list),
        legs_won=len(won),
        total_darts=total_darts,
        total_points=sum(leg.points_scored for leg in leg_list),
        win_percentage=percentage(len(won), len(leg_list)),
        average_darts_per_leg=round_stat(total_darts / len(leg_list)),
        best_leg=LegSummary(best.leg_number, best.total_darts) if best else None,
        worst_leg=LegSummary(worst.leg_number, worst.total_darts) if worst else None,
    )


def _pooled_average(games: Sequence[PlayerGameStats]) -> float:
    darts = sum(game.total_darts for game in games)
    points = sum(game.total_points for game in games)
    return points / darts if darts else 0.0


def calculate_season_stats(games: Iterable[PlayerGameStats]) -> SeasonStats:
    """Aggregate per-game statistics over a season."""

    game_list = tuple(games)
    if not game_list:
        return SeasonStats()

    averages = [game.average for game in game_list if game.average > 0]
    finishes = Counter(
        finish for game in game_list for finish in game.finish_positions
    )
    favourite = finishes.most_common(1)[0][0] if finishes else None
    overall = _pooled_average(game_list)
    return SeasonStats(
        games_played=len(game_list),
        games_won=sum(1 for game in game_list if game.game_won),
        win_percentage=percentage(
            sum(1 for game in game_list if game.game_won), len(game_list)
        ),
        total_darts=sum(game.total_darts for game in game_list),
        overall_average=round_stat(overall),
        overall_three_dart_average=round_stat(overall * 3),
        total_180s=sum(game.scores_180 for game in game_list),
        best_average=round_stat(max(averages, default=0.0)),
        worst_average=round_stat(min(averages, default=0.0)),
        checkout_percentage=percentage(
            sum(game.checkout_hits for game in game_list),
            sum(game.checkout_attempts for game in game_list),
        ),
        double_percentage=percentage(
            sum(game.double_hits for game in game_list),
            sum(game.double_attempts for game in game_list),
        ),
        highest_checkout=max((game.highest_checkout for game in game_list), default=0),
        favourite_finish=favourite,
    )


def calculate_form_guide(
    games: Sequence[PlayerGameStats],
    games_count: int = DEFAULT_FORM_GAMES,
    threshold: float = DEFAULT_TREND_THRESHOLD,
) -> FormGuide:
    """Describe recent form from games ordered oldest first.

    The trend compares the pooled three-dart average of the earlier half of
    the window (floor-divided) against the later half. A difference larger
    than ``threshold`` average points marks the trend as improving or
    declining; fewer than four games is always stable.
    """

    recent = tuple(games[-games_count:]) if games_count > 0 else ()
    if not recent:
        return FormGuide()

    form = tuple(game.game_won for game in recent)

    trend = FormTrend.STABLE
    if len(recent) >= MIN_TREND_GAMES:
        half = len(recent) // 2
        first = _pooled_average(recent[:half]) * 3
        second = _pooled_average(recent[half:]) * 3
        if second > first + threshold:
            trend = FormTrend.IMPROVING
        elif first > second + threshold:
            trend = FormTrend.DECLINING

    last = form[-1]
    streak = 0
    for result in reversed(form):
        if result != last:
            break
        streak += 1
    streak_type = StreakType.WINNING if last else StreakType.LOSING

    return FormGuide(
        recent_form=form,
        recent_win_percentage=percentage(sum(form), len(form)),
        recent_average=round_stat(_pooled_average(recent) * 3),
        trend=trend,
        streak_type=streak_type if streak > 1 else StreakType.NONE,
        streak_length=streak,
    )


def calculate_comparative_stats(
    player: PlayerGameStats, team_average: PlayerGameStats
) -> ComparativeStats:
    """Compare a game performance with the team's average line."""

    score = 0
    if player.three_dart_average >= 40:
        score += 2
    elif player.three_dart_average >= 30:
        score += 1
    if player.checkout_percentage >= 40:
        score += 2
    elif player.checkout_percentage >= 25:
        score += 1
    if player.double_percentage >= 35:
        score += 1

    if score >= 4:
        rating = ConsistencyRating.EXCELLENT
    elif score >= 3:
        rating = ConsistencyRating.GOOD
    elif score >= 2:
        rating = ConsistencyRating.AVERAGE
    else:
        rating = ConsistencyRating.BELOW_AVERAGE

    return ComparativeStats(
        average_comparison=round_stat(
            player.three_dart_average - team_average.three_dart_average
        ),
        win_rate_comparison=round_stat((100.0 if player.game_won else 0.0) - 50.0),
        checkout_comparison=round_stat(
            player.checkout_percentage - team_average.checkout_percentage
        ),
        double_comparison=round_stat(
            player.double_percentage - team_average.double_percentage
        ),
        consistency_rating=rating,
    )


def generate_insights(stats: PlayerGameStats) -> tuple[str, ...]:
    """Return short coaching notes for a game."""

    insights: list[str] = []
    if stats.total_darts == 0:
        return ()

    if stats.three_dart_average >= 45:
        insights.append("Excellent scoring average, you are hitting high scores consistently.")
    elif stats.three_dart_average >= 35:
        insights.append("Good scoring average, keep working on the big trebles.")
    elif stats.three_dart_average < 25:
        insights.append("Focus on scoring consistency for better results.")

    if stats.checkout_attempts:
        if stats.checkout_percentage >= 50:
            insights.append("Outstanding checkout percentage, clinical under pressure.")
        elif stats.checkout_percentage < 20:
            insights.append("Practice your finishing, the checkout rate could improve.")

    if stats.scores_180:
        plural = "s" if stats.scores_180 > 1 else ""
        insights.append(f"{stats.scores_180} maximum{plural}, excellent power scoring.")
    if stats.scores_140_plus and stats.scores_140_plus >= stats.total_darts / 30:
        insights.append("Frequent 140+ visits show great consistency.")

    if stats.double_attempts:
        if stats.double_percentage >= 40:
            insights.append("Strong double hitting, the accuracy is paying off.")
        elif stats.double_percentage < 25:
            insights.append("Work on double accuracy to improve your finishing.")

    return tuple(insights)


def format_stat(value: float, kind: StatKind) -> str:
    """Render a statistic for display.

    >>> format_stat(61.4, "average"), format_stat(37.5, "percentage"), format_stat(4.9, "count")
    ('61.40', '37.5%', '4')
    """

    if kind == "average":
        return fmt_average(value)
    if kind == "percentage":
        return fmt_percentage(value)
    if kind == "count":
        return fmt_count(value)
    return str(value)


__all__ = [
    "ComparativeStats",
    "ConsistencyRating",
    "FormGuide",
    "FormTrend",
    "LegStats",
    "LegSummary",
    "MatchStats",
    "SeasonStats",
    "StreakType",
    "TurnScoreCounts",
    "calculate_comparative_stats",
    "calculate_form_guide",
    "calculate_game_stats",
    "calculate_leg_stats",
    "calculate_match_stats",
    "calculate_season_stats",
    "checkout_value",
    "format_stat",
    "generate_insights",
    "group_turns",
    "percentage",
    "round_stat",
    "turn_score_counts",
]
