"""Checkout route engine for double-out darts.

The module enumerates every finishing combination of one, two or three darts
for remaining scores between 2 and 170. Routes are built from the alphabet of
values a single dart can score and must end on a double or the double bull.
The table is computed once on first use and cached for the process lifetime,
after which every query is a dictionary lookup.

Scores or dart counts outside the supported range are simply not
checkoutable: the functions return ``False`` or empty results instead of
raising, because such values are reached constantly during normal play (a
player on 501 has no checkout).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Sequence

from dart_scoring.domain.models import CheckoutData, CheckoutRoute

SINGLE_DART_VALUES: tuple[int, ...] = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20,
    21, 22, 24, 25, 26, 27, 28, 30, 32, 33, 34, 36, 38, 39, 40, 42, 45, 48, 50,
    51, 54, 57, 60,
)
"""Every value one dart can score, a miss included."""

FINISHING_VALUES: tuple[int, ...] = tuple(range(2, 41, 2)) + (50,)
"""Doubles 1-20 and the double bull."""

MIN_CHECKOUT = 2
MAX_CHECKOUT = 170
MAX_DARTS = 3

MAX_RECOMMENDED = 5
TWO_DART_CANDIDATES = 10
THREE_DART_CANDIDATES = 5

_VALID_VALUES = frozenset(SINGLE_DART_VALUES)
_FINISHING_SET = frozenset(FINISHING_VALUES)
_SCORING_VALUES = tuple(value for value in SINGLE_DART_VALUES if value > 0)

Route = tuple[int, ...]


def is_valid_dart_value(value: int) -> bool:
    """Return ``True`` if a single dart can score ``value``.

    >>> is_valid_dart_value(60), is_valid_dart_value(23), is_valid_dart_value(0)
    (True, False, True)
    """

    return value in _VALID_VALUES


def is_finishing_double(value: int) -> bool:
    """Return ``True`` for doubles 2-40 and the double bull.

    >>> [v for v in (1, 2, 25, 38, 40, 42, 50) if is_finishing_double(v)]
    [2, 38, 40, 50]
    """

    return value in _FINISHING_SET


is_double_score = is_finishing_double

_SINGLE_OR_TREBLE = frozenset(range(1, 21)) | {25} | frozenset(range(3, 61, 3))


def is_double_only(value: int) -> bool:
    """Return ``True`` when ``value`` can only be hit in the double ring.

    >>> [v for v in (20, 22, 24, 36, 38, 50) if is_double_only(v)]
    [22, 38, 50]
    """

    return value in _FINISHING_SET and value not in _SINGLE_OR_TREBLE


def dart_difficulty(value: int) -> int:
    """Return the hand-tuned difficulty weight of aiming at ``value``.

    >>> dart_difficulty(50), dart_difficulty(60), dart_difficulty(32), dart_difficulty(5)
    (8, 7, 5, 1)
    """

    if value == 50:
        return 8
    if value == 25:
        return 3
    if value >= 57:
        return 7
    if value >= 42 and value % 3 == 0:
        return 6
    if value >= 21 and value % 3 == 0:
        return 4
    if value >= 32 and value % 2 == 0:
        return 5
    if value >= 20 and value % 2 == 0:
        return 3
    if value >= 2 and value % 2 == 0:
        return 2
    return 1


def route_difficulty(darts: Iterable[int]) -> int:
    """Sum of per-dart difficulty weights."""

    return sum(dart_difficulty(value) for value in darts)


def format_dart(value: int) -> str:
    """Return a board label for a dart value.

    Ambiguous values resolve to doubles first, then trebles.

    >>> [format_dart(v) for v in (50, 25, 0, 32, 60, 7)]
    ['Bull', 'S25', 'Miss', 'D16', 'T20', 'S7']
    """

    if value == 50:
        return "Bull"
    if value == 25:
        return "S25"
    if value == 0:
        return "Miss"
    if 0 < value <= 40 and value % 2 == 0:
        return f"D{value // 2}"
    if 20 < value <= 60 and value % 3 == 0:
        return f"T{value // 3}"
    return f"S{value}"


def format_route(darts: Sequence[int]) -> str:
    """Join dart labels into a readable route.

    >>> format_route((60, 60, 50))
    'T20 → T20 → Bull'
    """

    return " → ".join(format_dart(value) for value in darts)


def _easiest(routes: Sequence[Route], limit: int) -> list[Route]:
    return sorted(routes, key=route_difficulty)[:limit]


def _rank_routes(
    single: Sequence[Route], two: Sequence[Route], three: Sequence[Route]
) -> tuple[CheckoutRoute, ...]:
    candidates = [
        *single,
        *_easiest(two, TWO_DART_CANDIDATES),
        *_easiest(three, THREE_DART_CANDIDATES),
    ]
    routes = [
        CheckoutRoute(
            darts=darts,
            difficulty=route_difficulty(darts),
            description=format_route(darts),
        )
        for darts in candidates
    ]
    routes.sort(key=lambda route: (len(route.darts), route.difficulty))
    return tuple(routes[:MAX_RECOMMENDED])


def _build_checkout(target: int) -> CheckoutData:
    single: tuple[Route, ...] = ((target,),) if target in _FINISHING_SET else ()
    two = tuple(
        (first, target - first)
        for first in _SCORING_VALUES
        if first < target and target - first in _FINISHING_SET
    )
    three = tuple(
        (first, second, target - first - second)
        for first in _SCORING_VALUES
        if first < target
        for second in _SCORING_VALUES
        if second < target - first and target - first - second in _FINISHING_SET
    )
    return CheckoutData(
        score=target,
        possible=bool(single or two or three),
        single_dart=single,
        two_dart=two,
        three_dart=three,
        recommended=_rank_routes(single, two, three),
    )


class CheckoutTable:
    """Precomputed checkout data for every score from 2 to 170."""

    def __init__(self) -> None:
        self._data: dict[int, CheckoutData] = {
            score: _build_checkout(score)
            for score in range(MIN_CHECKOUT, MAX_CHECKOUT + 1)
        }

    def get(self, score: int) -> CheckoutData | None:
        return self._data.get(score)

    def can_checkout(self, score: int, darts_remaining: int) -> bool:
        if not MIN_CHECKOUT <= score <= MAX_CHECKOUT:
            return False
        if not 1 <= darts_remaining <= MAX_DARTS:
            return False
        data = self._data[score]
        if darts_remaining == 1:
            return bool(data.single_dart)
        if darts_remaining == 2:
            return bool(data.single_dart or data.two_dart)
        return data.possible

    def possible_finishes(self, score: int, darts_remaining: int) -> list[Route]:
        if not self.can_checkout(score, darts_remaining):
            return []
        data = self._data[score]
        buckets = (data.single_dart, data.two_dart, data.three_dart)
        return [route for bucket in buckets[:darts_remaining] for route in bucket]

    def recommended_finishes(
        self, score: int, darts_remaining: int
    ) -> list[CheckoutRoute]:
        if not self.can_checkout(score, darts_remaining):
            return []
        return [
            route
            for route in self._data[score].recommended
            if len(route.darts) <= darts_remaining
        ]

    def impossible(self) -> list[int]:
        return [score for score, data in self._data.items() if not data.possible]


@lru_cache(maxsize=1)
def get_checkout_table() -> CheckoutTable:
    """Return the process-wide checkout table, building it on first use."""

    return CheckoutTable()


def checkout_data(score: int) -> CheckoutData | None:
    """Return precomputed routes for ``score`` or ``None`` outside 2-170."""

    return get_checkout_table().get(score)


def can_checkout(score: int, darts_remaining: int) -> bool:
    """Return whether ``score`` can be finished with ``darts_remaining`` darts.

    >>> can_checkout(40, 1), can_checkout(170, 3), can_checkout(169, 3)
    (True, True, False)
    >>> can_checkout(1, 3), can_checkout(501, 3), can_checkout(40, 4)
    (False, False, False)
    """

    return get_checkout_table().can_checkout(score, darts_remaining)


def possible_finishes(score: int, darts_remaining: int) -> list[Route]:
    """Return every finishing combination usable within ``darts_remaining``.

    >>> possible_finishes(4, 2)
    [(4,), (2, 2)]
    >>> possible_finishes(3, 1)
    []
    """

    return get_checkout_table().possible_finishes(score, darts_remaining)


def recommended_finishes(score: int, darts_remaining: int) -> list[CheckoutRoute]:
    """Return up to five ranked routes that fit in ``darts_remaining``.

    >>> [route.description for route in recommended_finishes(170, 3)]
    ['T20 → T20 → Bull']
    >>> recommended_finishes(170, 2)
    []
    """

    return get_checkout_table().recommended_finishes(score, darts_remaining)


def is_checkout_attempt(score_before_throw: int, darts_remaining: int) -> bool:
    """Return whether a dart thrown now counts as a checkout attempt.

    ``darts_remaining`` includes the dart about to be thrown.

    >>> is_checkout_attempt(100, 1), is_checkout_attempt(100, 2)
    (False, True)
    """

    return can_checkout(score_before_throw, darts_remaining)


def is_checkout_opportunity(score: int) -> bool:
    """Return whether ``score`` can be finished with a full turn."""

    return can_checkout(score, MAX_DARTS)


def impossible_checkouts() -> list[int]:
    """Return scores in 2-170 that no three darts can finish.

    >>> impossible_checkouts()
    [159, 162, 163, 165, 166, 168, 169]
    """

    return get_checkout_table().impossible()


__all__ = [
    "FINISHING_VALUES",
    "MAX_CHECKOUT",
    "MIN_CHECKOUT",
    "SINGLE_DART_VALUES",
    "CheckoutTable",
    "can_checkout",
    "checkout_data",
    "dart_difficulty",
    "format_dart",
    "format_route",
    "get_checkout_table",
    "impossible_checkouts",
    "is_checkout_attempt",
    "is_checkout_opportunity",
    "is_double_only",
    "is_double_score",
    "is_finishing_double",
    "is_valid_dart_value",
    "possible_finishes",
    "recommended_finishes",
    "route_difficulty",
]
