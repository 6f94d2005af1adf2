"""Unit tests for :mod:`dart_scoring.domain.checkout`."""

from __future__ import annotations

import doctest

import pytest

from dart_scoring.domain import checkout


def test_doctests_pass() -> None:
    """Ensure doctests stay in sync with implementation."""

    results = doctest.testmod(checkout)
    assert results.failed == 0


def test_finishing_doubles_are_exactly_even_values_to_forty_and_bull() -> None:
    expected = set(range(2, 41, 2)) | {50}
    finishing = {value for value in range(-5, 200) if checkout.is_double_score(value)}
    assert finishing == expected
    assert len(checkout.FINISHING_VALUES) == 21


def test_double_only_values_have_no_single_or_treble() -> None:
    double_only = {value for value in range(0, 61) if checkout.is_double_only(value)}
    assert double_only == {22, 26, 28, 32, 34, 38, 40, 50}


@pytest.mark.parametrize("value", [23, 29, 31, 35, 41, 43, 44, 46, 47, 49, 52, 55, 58, 59, 61, -1])
def test_unscorable_values_are_rejected(value: int) -> None:
    assert not checkout.is_valid_dart_value(value)


def test_possible_flag_matches_buckets_for_every_score() -> None:
    for score in range(checkout.MIN_CHECKOUT, checkout.MAX_CHECKOUT + 1):
        data = checkout.checkout_data(score)
        assert data is not None
        has_route = bool(data.single_dart or data.two_dart or data.three_dart)
        assert data.possible is has_route
        assert checkout.can_checkout(score, 3) is has_route


def test_known_scores() -> None:
    assert checkout.can_checkout(170, 3)
    assert not checkout.can_checkout(169, 3)
    assert checkout.can_checkout(40, 1)
    assert checkout.possible_finishes(40, 1) == [(40,)]
    assert checkout.impossible_checkouts() == [159, 162, 163, 165, 166, 168, 169]


def test_routes_never_contain_a_miss_and_always_end_on_a_double() -> None:
    for score in range(checkout.MIN_CHECKOUT, checkout.MAX_CHECKOUT + 1):
        for route in checkout.possible_finishes(score, 3):
            assert sum(route) == score
            assert 0 not in route
            assert checkout.is_finishing_double(route[-1])
            assert all(checkout.is_valid_dart_value(dart) for dart in route)


def test_recommendations_are_ordered_by_darts_then_difficulty() -> None:
    for score in range(checkout.MIN_CHECKOUT, checkout.MAX_CHECKOUT + 1):
        routes = checkout.recommended_finishes(score, 3)
        assert len(routes) <= 5
        keys = [(len(route.darts), route.difficulty) for route in routes]
        assert keys == sorted(keys)


def test_candidate_caps_keep_the_easiest_route() -> None:
    for score in range(checkout.MIN_CHECKOUT, checkout.MAX_CHECKOUT + 1):
        data = checkout.checkout_data(score)
        assert data is not None
        if not data.possible:
            assert data.recommended == ()
            continue
        best = data.recommended[0]
        if data.single_dart:
            assert best.darts == data.single_dart[0]
        elif data.two_dart:
            assert len(best.darts) == 2
            assert best.difficulty == min(
                checkout.route_difficulty(route) for route in data.two_dart
            )
        else:
            assert len(best.darts) == 3
            assert best.difficulty == min(
                checkout.route_difficulty(route) for route in data.three_dart
            )


def test_recommended_finishes_respect_darts_remaining() -> None:
    routes = checkout.recommended_finishes(100, 2)
    assert [route.description for route in routes] == ["T20 → D20", "Bull → Bull"]
    assert [route.darts for route in routes] == [(60, 40), (50, 50)]
    assert checkout.recommended_finishes(100, 1) == []


def test_one_dart_route_ranks_ahead_of_longer_routes() -> None:
    routes = checkout.recommended_finishes(32, 3)
    assert routes[0].darts == (32,)
    assert routes[0].description == "D16"


def test_dart_counts_limit_buckets() -> None:
    assert not checkout.can_checkout(3, 1)
    assert checkout.can_checkout(3, 2)
    assert checkout.possible_finishes(3, 2) == [(1, 2)]
    assert checkout.possible_finishes(2, 3)[0] == (2,)


@pytest.mark.parametrize(
    ("score", "darts"),
    [(1, 3), (0, 3), (171, 3), (501, 3), (40, 0), (40, 4), (-2, 1)],
)
def test_out_of_range_queries_are_not_checkoutable(score: int, darts: int) -> None:
    assert checkout.can_checkout(score, darts) is False
    assert checkout.possible_finishes(score, darts) == []
    assert checkout.recommended_finishes(score, darts) == []


def test_checkout_data_outside_range_is_none() -> None:
    assert checkout.checkout_data(1) is None
    assert checkout.checkout_data(171) is None


def test_checkout_attempt_and_opportunity() -> None:
    assert checkout.is_checkout_attempt(2, 3)
    assert not checkout.is_checkout_attempt(1, 3)
    assert not checkout.is_checkout_attempt(61, 1)
    assert checkout.is_checkout_attempt(61, 2)
    assert checkout.is_checkout_opportunity(170)
    assert not checkout.is_checkout_opportunity(180)


def test_difficulty_weights_follow_segment_order() -> None:
    weights = [
        checkout.dart_difficulty(value)
        for value in (50, 60, 45, 38, 27, 25, 22, 4, 7)
    ]
    assert weights == [8, 7, 6, 5, 4, 3, 3, 2, 1]


def test_table_is_built_once() -> None:
    assert checkout.get_checkout_table() is checkout.get_checkout_table()
