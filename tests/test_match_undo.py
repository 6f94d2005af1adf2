"""Undo/redo snapshot semantics of the match state machine."""

from __future__ import annotations

from dart_scoring.domain.models import MatchStatus, Side
from services.match_service import MatchService


def test_undo_of_every_dart_restores_initial_snapshot(match: MatchService) -> None:
    initial = match.snapshot
    for score in (60, 19, 5):
        match.add_dart(score)
    match.complete_turn()
    for score in (20, 20):
        match.add_dart(score)
    after = match.snapshot

    for _ in range(6):
        assert match.undo()
    assert match.snapshot == initial
    assert not match.can_undo
    assert match.can_redo

    for _ in range(6):
        assert match.redo()
    assert match.snapshot == after
    assert not match.can_redo


def test_undo_and_redo_on_empty_stacks_are_no_ops(match: MatchService) -> None:
    before = match.snapshot
    assert match.undo() is False
    assert match.redo() is False
    assert match.snapshot is before


def test_new_mutation_clears_redo(match: MatchService) -> None:
    match.add_dart(60)
    match.add_dart(60)
    match.undo()
    assert match.can_redo
    match.add_dart(1)
    assert not match.can_redo
    assert [dart.score for dart in match.pending_darts] == [60, 1]


def test_undo_turn_completion_returns_throw(match: MatchService) -> None:
    match.add_dart(60)
    match.complete_turn()
    assert match.state.current_thrower is Side.AWAY

    match.undo()
    assert match.state.current_thrower is Side.HOME
    assert match.state.home_score == 501
    assert match.current_remaining == 441
    assert [dart.score for dart in match.pending_darts] == [60]
    assert match.dart_history == ()


def test_undo_bust_dart_reopens_turn(match_factory) -> None:
    match = match_factory(starting_score=301)
    for score in (60, 60, 60):
        match.add_dart(score)
    match.complete_turn()
    for score in (0, 0, 0):
        match.add_dart(score)
    match.complete_turn()
    match.add_dart(60)
    match.add_dart(60)
    assert not match.can_add_dart

    match.undo()
    assert match.can_add_dart
    assert match.current_remaining == 61


def test_undo_winning_dart_reopens_finished_match(match_factory) -> None:
    match = match_factory(starting_score=301)
    for scores in ((60, 60, 60), (0, 0, 0), (60, 21), (0, 0, 0)):
        for score in scores:
            match.add_dart(score)
        match.complete_turn()
    match.add_dart(40)
    assert match.status is MatchStatus.FINISHED
    assert match.can_undo

    assert match.undo()
    assert match.status is MatchStatus.PLAYING
    assert match.state.winner is None
    assert match.state.home_legs_won == 0
    assert match.legs == ()
    assert match.current_remaining == 40

    assert match.redo()
    assert match.status is MatchStatus.FINISHED
    assert match.state.winner is Side.HOME


def test_undo_limit_drops_oldest_snapshots(match_factory) -> None:
    match = match_factory(undo_limit=2)
    for score in (20, 20, 20):
        match.add_dart(score)
    match.complete_turn()

    assert match.undo()
    assert match.undo()
    assert not match.can_undo
    assert match.undo() is False
    assert [dart.score for dart in match.pending_darts] == [20, 20]


def test_zero_undo_limit_disables_history(match_factory) -> None:
    match = match_factory(undo_limit=0)
    match.add_dart(20)
    assert not match.can_undo
    assert match.undo() is False
