"""Persistence orchestration never interferes with the live match."""

from __future__ import annotations

import asyncio

import pytest

import services.tracking_service as tracking_module
from dart_scoring.config import ScoringSettings
from dart_scoring.domain.errors import PersistenceError
from dart_scoring.domain.models import MatchStatus, Side
from dart_scoring.domain.statistics import FormTrend
from dart_scoring.infrastructure.storage import MemoryStorage
from services.match_service import MatchService
from services.tracking_service import TrackingService, open_tracking_service
from tests.fakes import FailingStorage


def _play_leg(match: MatchService) -> None:
    for scores in ((60, 60, 60), (0, 0, 0), (60, 21)):
        for score in scores:
            match.add_dart(score)
        match.complete_turn()
    match.add_dart(0)
    match.complete_turn()
    match.add_dart(40)


def test_sync_finished_match_is_idempotent(match_factory) -> None:
    match = match_factory(starting_score=301)
    _play_leg(match)
    assert match.status is MatchStatus.FINISHED
    storage = MemoryStorage()
    service = TrackingService(storage)

    async def scenario():
        first = await service.sync_match(match)
        second = await service.sync_match(match)
        legs = await storage.legs.list_by_match("match-001")
        home = await storage.game_stats.get("match-001", Side.HOME)
        result = await storage.results.get("match-001")
        return first, second, legs, home, result

    first, second, legs, home, result = asyncio.run(scenario())

    for report in (first, second):
        assert report.ok
        assert report.legs_saved == 2
        assert report.stats_saved == 2
        assert report.result_saved
    assert set(legs) == set(match.legs)
    assert [leg.side for leg in legs] == [Side.AWAY, Side.HOME]
    assert home == match.game_stats(Side.HOME)
    assert result == match.game_result()


def _finished_match(clock, match_id: str, home_name: str) -> MatchService:
    match = MatchService(clock=clock)
    match.start(
        match_id,
        home_name,
        "Away Side",
        starting_score=301,
        home_player_id="player-home",
        away_player_id="player-away",
    )
    _play_leg(match)
    return match


def test_resyncing_an_older_match_keeps_history_order(clock) -> None:
    older = _finished_match(clock, "match-older", "Home Early")
    newer = _finished_match(clock, "match-newer", "Home Late")
    storage = MemoryStorage()
    service = TrackingService(storage)

    async def scenario():
        await service.sync_match(older)
        await service.sync_match(newer)
        before = await service.player_history("player-home")
        await service.sync_match(older)
        return before, await service.player_history("player-home")

    before, after = asyncio.run(scenario())

    expected = (older.game_stats(Side.HOME), newer.game_stats(Side.HOME))
    assert before == expected
    assert after == expected


def test_sync_in_progress_match_saves_sealed_legs_only(match_factory) -> None:
    match = match_factory(starting_score=301, leg_format="bo3")
    _play_leg(match)
    assert match.status is MatchStatus.PLAYING
    storage = MemoryStorage()

    report = asyncio.run(TrackingService(storage).sync_match(match))

    assert report.ok
    assert report.legs_saved == 2
    assert report.stats_saved == 0
    assert not report.result_saved
    assert asyncio.run(storage.results.get("match-001")) is None


def test_storage_failures_are_reported_not_raised(match_factory, monkeypatch) -> None:
    captured: list[tuple[BaseException, str | None]] = []
    monkeypatch.setattr(
        tracking_module,
        "capture_exception",
        lambda exc, match_id=None, operation=None: captured.append((exc, operation)),
    )
    match = match_factory(starting_score=301)
    _play_leg(match)
    snapshot = match.snapshot
    storage = FailingStorage(fail_legs={1})

    report = asyncio.run(TrackingService(storage).sync_match(match))

    assert not report.ok
    assert report.legs_saved == 0
    assert report.stats_saved == 0
    assert report.result_saved
    assert len(report.errors) == 4
    assert report.errors[0].startswith("leg 1 (home)")
    assert any(error.startswith("game stats (away)") for error in report.errors)
    assert len(captured) == 4
    assert [operation for _, operation in captured][:2] == ["leg 1 (home)", "leg 1 (away)"]
    assert match.snapshot is snapshot
    assert asyncio.run(storage.stored_result("match-001")) == match.game_result()


def test_sync_before_start_reports_error(clock) -> None:
    report = asyncio.run(TrackingService(MemoryStorage()).sync_match(MatchService(clock=clock)))
    assert not report.ok
    assert report.legs_saved == 0


def test_history_feeds_season_and_form(match_factory) -> None:
    storage = MemoryStorage()
    service = TrackingService(
        storage, settings=ScoringSettings(form_games=3, form_threshold=2.0)
    )

    async def scenario():
        match = match_factory(starting_score=301)
        _play_leg(match)
        await service.sync_match(match)
        return await service.season_stats("player-home"), await service.form_guide("player-home")

    season, form = asyncio.run(scenario())
    assert season.games_played == 1
    assert season.games_won == 1
    assert season.highest_checkout == 40
    assert form.recent_form == (True,)
    assert form.trend is FormTrend.STABLE


def test_player_history_failure_raises_persistence_error() -> None:
    service = TrackingService(FailingStorage())
    with pytest.raises(PersistenceError):
        asyncio.run(service.player_history("player-home"))


def test_open_tracking_service_uses_environment(monkeypatch) -> None:
    monkeypatch.delenv("SENTRY_DSN", raising=False)

    async def scenario():
        service = await open_tracking_service(
            {"STORAGE_BACKEND": "memory", "DARTS_FORM_GAMES": "3"}
        )
        return service, await service.player_history("nobody")

    service, history = asyncio.run(scenario())
    assert isinstance(service._storage, MemoryStorage)
    assert service._settings.form_games == 3
    assert history == ()
