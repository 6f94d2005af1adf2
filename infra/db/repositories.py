"""SQLAlchemy-based repository implementations."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from dart_scoring.application.ports.repositories import GameStatsRepo, LegsRepo, ResultsRepo
from dart_scoring.domain.models import (
    DartThrow,
    GameResult,
    GameType,
    LegData,
    LegFormat,
    PlayerGameStats,
    Side,
)

from .models import DartThrowRecord, GameResultRecord, GameStatsRecord, LegRecord


def _ensure_tz(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _optional_tz(value: datetime | None) -> Optional[datetime]:
    return _ensure_tz(value) if value is not None else None


class SqlLegsRepo(LegsRepo):
    """Leg repository backed by SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def upsert(self, match_id: str, leg: LegData) -> LegData:
        async with self._session_factory() as session:
            async with session.begin():
                record = await session.scalar(
                    select(LegRecord)
                    .where(
                        LegRecord.match_id == match_id,
                        LegRecord.leg_number == leg.leg_number,
                        LegRecord.side == leg.side.value,
                    )
                    .options(selectinload(LegRecord.darts))
                )
                if record is None:
                    record = LegRecord(
                        match_id=match_id, leg_number=leg.leg_number, side=leg.side.value
                    )
                    session.add(record)
                record.player_id = leg.player_id
                record.starting_score = leg.starting_score
                record.final_score = leg.final_score
                record.won = leg.won
                record.started_at = _ensure_tz(leg.started_at)
                record.ended_at = _optional_tz(leg.ended_at)

                # delete-orphan cascade drops the previous darts of this leg.
                record.darts = [
                    _dart_to_record(position, dart) for position, dart in enumerate(leg.darts)
                ]
        return leg

    async def list_by_match(self, match_id: str) -> Sequence[LegData]:
        stmt = (
            select(LegRecord)
            .where(LegRecord.match_id == match_id)
            .options(selectinload(LegRecord.darts))
            .order_by(LegRecord.leg_number, LegRecord.side)
        )
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            return tuple(_leg_from_record(row) for row in result)


class SqlGameStatsRepo(GameStatsRepo):
    """Game statistics repository backed by SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def upsert(
        self, match_id: str, side: Side, stats: PlayerGameStats, *, played_at: datetime
    ) -> PlayerGameStats:
        async with self._session_factory() as session:
            async with session.begin():
                existing = await session.get(GameStatsRecord, (match_id, side.value))
                if existing is not None:
                    played_at = existing.played_at
                await session.merge(_stats_to_record(match_id, side, stats, played_at))
        return stats

    async def get(self, match_id: str, side: Side) -> Optional[PlayerGameStats]:
        async with self._session_factory() as session:
            record = await session.get(GameStatsRecord, (match_id, side.value))
            return _stats_from_record(record) if record else None

    async def list_by_player(self, player_id: str) -> Sequence[PlayerGameStats]:
        stmt = (
            select(GameStatsRecord)
            .where(GameStatsRecord.player_id == player_id)
            .order_by(GameStatsRecord.played_at, GameStatsRecord.match_id)
        )
        async with self._session_factory() as session:
            result = await session.scalars(stmt)
            return tuple(_stats_from_record(row) for row in result)


class SqlResultsRepo(ResultsRepo):
    """Match result repository backed by SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def upsert(self, result: GameResult) -> GameResult:
        async with self._session_factory() as session:
            async with session.begin():
                await session.merge(_result_to_record(result))
        return result

    async def get(self, match_id: str) -> Optional[GameResult]:
        async with self._session_factory() as session:
            record = await session.get(GameResultRecord, match_id)
            return _result_from_record(record) if record else None


def _dart_to_record(position: int, dart: DartThrow) -> DartThrowRecord:
    return DartThrowRecord(
        position=position,
        dart_id=dart.id,
        turn_number=dart.turn_number,
        dart_number=dart.dart_number,
        score=dart.score,
        running_score=dart.running_score,
        is_double_attempt=dart.is_double_attempt,
        is_checkout_attempt=dart.is_checkout_attempt,
        checkout_successful=dart.checkout_successful,
        is_bust=dart.is_bust,
        thrown_at=_ensure_tz(dart.timestamp),
        player_id=dart.player_id,
    )


def _dart_from_record(record: DartThrowRecord) -> DartThrow:
    return DartThrow(
        id=record.dart_id,
        side=Side(record.side),
        leg_number=record.leg_number,
        turn_number=record.turn_number,
        dart_number=record.dart_number,
        score=record.score,
        running_score=record.running_score,
        is_double_attempt=record.is_double_attempt,
        is_checkout_attempt=record.is_checkout_attempt,
        checkout_successful=record.checkout_successful,
        is_bust=record.is_bust,
        timestamp=_ensure_tz(record.thrown_at),
        player_id=record.player_id,
    )


def _leg_from_record(record: LegRecord) -> LegData:
    darts = tuple(_dart_from_record(row) for row in sorted(record.darts, key=lambda d: d.position))
    return LegData(
        leg_number=record.leg_number,
        side=Side(record.side),
        starting_score=record.starting_score,
        final_score=record.final_score,
        won=record.won,
        started_at=_ensure_tz(record.started_at),
        darts=darts,
        ended_at=_optional_tz(record.ended_at),
        player_id=record.player_id,
    )


def _stats_to_record(
    match_id: str, side: Side, stats: PlayerGameStats, played_at: datetime
) -> GameStatsRecord:
    return GameStatsRecord(
        match_id=match_id,
        side=side.value,
        player_id=stats.player_id,
        player_name=stats.player_name,
        game_won=stats.game_won,
        legs_played=stats.legs_played,
        legs_won=stats.legs_won,
        total_darts=stats.total_darts,
        total_points=stats.total_points,
        average=stats.average,
        three_dart_average=stats.three_dart_average,
        scores_80_plus=stats.scores_80_plus,
        scores_100_plus=stats.scores_100_plus,
        scores_140_plus=stats.scores_140_plus,
        scores_180=stats.scores_180,
        double_attempts=stats.double_attempts,
        double_hits=stats.double_hits,
        double_percentage=stats.double_percentage,
        checkout_attempts=stats.checkout_attempts,
        checkout_hits=stats.checkout_hits,
        checkout_percentage=stats.checkout_percentage,
        highest_checkout=stats.highest_checkout,
        highest_score=stats.highest_score,
        finish_positions=list(stats.finish_positions),
        played_at=_ensure_tz(played_at),
    )


def _stats_from_record(record: GameStatsRecord) -> PlayerGameStats:
    return PlayerGameStats(
        player_id=record.player_id,
        player_name=record.player_name,
        game_won=record.game_won,
        legs_played=record.legs_played,
        legs_won=record.legs_won,
        total_darts=record.total_darts,
        total_points=record.total_points,
        average=record.average,
        three_dart_average=record.three_dart_average,
        scores_80_plus=record.scores_80_plus,
        scores_100_plus=record.scores_100_plus,
        scores_140_plus=record.scores_140_plus,
        scores_180=record.scores_180,
        double_attempts=record.double_attempts,
        double_hits=record.double_hits,
        double_percentage=record.double_percentage,
        checkout_attempts=record.checkout_attempts,
        checkout_hits=record.checkout_hits,
        checkout_percentage=record.checkout_percentage,
        highest_checkout=record.highest_checkout,
        highest_score=record.highest_score,
        finish_positions=tuple(record.finish_positions or ()),
    )


def _result_to_record(result: GameResult) -> GameResultRecord:
    return GameResultRecord(
        match_id=result.match_id,
        home_name=result.home_name,
        away_name=result.away_name,
        starting_score=result.starting_score,
        leg_format=result.leg_format.value,
        game_type=result.game_type.value,
        home_legs_won=result.home_legs_won,
        away_legs_won=result.away_legs_won,
        winner=result.winner.value if result.winner else None,
        completed_at=_ensure_tz(result.completed_at),
    )


def _result_from_record(record: GameResultRecord) -> GameResult:
    return GameResult(
        match_id=record.match_id,
        home_name=record.home_name,
        away_name=record.away_name,
        starting_score=record.starting_score,
        leg_format=LegFormat(record.leg_format),
        game_type=GameType(record.game_type),
        home_legs_won=record.home_legs_won,
        away_legs_won=record.away_legs_won,
        winner=Side(record.winner) if record.winner else None,
        completed_at=_ensure_tz(record.completed_at),
    )
