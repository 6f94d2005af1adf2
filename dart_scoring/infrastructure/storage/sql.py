"""SQLAlchemy backed implementation of the storage facade."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from dart_scoring.application.ports.repositories import GameStatsRepo, LegsRepo, ResultsRepo
from dart_scoring.application.ports.storage import Storage
from infra.db import async_session_factory, create_engine, create_schema
from infra.db.repositories import SqlGameStatsRepo, SqlLegsRepo, SqlResultsRepo


class SqlStorage(Storage):
    """Storage facade powered by any async SQLAlchemy dialect."""

    def __init__(self, *, database_url: str, create_schema: bool = False) -> None:
        self._database_url = database_url
        self._create_schema = create_schema
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._legs_repo: SqlLegsRepo | None = None
        self._game_stats_repo: SqlGameStatsRepo | None = None
        self._results_repo: SqlResultsRepo | None = None

    async def init(self) -> None:
        self._engine = create_engine(self._database_url)
        if self._create_schema:
            await create_schema(self._engine)
        self._session_factory = async_session_factory(self._engine)
        self._legs_repo = SqlLegsRepo(self._session_factory)
        self._game_stats_repo = SqlGameStatsRepo(self._session_factory)
        self._results_repo = SqlResultsRepo(self._session_factory)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
        self._legs_repo = None
        self._game_stats_repo = None
        self._results_repo = None

    @property
    def legs(self) -> LegsRepo:
        if self._legs_repo is None:
            raise RuntimeError("Storage not initialised")
        return self._legs_repo

    @property
    def game_stats(self) -> GameStatsRepo:
        if self._game_stats_repo is None:
            raise RuntimeError("Storage not initialised")
        return self._game_stats_repo

    @property
    def results(self) -> ResultsRepo:
        if self._results_repo is None:
            raise RuntimeError("Storage not initialised")
        return self._results_repo

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Storage not initialised")
        return self._engine
