"""Persist finished match data without coupling the match to storage health."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping

from dart_scoring.application.ports.storage import Storage
from dart_scoring.config import ScoringSettings, get_settings
from dart_scoring.domain.errors import PersistenceError
from dart_scoring.domain.models import PlayerGameStats, Side
from dart_scoring.domain.statistics import (
    FormGuide,
    SeasonStats,
    calculate_form_guide,
    calculate_season_stats,
)
from dart_scoring.infrastructure.storage import StorageSettings, create_storage
from services.match_service import MatchService
from utils.logger import get_logger
from utils.sentry import capture_exception, init_sentry

__all__ = ["SyncReport", "TrackingService", "open_tracking_service"]

logger = get_logger(__name__)


@dataclass(slots=True)
class SyncReport:
    """Outcome of one persistence attempt; ``errors`` is empty on success."""

    match_id: str
    legs_saved: int = 0
    stats_saved: int = 0
    result_saved: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class TrackingService:
    """Write sealed legs, per-side stats and results to a storage backend.

    Failures never propagate: they are logged, reported to Sentry and
    returned in the :class:`SyncReport` so the caller can retry later.
    Every write is an upsert, so repeating a sync is harmless.
    """

    def __init__(self, storage: Storage, *, settings: ScoringSettings | None = None) -> None:
        self._storage = storage
        self._settings = settings or ScoringSettings()

    async def sync_match(self, match: MatchService) -> SyncReport:
        state = match.state
        if state is None:
            return SyncReport(match_id="", errors=["Match has not been started"])

        report = SyncReport(match_id=state.match_id)
        for leg in match.legs:
            if await self._attempt(
                report,
                f"leg {leg.leg_number} ({leg.side.value})",
                lambda leg=leg: self._storage.legs.upsert(state.match_id, leg),
            ):
                report.legs_saved += 1

        result = match.game_result()
        if result is None:
            return report

        # Player history is ordered by when the match ended, not by when it was written.
        for side in (Side.HOME, Side.AWAY):
            stats = match.game_stats(side)
            if await self._attempt(
                report,
                f"game stats ({side.value})",
                lambda side=side, stats=stats: self._storage.game_stats.upsert(
                    state.match_id, side, stats, played_at=result.completed_at
                ),
            ):
                report.stats_saved += 1

        report.result_saved = await self._attempt(
            report, "result", lambda: self._storage.results.upsert(result)
        )

        if report.ok:
            logger.info(
                "Match persisted: %s legs, %s stat rows",
                report.legs_saved,
                report.stats_saved,
                extra={"match_id": state.match_id, "event": "match_synced"},
            )
        return report

    async def player_history(self, player_id: str) -> tuple[PlayerGameStats, ...]:
        """Stored games of ``player_id``, oldest first."""

        try:
            games = await self._storage.game_stats.list_by_player(player_id)
        except Exception as exc:
            raise PersistenceError(f"Failed to load games for player: {exc}") from exc
        return tuple(games)

    async def season_stats(self, player_id: str) -> SeasonStats:
        return calculate_season_stats(await self.player_history(player_id))

    async def form_guide(self, player_id: str) -> FormGuide:
        return calculate_form_guide(
            await self.player_history(player_id),
            games_count=self._settings.form_games,
            threshold=self._settings.form_threshold,
        )

    async def _attempt(
        self,
        report: SyncReport,
        label: str,
        write: Callable[[], Awaitable[object]],
    ) -> bool:
        try:
            await write()
        except Exception as exc:  # noqa: BLE001 - storage errors are reported, not raised
            report.errors.append(f"{label}: {exc}")
            logger.warning(
                "Failed to persist %s: %s",
                label,
                exc,
                extra={"match_id": report.match_id, "event": "sync_failed"},
            )
            capture_exception(exc, match_id=report.match_id, operation=label)
            return False
        return True


async def open_tracking_service(environ: Mapping[str, str] | None = None) -> TrackingService:
    """Initialise error reporting and storage, then build a tracking service.

    With ``environ`` omitted the process environment (and ``.env``) is used.
    The caller owns the storage and should ``close()`` it on shutdown.
    """

    init_sentry()
    settings = get_settings() if environ is None else ScoringSettings.from_env(environ)
    storage = await create_storage(StorageSettings.from_env(environ))
    logger.info(
        "Tracking storage ready: %s",
        type(storage).__name__,
        extra={"event": "storage_ready"},
    )
    return TrackingService(storage, settings=settings)
