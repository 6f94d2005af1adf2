"""Match state machine driving turns, legs and matches with undo/redo."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence
from uuid import uuid4

from dart_scoring.config import ScoringSettings, get_settings
from dart_scoring.domain import checkout
from dart_scoring.domain.errors import GameStateError, ValidationError
from dart_scoring.domain.models import (
    DARTS_PER_TURN,
    STARTING_SCORES,
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
from dart_scoring.domain.statistics import LegStats, calculate_game_stats, calculate_leg_stats
from utils.logger import get_logger

__all__ = ["MatchService", "MatchSnapshot"]

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_dart_id() -> str:
    return uuid4().hex


@dataclass(slots=True, frozen=True)
class MatchSnapshot:
    """Complete, consistent state of a match at one instant.

    ``history`` holds committed darts of every leg; ``pending`` holds the
    darts of the turn in progress.
    """

    state: Optional[GameState] = None
    status: MatchStatus = MatchStatus.SETUP
    pending: tuple[DartThrow, ...] = ()
    history: tuple[DartThrow, ...] = ()
    legs: tuple[LegData, ...] = ()
    leg_start: LegStartStatus = LegStartStatus()
    leg_started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def turn_busted(self) -> bool:
        return any(dart.is_bust for dart in self.pending)


class MatchService:
    """Own the live state of one match.

    Every mutating call either applies completely or raises without touching
    state. Each applied mutation pushes the previous snapshot onto the undo
    stack and clears the redo stack.
    """

    def __init__(
        self,
        *,
        clock: Clock = _utcnow,
        undo_limit: int | None = None,
        id_factory: Callable[[], str] = _new_dart_id,
        default_starting_score: int = 501,
    ) -> None:
        if undo_limit is not None and undo_limit < 0:
            raise ValidationError("undo_limit must not be negative")
        self._clock = clock
        self._default_starting_score = default_starting_score
        self._undo_limit = undo_limit
        self._id_factory = id_factory
        self._snapshot = MatchSnapshot()
        self._undo: list[MatchSnapshot] = []
        self._redo: list[MatchSnapshot] = []

    @classmethod
    def from_settings(
        cls, settings: ScoringSettings | None = None, *, clock: Clock = _utcnow
    ) -> "MatchService":
        """Build a service using ``DARTS_*`` settings from the environment."""

        settings = settings or get_settings()
        return cls(
            clock=clock,
            undo_limit=settings.undo_limit,
            default_starting_score=settings.starting_score,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(
        self,
        match_id: str,
        home_name: str,
        away_name: str,
        *,
        starting_score: int | None = None,
        leg_format: LegFormat | str = LegFormat.SINGLE,
        game_type: GameType | str = GameType.LEAGUE,
        first_thrower: Side | str = Side.HOME,
        home_player_id: str | None = None,
        away_player_id: str | None = None,
    ) -> GameState:
        """Begin a new match and move to ``playing``."""

        if self._snapshot.status in (MatchStatus.PLAYING, MatchStatus.PAUSED):
            raise GameStateError("A match is already in progress")
        if not match_id or not match_id.strip():
            raise ValidationError("match_id must not be empty")
        if not home_name.strip() or not away_name.strip():
            raise ValidationError("Both sides must be named")
        if starting_score is None:
            starting_score = self._default_starting_score
        if starting_score not in STARTING_SCORES:
            raise ValidationError(
                f"Starting score must be one of {STARTING_SCORES}, got {starting_score}"
            )
        try:
            leg_format = LegFormat(leg_format)
            game_type = GameType(game_type)
            first_thrower = Side(first_thrower)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        state = GameState(
            match_id=match_id,
            home_name=home_name.strip(),
            away_name=away_name.strip(),
            starting_score=starting_score,
            leg_format=leg_format,
            game_type=game_type,
            home_score=starting_score,
            away_score=starting_score,
            current_thrower=first_thrower,
            leg_starter=first_thrower,
            home_player_id=home_player_id,
            away_player_id=away_player_id,
        )
        self._snapshot = MatchSnapshot(
            state=state,
            status=MatchStatus.PLAYING,
            leg_started_at=self._clock(),
        )
        self._undo.clear()
        self._redo.clear()
        logger.info(
            "Match started (%s, %s)",
            starting_score,
            leg_format.value,
            extra={"match_id": match_id, "event": "match_started", "leg": 1},
        )
        return state

    def pause(self) -> None:
        self._require(MatchStatus.PLAYING)
        self._snapshot = replace(self._snapshot, status=MatchStatus.PAUSED)
        self._log_event("match_paused")

    def resume(self) -> None:
        self._require(MatchStatus.PAUSED)
        self._snapshot = replace(self._snapshot, status=MatchStatus.PLAYING)
        self._log_event("match_resumed")

    def quit(self) -> None:
        """Abandon the match; it finishes without a winner."""

        if self._snapshot.status not in (MatchStatus.PLAYING, MatchStatus.PAUSED):
            raise GameStateError(f"Cannot quit a match in state '{self._snapshot.status.value}'")
        self._snapshot = replace(
            self._snapshot, status=MatchStatus.FINISHED, pending=(), finished_at=self._clock()
        )
        self._undo.clear()
        self._redo.clear()
        self._log_event("match_quit")

    # ------------------------------------------------------------------
    # Turn mutations
    # ------------------------------------------------------------------
    def add_dart(self, score: int, *, is_double: bool | None = None) -> Optional[DartThrow]:
        """Record one dart for the current thrower.

        ``is_double`` tells whether the dart landed in the double ring; when
        omitted it is inferred from the value. Returns ``None`` when the dart
        is ignored because the turn already holds three darts or has bust.
        """

        self._require(MatchStatus.PLAYING)
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValidationError(f"Dart score must be an integer, got {score!r}")
        if not checkout.is_valid_dart_value(score):
            raise ValidationError(f"{score} is not a scorable dart value")
        if is_double and not checkout.is_finishing_double(score):
            raise ValidationError(f"{score} cannot be scored with a double")
        if is_double is False and checkout.is_double_only(score):
            raise ValidationError(f"{score} can only be scored with a double")

        snapshot = self._snapshot
        state = self._live_state(snapshot)
        if len(snapshot.pending) >= DARTS_PER_TURN or snapshot.turn_busted:
            return None

        side = state.current_thrower
        before = self._remaining(snapshot)
        darts_left = DARTS_PER_TURN - len(snapshot.pending)
        after = before - score
        landed_double = is_double if is_double is not None else checkout.is_finishing_double(score)
        finished = after == 0 and landed_double
        bust = after < 2 and not finished

        dart = DartThrow(
            id=self._id_factory(),
            side=side,
            leg_number=state.current_leg,
            turn_number=state.turn_number,
            dart_number=len(snapshot.pending) + 1,
            score=score,
            running_score=after,
            is_double_attempt=checkout.is_finishing_double(before) or is_double is True,
            is_checkout_attempt=checkout.is_checkout_attempt(before, darts_left),
            checkout_successful=finished,
            is_bust=bust,
            timestamp=self._clock(),
            player_id=state.player_id_for(side),
        )

        leg_start = snapshot.leg_start
        if is_double is True and not leg_start.started(side):
            leg_start = leg_start.mark(side)

        pending = snapshot.pending + (dart,)
        updated = replace(
            snapshot,
            state=replace(state, darts_thrown=len(pending)),
            pending=pending,
            leg_start=leg_start,
        )
        if finished:
            updated = self._win_leg(updated, side)
        elif bust:
            logger.info(
                "Bust on %s",
                score,
                extra=self._extra("bust", side=side),
            )
        self._commit(updated)
        return dart

    def complete_turn(self) -> TurnData:
        """Close the current turn and pass the throw to the other side.

        A bust turn restores the pre-turn score but its darts stay in history
        flagged as bust.
        """

        self._require(MatchStatus.PLAYING)
        snapshot = self._snapshot
        state = self._live_state(snapshot)
        if not snapshot.pending:
            raise GameStateError("Cannot complete a turn without darts")

        side = state.current_thrower
        bust = snapshot.turn_busted
        if bust:
            darts = tuple(replace(dart, is_bust=True) for dart in snapshot.pending)
            new_state = state
        else:
            darts = snapshot.pending
            new_state = state.with_score(side, self._remaining(snapshot))

        turn = TurnData(
            leg_number=state.current_leg,
            turn_number=state.turn_number,
            darts=darts,
            bust=bust,
            side=side,
        )
        self._commit(
            replace(
                snapshot,
                state=replace(
                    new_state,
                    current_thrower=side.opponent,
                    turn_number=state.turn_number + 1,
                    darts_thrown=0,
                ),
                pending=(),
                history=snapshot.history + darts,
            )
        )
        return turn

    def clear_turn(self) -> None:
        """Discard the darts of the current turn without passing the throw."""

        self._require(MatchStatus.PLAYING)
        snapshot = self._snapshot
        if not snapshot.pending:
            return
        state = self._live_state(snapshot)
        self._commit(replace(snapshot, state=replace(state, darts_thrown=0), pending=()))

    def mark_started(self, side: Side | str) -> None:
        """Record that ``side`` has thrown its opening double this leg."""

        self._require(MatchStatus.PLAYING)
        side = Side(side)
        snapshot = self._snapshot
        if snapshot.leg_start.started(side):
            return
        self._commit(replace(snapshot, leg_start=snapshot.leg_start.mark(side)))

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        """Restore the snapshot taken before the last mutation."""

        self._require_history_access()
        if not self._undo:
            return False
        self._redo.append(self._snapshot)
        self._snapshot = self._undo.pop()
        self._log_event("undo")
        return True

    def redo(self) -> bool:
        """Re-apply the last undone mutation."""

        self._require_history_access()
        if not self._redo:
            return False
        self._push_undo(self._snapshot)
        self._snapshot = self._redo.pop()
        self._log_event("redo")
        return True

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def status(self) -> MatchStatus:
        return self._snapshot.status

    @property
    def state(self) -> Optional[GameState]:
        return self._snapshot.state

    @property
    def snapshot(self) -> MatchSnapshot:
        return self._snapshot

    @property
    def current_thrower(self) -> Optional[Side]:
        state = self._snapshot.state
        return state.current_thrower if state else None

    @property
    def current_remaining(self) -> int:
        if self._snapshot.state is None:
            return 0
        return self._remaining(self._snapshot)

    @property
    def darts_remaining(self) -> int:
        return max(0, DARTS_PER_TURN - len(self._snapshot.pending))

    @property
    def current_turn_total(self) -> int:
        return sum(dart.score for dart in self._snapshot.pending)

    @property
    def pending_darts(self) -> tuple[DartThrow, ...]:
        return self._snapshot.pending

    @property
    def dart_history(self) -> tuple[DartThrow, ...]:
        return self._snapshot.history

    @property
    def legs(self) -> tuple[LegData, ...]:
        return self._snapshot.legs

    @property
    def leg_start_status(self) -> LegStartStatus:
        return self._snapshot.leg_start

    @property
    def can_undo(self) -> bool:
        return bool(self._undo) and self._history_accessible()

    @property
    def can_redo(self) -> bool:
        return bool(self._redo) and self._history_accessible()

    @property
    def can_add_dart(self) -> bool:
        snapshot = self._snapshot
        return (
            snapshot.status is MatchStatus.PLAYING
            and len(snapshot.pending) < DARTS_PER_TURN
            and not snapshot.turn_busted
        )

    @property
    def can_complete_turn(self) -> bool:
        return self._snapshot.status is MatchStatus.PLAYING and bool(self._snapshot.pending)

    def has_started(self, side: Side | str) -> bool:
        return self._snapshot.leg_start.started(Side(side))

    def checkout_suggestions(self) -> list[CheckoutRoute]:
        """Recommended finishes for the current thrower."""

        if not self.can_add_dart:
            return []
        return checkout.recommended_finishes(self.current_remaining, self.darts_remaining)

    def current_leg_stats(self, side: Side | str | None = None) -> LegStats:
        """Live statistics of the current leg, pending darts included."""

        snapshot = self._snapshot
        state = snapshot.state
        if state is None:
            return LegStats(leg_number=1)
        side = Side(side) if side is not None else state.current_thrower
        darts = [dart for dart in snapshot.history + snapshot.pending if dart.side == side]
        return calculate_leg_stats(darts, state.current_leg)

    def game_stats(self, side: Side | str) -> PlayerGameStats:
        """Aggregate statistics of ``side`` over the committed darts of the match."""

        state = self._live_state(self._snapshot)
        side = Side(side)
        return calculate_game_stats(
            state.player_id_for(side) or f"{state.match_id}:{side.value}",
            state.name_for(side),
            [dart for dart in self._snapshot.history if dart.side == side],
            [leg for leg in self._snapshot.legs if leg.side == side],
            game_won=state.winner == side,
        )

    def game_result(self) -> Optional[GameResult]:
        """Outcome of the match once finished, ``None`` before that."""

        snapshot = self._snapshot
        state = snapshot.state
        if state is None or snapshot.status is not MatchStatus.FINISHED:
            return None
        return GameResult(
            match_id=state.match_id,
            home_name=state.home_name,
            away_name=state.away_name,
            starting_score=state.starting_score,
            leg_format=state.leg_format,
            game_type=state.game_type,
            home_legs_won=state.home_legs_won,
            away_legs_won=state.away_legs_won,
            winner=state.winner,
            completed_at=snapshot.finished_at or self._clock(),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _win_leg(self, snapshot: MatchSnapshot, winner: Side) -> MatchSnapshot:
        state = self._live_state(snapshot)
        ended_at = self._clock()
        history = snapshot.history + snapshot.pending
        state = state.with_score(winner, 0)
        if winner is Side.HOME:
            state = replace(state, home_legs_won=state.home_legs_won + 1)
        else:
            state = replace(state, away_legs_won=state.away_legs_won + 1)

        sealed = tuple(
            self._seal_leg(
                state,
                side,
                history,
                won=side == winner,
                started_at=snapshot.leg_started_at,
                ended_at=ended_at,
            )
            for side in (Side.HOME, Side.AWAY)
        )
        legs = snapshot.legs + sealed
        extra = self._extra("leg_won", side=winner, state=state)
        logger.info(
            "Leg %s won by %s side (%s-%s)",
            state.current_leg,
            winner.value,
            state.home_legs_won,
            state.away_legs_won,
            extra=extra,
        )

        if state.legs_won_for(winner) >= state.required_legs:
            logger.info(
                "Match won by %s side",
                winner.value,
                extra=self._extra("match_finished", side=winner, state=state),
            )
            return replace(
                snapshot,
                state=replace(state, game_complete=True, winner=winner, darts_thrown=0),
                status=MatchStatus.FINISHED,
                pending=(),
                history=history,
                legs=legs,
                finished_at=ended_at,
            )

        next_starter = state.leg_starter.opponent
        state = replace(
            state,
            current_leg=state.current_leg + 1,
            turn_number=1,
            home_score=state.starting_score,
            away_score=state.starting_score,
            current_thrower=next_starter,
            leg_starter=next_starter,
            darts_thrown=0,
        )
        return replace(
            snapshot,
            state=state,
            pending=(),
            history=history,
            legs=legs,
            leg_start=LegStartStatus(),
            leg_started_at=ended_at,
        )

    @staticmethod
    def _seal_leg(
        state: GameState,
        side: Side,
        history: Sequence[DartThrow],
        *,
        won: bool,
        started_at: Optional[datetime],
        ended_at: datetime,
    ) -> LegData:
        darts = tuple(
            dart for dart in history if dart.side == side and dart.leg_number == state.current_leg
        )
        return LegData(
            leg_number=state.current_leg,
            side=side,
            starting_score=state.starting_score,
            final_score=state.score_for(side),
            won=won,
            started_at=started_at or ended_at,
            darts=darts,
            ended_at=ended_at,
            player_id=state.player_id_for(side),
        )

    @staticmethod
    def _remaining(snapshot: MatchSnapshot) -> int:
        state = MatchService._live_state(snapshot)
        before = state.score_for(state.current_thrower)
        if snapshot.turn_busted:
            return before
        return before - sum(dart.score for dart in snapshot.pending)

    @staticmethod
    def _live_state(snapshot: MatchSnapshot) -> GameState:
        if snapshot.state is None:
            raise GameStateError("Match has not been started")
        return snapshot.state

    def _commit(self, snapshot: MatchSnapshot) -> None:
        self._push_undo(self._snapshot)
        self._redo.clear()
        self._snapshot = snapshot

    def _push_undo(self, snapshot: MatchSnapshot) -> None:
        if self._undo_limit == 0:
            return
        self._undo.append(snapshot)
        if self._undo_limit is not None and len(self._undo) > self._undo_limit:
            del self._undo[0]

    def _require(self, status: MatchStatus) -> None:
        current = self._snapshot.status
        if current is not status:
            raise GameStateError(
                f"Operation requires a {status.value} match, current state is '{current.value}'"
            )

    def _history_accessible(self) -> bool:
        snapshot = self._snapshot
        if snapshot.status is MatchStatus.PLAYING:
            return True
        return snapshot.status is MatchStatus.FINISHED and bool(
            snapshot.state and snapshot.state.game_complete
        )

    def _require_history_access(self) -> None:
        if self._snapshot.status is MatchStatus.PAUSED:
            raise GameStateError("Resume the match before undoing or redoing")
        if self._snapshot.status is MatchStatus.FINISHED and not self._history_accessible():
            raise GameStateError("An abandoned match cannot be reopened")

    def _extra(
        self,
        event: str,
        *,
        side: Side | None = None,
        state: GameState | None = None,
    ) -> dict[str, object]:
        state = state or self._snapshot.state
        return {
            "match_id": state.match_id if state else None,
            "leg": state.current_leg if state else None,
            "side": side.value if side else None,
            "event": event,
        }

    def _log_event(self, event: str) -> None:
        logger.info("Match %s", event.replace("_", " "), extra=self._extra(event))
