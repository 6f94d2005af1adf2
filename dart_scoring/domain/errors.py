"""Error taxonomy shared by the scoring core."""

from __future__ import annotations

__all__ = [
    "GameStateError",
    "PersistenceError",
    "ScoringError",
    "ValidationError",
]


class ScoringError(Exception):
    """Base class for scoring failures carrying a machine readable code."""

    code = "SCORING_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ValidationError(ScoringError, ValueError):
    """Caller supplied a value outside the recognised domain."""

    code = "VALIDATION_ERROR"


class GameStateError(ScoringError, RuntimeError):
    """Operation is not legal in the current match state."""

    code = "GAME_STATE_ERROR"


class PersistenceError(ScoringError):
    """Storage backend rejected or failed a write."""

    code = "PERSISTENCE_ERROR"
