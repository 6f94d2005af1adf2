"""Runtime settings for the scoring engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

from dotenv import load_dotenv

from dart_scoring.domain.errors import ValidationError
from dart_scoring.domain.models import STARTING_SCORES

__all__ = ["ScoringSettings", "get_settings"]


def _int_or_none(raw: str | None, name: str) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer, got {raw!r}") from exc


def _float_or_none(raw: str | None, name: str) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(slots=True, frozen=True)
class ScoringSettings:
    """Tunables for the match engine and form analysis.

    ``undo_limit`` of ``None`` keeps every snapshot for the whole match.
    """

    starting_score: int = 501
    undo_limit: Optional[int] = None
    form_threshold: float = 1.0
    form_games: int = 5

    def __post_init__(self) -> None:
        if self.starting_score not in STARTING_SCORES:
            raise ValidationError(
                f"DARTS_STARTING_SCORE must be one of {STARTING_SCORES}, got {self.starting_score}"
            )
        if self.undo_limit is not None and self.undo_limit < 0:
            raise ValidationError("DARTS_UNDO_LIMIT must not be negative")
        if self.form_threshold < 0:
            raise ValidationError("DARTS_FORM_THRESHOLD must not be negative")
        if self.form_games < 1:
            raise ValidationError("DARTS_FORM_GAMES must be at least 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ScoringSettings":
        """Build settings from environment variables, falling back to defaults."""

        data = os.environ if environ is None else environ
        starting_score = _int_or_none(data.get("DARTS_STARTING_SCORE"), "DARTS_STARTING_SCORE")
        undo_limit = _int_or_none(data.get("DARTS_UNDO_LIMIT"), "DARTS_UNDO_LIMIT")
        form_threshold = _float_or_none(data.get("DARTS_FORM_THRESHOLD"), "DARTS_FORM_THRESHOLD")
        form_games = _int_or_none(data.get("DARTS_FORM_GAMES"), "DARTS_FORM_GAMES")
        return cls(
            starting_score=starting_score if starting_score is not None else 501,
            undo_limit=undo_limit,
            form_threshold=form_threshold if form_threshold is not None else 1.0,
            form_games=form_games if form_games is not None else 5,
        )


@lru_cache(maxsize=1)
def get_settings() -> ScoringSettings:
    """Return process-wide settings, reading ``.env`` once."""

    load_dotenv()
    return ScoringSettings.from_env()
