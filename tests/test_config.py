from __future__ import annotations

import pytest

from dart_scoring import config
from dart_scoring.config import ScoringSettings
from dart_scoring.domain.errors import ValidationError
from dart_scoring.infrastructure.storage import StorageBackend, StorageSettings
from services.match_service import MatchService


def test_scoring_settings_defaults() -> None:
    settings = ScoringSettings.from_env({})
    assert settings == ScoringSettings(
        starting_score=501, undo_limit=None, form_threshold=1.0, form_games=5
    )


def test_scoring_settings_from_env() -> None:
    settings = ScoringSettings.from_env(
        {
            "DARTS_STARTING_SCORE": "301",
            "DARTS_UNDO_LIMIT": "50",
            "DARTS_FORM_THRESHOLD": "2.5",
            "DARTS_FORM_GAMES": "8",
        }
    )
    assert settings.starting_score == 301
    assert settings.undo_limit == 50
    assert settings.form_threshold == 2.5
    assert settings.form_games == 8


@pytest.mark.parametrize(
    "environ",
    [
        {"DARTS_STARTING_SCORE": "400"},
        {"DARTS_STARTING_SCORE": "five"},
        {"DARTS_UNDO_LIMIT": "-3"},
        {"DARTS_FORM_GAMES": "0"},
        {"DARTS_FORM_THRESHOLD": "high"},
    ],
)
def test_scoring_settings_reject_bad_values(environ) -> None:
    with pytest.raises(ValidationError):
        ScoringSettings.from_env(environ)


def test_get_settings_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("DARTS_UNDO_LIMIT", "7")
    monkeypatch.setenv("DARTS_STARTING_SCORE", "701")
    config.get_settings.cache_clear()
    try:
        service = MatchService.from_settings()
        state = service.start("m-1", "Home", "Away")
        assert state.starting_score == 701
        assert config.get_settings().undo_limit == 7
    finally:
        config.get_settings.cache_clear()


def test_storage_settings_from_env() -> None:
    settings = StorageSettings.from_env(
        {"STORAGE_BACKEND": "SQL", "DB_URL": "sqlite+aiosqlite:///x.db", "DB_CREATE_SCHEMA": "yes"}
    )
    assert settings.backend is StorageBackend.SQL
    assert settings.require_db_url() == "sqlite+aiosqlite:///x.db"
    assert settings.create_schema

    default = StorageSettings.from_env({})
    assert default.backend is StorageBackend.MEMORY
    with pytest.raises(RuntimeError):
        default.require_db_url()

    with pytest.raises(ValueError):
        StorageSettings.from_env({"STORAGE_BACKEND": "sheets"})
