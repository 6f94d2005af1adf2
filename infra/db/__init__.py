"""SQLAlchemy models and session utilities for SQL storage."""

from .models import Base, DartThrowRecord, GameResultRecord, GameStatsRecord, LegRecord
from .session import async_session_factory, create_engine, create_schema

__all__ = [
    "Base",
    "create_engine",
    "create_schema",
    "async_session_factory",
    "DartThrowRecord",
    "GameResultRecord",
    "GameStatsRecord",
    "LegRecord",
]
