"""Factories for domain models used in tests."""

from .domain import DartThrowFactory, LegDataFactory, PlayerGameStatsFactory, turn_of

__all__ = [
    "DartThrowFactory",
    "LegDataFactory",
    "PlayerGameStatsFactory",
    "turn_of",
]
