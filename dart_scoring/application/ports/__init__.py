"""Ports define the contracts between the scoring core and storage adapters."""

from .repositories import GameStatsRepo, LegsRepo, ResultsRepo
from .storage import Storage

__all__ = [
    "GameStatsRepo",
    "LegsRepo",
    "ResultsRepo",
    "Storage",
]
