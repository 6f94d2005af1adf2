"""Domain layer with scoring entities, rules and invariants."""

from . import checkout, errors, models, statistics

__all__ = ["checkout", "errors", "models", "statistics"]
