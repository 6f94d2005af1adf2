"""In-memory fakes for external integrations used in tests."""

from .storage import FailingStorage

__all__ = ["FailingStorage"]
