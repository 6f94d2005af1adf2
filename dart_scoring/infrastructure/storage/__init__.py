"""Storage facade wiring for in-memory and SQL backends."""

from __future__ import annotations

from dart_scoring.application.ports.storage import Storage

from .config import StorageBackend, StorageSettings
from .memory import MemoryStorage
from .sql import SqlStorage

__all__ = [
    "StorageBackend",
    "StorageSettings",
    "MemoryStorage",
    "SqlStorage",
    "create_storage",
]


async def create_storage(settings: StorageSettings) -> Storage:
    """Instantiate storage backend based on provided settings."""

    if settings.backend == StorageBackend.MEMORY:
        storage: Storage = MemoryStorage()
    elif settings.backend == StorageBackend.SQL:
        storage = SqlStorage(
            database_url=settings.require_db_url(),
            create_schema=settings.create_schema,
        )
    else:  # pragma: no cover - exhaustive enum
        raise ValueError(f"Unsupported storage backend: {settings.backend}")

    await storage.init()
    return storage
