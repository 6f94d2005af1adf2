"""Configuration helpers for selecting storage backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class StorageBackend(str, Enum):
    """Supported storage backends for match repositories."""

    MEMORY = "memory"
    SQL = "sql"


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class StorageSettings:
    """Strongly-typed settings for storage layer wiring."""

    backend: StorageBackend = StorageBackend.MEMORY
    db_url: str | None = None
    create_schema: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StorageSettings":
        """Build settings instance from environment variables."""

        data = os.environ if environ is None else environ
        backend_raw = (data.get("STORAGE_BACKEND") or StorageBackend.MEMORY.value).lower()
        try:
            backend = StorageBackend(backend_raw)
        except ValueError as exc:
            raise ValueError(
                f"Unsupported STORAGE_BACKEND '{backend_raw}'. Use 'memory' or 'sql'."
            ) from exc

        db_url = data.get("DB_URL") or None
        create_schema = (data.get("DB_CREATE_SCHEMA") or "").strip().lower() in _TRUTHY
        return cls(backend=backend, db_url=db_url, create_schema=create_schema)

    def require_db_url(self) -> str:
        """Return SQL connection string ensuring it is present."""

        if not self.db_url:
            raise RuntimeError("DB_URL must be configured to use the SQL storage backend.")
        return self.db_url
