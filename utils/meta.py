"""Metadata constants for the scoring core."""

from __future__ import annotations

from typing import Final

APP_VERSION: Final[str] = "0.1.0"
"""Current package version used for telemetry and observability tags."""
