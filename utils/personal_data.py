"""Helpers for anonymising players in logs and telemetry.

Player ids and names are replaced by short stable digests so events about the
same player can still be correlated.
"""

from __future__ import annotations

import hashlib
from typing import Any

__all__ = [
    "mask_identifier",
    "mask_name",
    "scrub_sensitive_mapping",
]

_DIGEST_SIZE = 10
_ID_KEYS = {"player_id", "user_id", "home_player_id", "away_player_id"}
_NAME_KEYS = {"player_name", "home_name", "away_name"}


def _stable_digest(value: str) -> str:
    normalised = value.strip().encode("utf-8", "ignore")
    return hashlib.blake2b(normalised, digest_size=_DIGEST_SIZE).hexdigest()


def mask_identifier(value: int | str, *, prefix: str = "id") -> str:
    """Return an anonymised representation of ``value`` suitable for logs.

    >>> mask_identifier("p-1", prefix="player") == mask_identifier("p-1", prefix="player")
    True
    >>> mask_identifier("p-1", prefix="player").startswith("player-")
    True
    """

    digest = _stable_digest(f"{prefix}:{value}")
    return f"{prefix}-{digest[:6]}...{digest[-4:]}"


def mask_name(name: str) -> str:
    """Mask a display name; case and surrounding spaces do not matter."""

    cleaned = " ".join(name.split()).casefold()
    if not cleaned:
        return "name-anon"
    return f"name-{_stable_digest(f'name:{cleaned}')[:8]}"


def _id_prefix(key: str) -> str:
    # home_player_id / away_player_id are still players.
    return "player" if key.endswith("player_id") else key.removesuffix("_id")


def _scrub_value(value: Any, *, key: str | None = None) -> Any:
    if value is None:
        return None
    lowered = key.lower() if isinstance(key, str) else None

    if lowered in _ID_KEYS and isinstance(value, (str, int)):
        return mask_identifier(value, prefix=_id_prefix(lowered))
    if lowered in _NAME_KEYS and isinstance(value, str):
        return mask_name(value)

    if isinstance(value, dict):
        return scrub_sensitive_mapping(value)
    if isinstance(value, list):
        return [_scrub_value(item, key=key) for item in value]
    if isinstance(value, tuple):
        return tuple(_scrub_value(item, key=key) for item in value)
    return value


def scrub_sensitive_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    """Recursively mask player ids and names inside ``mapping`` in-place."""

    for key, value in list(mapping.items()):
        if isinstance(value, (str, int, dict, list, tuple)):
            mapping[key] = _scrub_value(value, key=key if isinstance(key, str) else None)
    return mapping
