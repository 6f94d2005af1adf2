"""Service access facade with lazy initialisation."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "MatchService": ".match_service",
    "MatchSnapshot": ".match_service",
    "SyncReport": ".tracking_service",
    "TrackingService": ".tracking_service",
    "open_tracking_service": ".tracking_service",
}


def __getattr__(name: str) -> Any:
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name, __name__), name)


def __dir__() -> list[str]:
    return sorted(set(globals().keys()) | set(_EXPORTS))
