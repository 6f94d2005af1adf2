"""Sentry reporting for persistence failures.

Nothing is sent unless ``SENTRY_DSN`` is configured. Events are scrubbed of
player ids and names before they leave the process.
"""

from __future__ import annotations

import os
from typing import Any, Final

import sentry_sdk

from utils.meta import APP_VERSION
from utils.personal_data import scrub_sensitive_mapping

ENVIRONMENT: Final[str] = os.getenv("ENV", "development")
"""Deployment environment name used for Sentry tagging."""

_RELEASE: Final[str] = f"darts-scoring@{APP_VERSION}"
_EVENT_SECTIONS: Final = ("user", "extra", "contexts", "tags")
_SENTRY_INITIALIZED = False


def _scrub_breadcrumbs(event: dict[str, Any]) -> None:
    breadcrumbs = event.get("breadcrumbs")
    values = breadcrumbs.get("values") if isinstance(breadcrumbs, dict) else None
    for crumb in values if isinstance(values, list) else ():
        data = crumb.get("data") if isinstance(crumb, dict) else None
        if isinstance(data, dict):
            scrub_sensitive_mapping(data)


def _before_send(event: dict[str, Any], hint: Any) -> dict[str, Any] | None:
    if not isinstance(event, dict):
        return event
    try:
        for section in _EVENT_SECTIONS:
            value = event.get(section)
            if isinstance(value, dict):
                scrub_sensitive_mapping(value)
        _scrub_breadcrumbs(event)
    except Exception:  # pragma: no cover - sanitiser must never raise
        return event
    return event


def _sample_rate() -> float:
    raw = os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0")
    try:
        return min(max(float(raw), 0.0), 1.0)
    except ValueError:
        return 0.0


def init_sentry() -> bool:
    """Initialise Sentry SDK if ``SENTRY_DSN`` is configured."""

    global _SENTRY_INITIALIZED
    if _SENTRY_INITIALIZED:
        return True

    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=ENVIRONMENT,
        release=_RELEASE,
        send_default_pii=False,
        traces_sample_rate=_sample_rate(),
        before_send=_before_send,
    )
    sentry_sdk.set_tag("app_version", APP_VERSION)
    _SENTRY_INITIALIZED = True
    return True


def capture_exception(
    exc: BaseException,
    *,
    match_id: str | None = None,
    operation: str | None = None,
) -> None:
    """Report ``exc`` tagged with the match and the failed operation."""

    if not _SENTRY_INITIALIZED:
        return

    with sentry_sdk.new_scope() as scope:
        scope.set_tag("environment", ENVIRONMENT)
        if match_id is not None:
            scope.set_tag("match_id", match_id)
        if operation is not None:
            scope.set_tag("operation", operation)
        sentry_sdk.capture_exception(exc)
