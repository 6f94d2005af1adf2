"""Structured logging utilities for the scoring core.

Every record becomes one JSON object per line. Match context travels in the
``extra`` mapping (``match_id``, ``side``, ``leg``, ``event``) and player
identifiers are masked before anything is written.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from utils.personal_data import scrub_sensitive_mapping

__all__ = ["get_logger"]

LOG_DIR = Path(os.getenv("SCORING_LOG_DIR", "logs"))
LOG_FILE_NAME = "scoring.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

_CONTEXT_FIELDS = ("match_id", "side", "leg", "event", "player_id")
_FILE_MARKER = "_is_scoring_json_file"
_STREAM_MARKER = "_is_scoring_json_stream"


class JsonLogFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited doc
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            payload[key] = getattr(record, key, None)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        scrub_sensitive_mapping(payload)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _file_level() -> int:
    name = os.getenv("SCORING_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _mark(handler: logging.Handler, marker: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, marker, True)
    return handler


def _file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_DIR / LOG_FILE_NAME,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    return _mark(handler, _FILE_MARKER, _file_level())


def _stream_handler() -> logging.Handler:
    return _mark(logging.StreamHandler(stream=sys.stderr), _STREAM_MARKER, logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger writing JSON to ``LOG_DIR`` and warnings to stderr.

    Calling it again for the same name reuses the installed handlers.
    """

    logger = logging.getLogger(name)
    installed = {
        marker
        for handler in logger.handlers
        for marker in (_FILE_MARKER, _STREAM_MARKER)
        if getattr(handler, marker, False)
    }
    if _STREAM_MARKER not in installed:
        logger.addHandler(_stream_handler())
    if _FILE_MARKER not in installed:
        logger.addHandler(_file_handler())

    logger.setLevel(min(_file_level(), logging.WARNING))
    logger.propagate = False
    return logger
