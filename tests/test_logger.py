import json
import logging
from uuid import uuid4

import utils.logger as logger_module
from utils.logger import get_logger
from utils.personal_data import mask_identifier


def test_logger_writes_json_to_rotating_file_and_stderr(
    tmp_path, monkeypatch, capfd
) -> None:
    monkeypatch.setattr(logger_module, "LOG_DIR", tmp_path)

    logger_name = f"tests.logger.{uuid4()}"
    logger = get_logger(logger_name)

    duplicate_logger = get_logger(logger_name)
    assert logger is duplicate_logger

    handlers = logger.handlers
    assert len(handlers) == 2
    assert (
        sum(getattr(handler, "_is_scoring_json_stream", False) for handler in handlers)
        == 1
    )
    assert (
        sum(getattr(handler, "_is_scoring_json_file", False) for handler in handlers)
        == 1
    )
    assert not any(hasattr(handler, "_is_scoring_json") for handler in handlers)

    logger.info("leg %s won", 1, extra={"match_id": "m-1", "event": "leg_won"})
    logger.warning("sync failed", extra={"match_id": "m-1", "player_id": "player-home"})
    logger.error(
        "bust",
        extra={"match_id": "m-1", "side": "away", "leg": 2, "event": "bust"},
    )

    for handler in handlers:
        if hasattr(handler, "flush"):
            handler.flush()

    captured = capfd.readouterr()
    assert not captured.out

    err_lines = [line for line in captured.err.splitlines() if line.strip()]
    assert len(err_lines) == 2

    warning_payload = json.loads(err_lines[0])
    error_payload = json.loads(err_lines[1])

    assert warning_payload["msg"] == "sync failed"
    assert warning_payload["level"] == "WARNING"
    assert warning_payload["logger"] == logger_name
    assert warning_payload["player_id"] == mask_identifier("player-home", prefix="player")
    assert warning_payload["player_id"].startswith("player-")
    assert "player-home" not in err_lines[0]

    assert error_payload["msg"] == "bust"
    assert error_payload["level"] == "ERROR"
    assert error_payload["match_id"] == "m-1"
    assert error_payload["side"] == "away"
    assert error_payload["leg"] == 2
    assert error_payload["event"] == "bust"

    log_file = tmp_path / "scoring.log"
    assert log_file.exists()

    file_lines = [
        json.loads(line)
        for line in log_file.read_text(encoding="utf-8").splitlines()
        if line.strip()
    ]
    assert len(file_lines) == 3

    info_payload, warning_file_payload, error_file_payload = file_lines

    for payload in (info_payload, warning_file_payload, error_file_payload):
        for key in ("ts", "level", "msg"):
            assert key in payload

    assert info_payload["msg"] == "leg 1 won"
    assert info_payload["level"] == "INFO"
    assert info_payload["event"] == "leg_won"

    assert warning_file_payload == warning_payload
    assert error_file_payload == error_payload

    # Clean up handlers to avoid influencing other tests.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logging.getLogger(logger_name).handlers.clear()


def test_logger_includes_exception_text(tmp_path, monkeypatch, capfd) -> None:
    monkeypatch.setattr(logger_module, "LOG_DIR", tmp_path)
    logger = get_logger(f"tests.logger.{uuid4()}")

    try:
        raise ConnectionError("database unavailable")
    except ConnectionError:
        logger.exception("storage write failed")

    payload = json.loads(capfd.readouterr().err.strip().splitlines()[-1])
    assert payload["level"] == "ERROR"
    assert "ConnectionError: database unavailable" in payload["exc"]

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
