from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from expense_tracker.log import LOG_PATH, JsonLogFormatter, setup_logger


@pytest.fixture(autouse=True)
def isolate_loggers(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep handlers and levels from leaking across tests."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("EXPENSE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("EXPENSE_JSON_LOGS", raising=False)
    yield
    for name in ("expense_tracker.sample", "expense_tracker.alpha", "expense_tracker.beta"):
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
        logger.setLevel(logging.NOTSET)


def test_setup_logger_idempotent_for_same_name() -> None:
    first = setup_logger("expense_tracker.sample", json_format=True)
    second = setup_logger("expense_tracker.sample", json_format=True)

    assert first.handlers == second.handlers
    json_handlers = [handler for handler in second.handlers if getattr(handler, "_expense_json", False)]
    assert len(json_handlers) == 1


def test_json_handler_only_when_requested() -> None:
    logger = setup_logger("expense_tracker.sample")
    assert not any(getattr(handler, "_expense_json", False) for handler in logger.handlers)
    assert any(getattr(handler, "_expense_console", False) for handler in logger.handlers)


def test_explicit_arguments_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXPENSE_JSON_LOGS", "1")
    monkeypatch.setenv("EXPENSE_LOG_LEVEL", "debug")
    logger = setup_logger("expense_tracker.sample", level="warning")
    assert logger.level == logging.WARNING
    assert not any(getattr(handler, "_expense_json", False) for handler in logger.handlers)


def test_repeated_setup_adjusts_level() -> None:
    setup_logger("expense_tracker.sample", level="INFO")
    logger = setup_logger("expense_tracker.sample", level=logging.ERROR)
    assert logger.level == logging.ERROR
    assert {handler.level for handler in logger.handlers} == {logging.ERROR}


def test_separate_loggers_share_json_file() -> None:
    alpha = setup_logger("expense_tracker.alpha", json_format=True)
    beta = setup_logger("expense_tracker.beta", json_format=True)
    alpha.info("alpha")
    beta.warning("beta")
    for handler in alpha.handlers + beta.handlers:
        handler.flush()

    lines = [json.loads(line) for line in Path(LOG_PATH).read_text(encoding="utf-8").splitlines()]
    assert [entry["message"] for entry in lines] == ["alpha", "beta"]
    assert lines[1]["level"] == "WARNING"
    assert lines[0]["source"] == "expense_tracker.alpha"


def test_json_formatter_includes_request_fields() -> None:
    record = logging.LogRecord("expense_tracker.server", logging.INFO, __file__, 1, "GET /health", None, None)
    record.method = "GET"
    record.path = "/health"
    record.status_code = 200
    record.duration_ms = 1.5
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["method"] == "GET"
    assert payload["status_code"] == 200
    assert payload["duration_ms"] == 1.5
    assert "user_id" not in payload
