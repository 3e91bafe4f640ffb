"""JSONL debug log."""

import json
import logging

import pytest

from opencode_notifier import debug_log
from opencode_notifier.debug_log import configure_debug_logging, is_debug_enabled, log_event


@pytest.fixture
def notifier_logger():
    root = logging.getLogger("opencode_notifier")
    level, handlers = root.level, list(root.handlers)
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_disabled_by_default(monkeypatch):
    monkeypatch.delenv(debug_log.DEBUG_ENV, raising=False)
    assert not is_debug_enabled()
    assert configure_debug_logging() is None


def test_enabled_only_by_exact_value(monkeypatch):
    monkeypatch.setenv(debug_log.DEBUG_ENV, "1")
    assert not is_debug_enabled()
    monkeypatch.setenv(debug_log.DEBUG_ENV, "true")
    assert is_debug_enabled()


def test_events_are_written_as_json_lines(notifier_logger, tmp_path):
    path = tmp_path / "log.jsonl"
    handler = configure_debug_logging(path, force=True)
    assert handler is not None
    assert configure_debug_logging(path, force=True) is handler

    log_event("handleEvent", eventType="complete", sessionTitle="Docs")
    logging.getLogger("opencode_notifier.arbiter").debug("plain record")
    handler.flush()

    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert lines[0]["action"] == "handleEvent"
    assert lines[0]["eventType"] == "complete"
    assert lines[0]["sessionTitle"] == "Docs"
    assert "timestamp" in lines[0]
    assert lines[1]["message"] == "plain record"
    assert lines[1]["logger"] == "opencode_notifier.arbiter"
