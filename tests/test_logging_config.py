"""Tests for logging setup."""

import json
import logging

from history_insights.logging_config import JsonFormatter, configure_logging


def test_json_formatter_merges_extra():
    record = logging.LogRecord("history_insights.x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.job = "2024-01-01:a@b.com"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "history_insights.x"
    assert payload["job"] == "2024-01-01:a@b.com"


def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        configure_logging("debug", "json")
        configure_logging("debug", "json")
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
