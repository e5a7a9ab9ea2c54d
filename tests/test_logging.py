"""Tests for structured logging."""

import json
import logging

from minio_bucket_operator.logging import JSONFormatter, setup_structured_logging


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("minio_bucket_operator.test", logging.INFO, __file__, 1, "applied %s", ("b",), None)
    record.resource_name = "my-bucket-cr"

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "applied b"
    assert entry["level"] == "INFO"
    assert entry["resource_name"] == "my-bucket-cr"
    assert "args" not in entry


def test_setup_uses_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_structured_logging()

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("kubernetes").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
