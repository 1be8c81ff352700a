# tests/unit/logging/test_unit_logger.py — v1
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import io
import json
import logging
import sys

from reqintake.logging.context import set_attempt, set_check_context
from reqintake.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_check_context("abc123", "Transportation")
        set_attempt(2)
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {
            "check_id": "abc123", "category": "Transportation", "attempt": 2,
        }

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record(data={"candidates": 3})))
        assert parsed["data"] == {"candidates": 3}

    def test_format_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        parsed = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in parsed["exception"]


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_check_id(self):
        set_check_context("abc123", "Housing")
        set_attempt(3)
        output = TextFormatter().format(_record())
        assert "[abc123]" in output
        assert "(attempt 3)" in output


class TestGetLogger:
    def test_returns_logger(self):
        assert get_logger("test_module").name == "reqintake.test_module"


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger("reqintake")
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
        root.setLevel(logging.NOTSET)

    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("reqintake")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("reqintake")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_custom_stream(self):
        stream = io.StringIO()
        setup_logging(level="INFO", log_format="json", stream=stream)
        logging.getLogger("reqintake.dedup").info("routed")
        assert json.loads(stream.getvalue().splitlines()[-1])["message"] == "routed"

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "reqintake.log"
        setup_logging(level="INFO", log_format="text", log_file=log_file, rotation="1MB")
        root = logging.getLogger("reqintake")
        assert len(root.handlers) == 2
        assert log_file.parent.exists()
