# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for logging setup."""

import json
import logging
import sys

import pytest

from file_dependencies.diagnostics import DiagnosticType, WarningCollector
from file_dependencies.logging_setup import StructuredFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_creates_log_file(tmp_path):
    """Test that setup_logging creates the log file and its directory."""
    log_file = tmp_path / "logs" / "run.log"

    setup_logging(log_file=log_file, console_output=False)

    assert log_file.exists()


def test_logging_produces_json(tmp_path):
    """Test that logs are written in JSON format."""
    log_file = tmp_path / "run.log"
    setup_logging(log_file=log_file, log_level=logging.INFO, console_output=False)

    logging.getLogger("test_logger").info("Test message")

    lines = [line for line in log_file.read_text().splitlines() if line]
    # Startup message + test message
    assert len(lines) >= 2
    for line in lines:
        data = json.loads(line)
        assert {"timestamp", "level", "logger", "message"} <= set(data)
    assert json.loads(lines[-1])["message"] == "Test message"


def test_structured_warning_fields_in_log(tmp_path):
    """Test that warning payloads are merged into the JSON log line."""
    log_file = tmp_path / "run.log"
    setup_logging(log_file=log_file, console_output=False)

    WarningCollector().emit(DiagnosticType.MISSING_FILE, "missing", file="ghost.js")

    data = json.loads(log_file.read_text().splitlines()[-1])
    assert data["type"] == "missing_file"
    assert data["file"] == "ghost.js"
    assert data["level"] == "WARNING"


def test_console_only_adds_no_file_handler():
    setup_logging(console_output=True)
    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0], logging.FileHandler)


def test_formatter_includes_exception():
    formatter = StructuredFormatter()
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    data = json.loads(formatter.format(record))
    assert "ValueError: boom" in data["exception"]
