"""
Tests for structured logging setup.
"""

import io
import json
import logging

import pytest

from panreplay.logging_config import get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_logs_carry_trace_id(restore_root_logger):
    stream = io.StringIO()
    setup_logging(level="INFO", log_format="json", stream=stream)

    get_logger("panreplay.test", trace_id="store-7").info("Engine ready")

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["message"] == "Engine ready"
    assert record["trace_id"] == "store-7"
    assert record["level"] == "INFO"
    assert record["logger"] == "panreplay.test"


def test_text_logs_default_trace_id(restore_root_logger):
    stream = io.StringIO()
    setup_logging(level="WARNING", log_format="text", stream=stream)

    logging.getLogger("panreplay.test").warning("No machine")
    get_logger("panreplay.test").info("hidden")

    output = stream.getvalue()
    assert "No machine [trace_id=N/A]" in output
    assert "hidden" not in output


def test_level_from_environment(restore_root_logger, monkeypatch):
    monkeypatch.setenv("PANREPLAY_LOG_LEVEL", "debug")

    setup_logging(stream=io.StringIO())

    assert logging.getLogger().level == logging.DEBUG


def test_call_extra_merged_with_trace_id(restore_root_logger):
    stream = io.StringIO()
    setup_logging(level="WARNING", log_format="json", stream=stream)

    get_logger("panreplay.test", trace_id="store-7").warning(
        "Skipped cook", extra={"protein_pan": "Spicy 4", "second": 300}
    )

    record = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert record["trace_id"] == "store-7"
    assert record["protein_pan"] == "Spicy 4"
    assert record["second"] == 300
