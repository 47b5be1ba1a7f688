"""
Tests for logging configuration helpers.
"""

import json
import logging
import sys

import pytest

from petcheck.core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    LogContext,
    get_log_context,
    get_logger,
    log_operation,
    setup_logging,
)


def make_record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("petcheck.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestGetLogger:
    def test_namespaced_under_package(self):
        assert get_logger("tests.something").name == "petcheck.tests.something"

    def test_package_names_unchanged(self):
        assert get_logger("petcheck.dipstick.reader").name == "petcheck.dipstick.reader"
        assert get_logger("petcheck").name == "petcheck"

    def test_similar_prefix_is_namespaced(self):
        assert get_logger("petcheckers").name == "petcheck.petcheckers"


class TestLogContext:
    def test_empty_by_default(self):
        assert get_log_context() == {}

    def test_nested_contexts_merge_and_restore(self):
        with LogContext(user_id="abc"):
            with LogContext(path="/api/scan"):
                assert get_log_context() == {"user_id": "abc", "path": "/api/scan"}
            assert get_log_context() == {"user_id": "abc"}
        assert get_log_context() == {}


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record("Scan done")))
        assert data["message"] == "Scan done"
        assert data["level"] == "INFO"
        assert data["logger"] == "petcheck.test"
        assert "context" not in data

    def test_includes_context_and_extra(self):
        with LogContext(user_id="abc"):
            data = json.loads(JSONFormatter().format(make_record(duration_ms=12.5)))
        assert data["context"] == {"user_id": "abc"}
        assert data["duration_ms"] == 12.5

    def test_includes_exception(self):
        try:
            raise ValueError("bad frame")
        except ValueError:
            record = logging.LogRecord(
                "petcheck.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        data = json.loads(JSONFormatter().format(record))
        assert data["exception_type"] == "ValueError"
        assert "bad frame" in data["exception"]


class TestConsoleFormatter:
    def test_plain_line(self):
        line = ConsoleFormatter().format(make_record("Loaded chart"))
        assert line.endswith("petcheck.test: Loaded chart")

    def test_context_appended(self):
        with LogContext(user_id="abc", path="/api/pets"):
            line = ConsoleFormatter().format(make_record("Registered pet"))
        assert line.endswith("Registered pet [user_id=abc path=/api/pets]")

    def test_unset_context_values_skipped(self):
        with LogContext(user_id=None):
            line = ConsoleFormatter().format(make_record("hi"))
        assert line.endswith(": hi")


class TestLogOperation:
    def test_logs_duration_on_success(self, caplog):
        logger = get_logger("tests.ops")
        with caplog.at_level(logging.INFO, logger="petcheck"):
            with log_operation(logger, "dipstick_scan"):
                pass

        assert [r.getMessage() for r in caplog.records] == ["dipstick_scan done"]
        record = caplog.records[0]
        assert record.operation == "dipstick_scan"
        assert record.duration_ms >= 0

    def test_logs_failure_and_reraises(self, caplog):
        logger = get_logger("tests.ops")
        with caplog.at_level(logging.INFO, logger="petcheck"):
            with pytest.raises(RuntimeError):
                with log_operation(logger, "dipstick_scan"):
                    raise RuntimeError("boom")

        assert len(caplog.records) == 1
        failed = caplog.records[0]
        assert failed.getMessage() == "dipstick_scan failed: boom"
        assert failed.levelno == logging.ERROR
        assert failed.error_type == "RuntimeError"


class TestSetupLogging:
    def test_sets_level_and_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "petcheck.log"
        setup_logging(level="warning", log_file=log_file)
        try:
            package_logger = logging.getLogger("petcheck")
            assert package_logger.level == logging.WARNING
            assert len(package_logger.handlers) == 2

            get_logger("tests.file").warning("written to file")
            for handler in package_logger.handlers:
                handler.flush()
            line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
            assert json.loads(line)["message"] == "written to file"
        finally:
            setup_logging(level="INFO")

        assert len(logging.getLogger("petcheck").handlers) == 1
