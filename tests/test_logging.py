"""Tests for log formatting and secret redaction."""

import io
import json
import logging
import sys

import pytest

from wpgate.observability.logging import JSONFormatter, RedactingFilter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestRedaction:
    def test_secret_in_args_is_masked(self) -> None:
        record = logging.LogRecord(
            "wpgate", logging.INFO, __file__, 1, "auth with %s", ("app-pass",), None
        )
        RedactingFilter(["app-pass", None]).filter(record)
        assert record.getMessage() == "auth with ***"

    def test_untouched_without_secrets(self) -> None:
        record = logging.LogRecord("wpgate", logging.INFO, __file__, 1, "n=%d", (3,), None)
        assert RedactingFilter([]).filter(record)
        assert record.args == (3,)


@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    def test_plain_output_masks_secrets(self) -> None:
        stream = io.StringIO()
        configure_logging("INFO", secrets=["gate-key"], stream=stream)

        logging.getLogger("wpgate.test").info("key is %s", "gate-key")

        output = stream.getvalue()
        assert "gate-key" not in output
        assert " - wpgate.test - INFO - key is ***" in output

    def test_structured_output(self) -> None:
        stream = io.StringIO()
        configure_logging("DEBUG", structured=True, stream=stream)

        logging.getLogger("wpgate.test").info(
            "session opened", extra={"session_id": "abc123", "tool": "list_posts"}
        )

        line = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert line["message"] == "session opened"
        assert line["level"] == "INFO"
        assert line["session_id"] == "abc123"
        assert line["tool"] == "list_posts"

    def test_json_formatter_includes_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
            )
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]
