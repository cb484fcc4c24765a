"""Unit tests for logging setup."""

import io
import json
import logging

import pytest
import structlog

from float_mcp.utils.logging_config import build_formatter, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    def test_json_lines_carry_extras(self):
        stream = io.StringIO()
        configure_logging("INFO", "json", stream=stream)

        logging.getLogger("float_mcp.test").info(
            "bulk_run_complete", extra={"bulk": "timeoff", "failed": 1}
        )

        payload = json.loads(stream.getvalue().strip())
        assert payload["event"] == "bulk_run_complete"
        assert payload["level"] == "info"
        assert payload["logger"] == "float_mcp.test"
        assert payload["timestamp"].startswith("20")
        assert (payload["bulk"], payload["failed"]) == ("timeoff", 1)

    def test_json_renders_exceptions(self):
        stream = io.StringIO()
        configure_logging("INFO", "json", stream=stream)

        try:
            raise ValueError("bad page")
        except ValueError:
            logging.getLogger("float_mcp.test").exception("page_error")

        payload = json.loads(stream.getvalue().strip())
        assert payload["level"] == "error"
        assert "ValueError: bad page" in payload["exception"]

    def test_level_filters_records(self):
        stream = io.StringIO()
        configure_logging("WARNING", "json", stream=stream)

        logging.getLogger("float_mcp.test").info("hidden")

        assert stream.getvalue() == ""

    def test_pretty_appends_key_values(self):
        stream = io.StringIO()
        configure_logging("debug", "pretty", stream=stream)

        logging.getLogger("float_mcp.test").debug("admitted", extra={"in_flight": 3})

        line = stream.getvalue().strip()
        assert "admitted" in line
        assert "debug" in line
        assert "float_mcp.test" in line
        assert "in_flight=3" in line
        assert not line.startswith("{")

    def test_replaces_existing_handlers(self):
        configure_logging("INFO", "json", stream=io.StringIO())
        handler = configure_logging("INFO", "json", stream=io.StringIO())

        assert logging.getLogger().handlers == [handler]
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)


def test_unknown_format_falls_back_to_json():
    record = logging.LogRecord("float_mcp.test", logging.INFO, __file__, 1, "hello", None, None)

    assert json.loads(build_formatter("yaml").format(record))["event"] == "hello"
