"""Tests for logging setup."""

from __future__ import annotations

import json
import logging

import pytest

from utils.logging_config import StructuredFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_structured_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="quaiscan.coordinator",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Background refresh failed: %s",
        args=("HTTP Status 502",),
        exc_info=None,
    )
    record.fetch_kind = "background"
    record.address = "0xabc"

    payload = json.loads(StructuredFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "quaiscan.coordinator"
    assert payload["message"] == "Background refresh failed: HTTP Status 502"
    assert payload["fetch_kind"] == "background"
    assert payload["address"] == "0xabc"
    assert "msg" not in payload


def test_setup_logging_configures_console_and_file(tmp_path) -> None:
    log_file = tmp_path / "logs" / "dashboard.log"

    setup_logging("debug", log_file=str(log_file))
    logging.getLogger("quaiscan.test").debug("hello file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert logging.getLogger("aiohttp").level == logging.WARNING
    assert "hello file" in log_file.read_text(encoding="utf-8")
