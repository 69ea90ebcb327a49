"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from addon_releaser.core.utils import StructuredJSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_sets_level_and_quiets_http() -> None:
    configure_logging(level="debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.ERROR


def test_configure_logging_to_file(tmp_path: Path) -> None:
    log_file = tmp_path / "release.log"
    configure_logging(level="INFO", filename=str(log_file), format_string="%(message)s")

    logging.getLogger("addon_releaser.test").info("Processing pack %s", "BP")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file.read_text(encoding="utf-8").strip() == "Processing pack BP"


def test_structured_formatter_includes_extras() -> None:
    record = logging.LogRecord(
        name="addon_releaser.core.api.http",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="HTTP response",
        args=(),
        exc_info=None,
    )
    record.status_code = 200

    payload = json.loads(StructuredJSONFormatter().format(record))

    assert payload["message"] == "HTTP response"
    assert payload["level"] == "DEBUG"
    assert payload["context"]["logger_name"] == "addon_releaser.core.api.http"
    assert payload["context"]["status_code"] == 200
