from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import structlog

from country_search.utils.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_logger_created_before_setup_uses_configured_output(tmp_path: Path, capsys):
    # module-level loggers are created at import time, before setup_logging()
    logger = get_logger(component="early")
    log_file = tmp_path / "logs" / "app.jsonl"

    setup_logging(level="INFO", log_file=str(log_file))
    logger.info("countries_loaded", count=3)
    logger.debug("hidden_event")

    captured = capsys.readouterr()
    assert captured.out == ""

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["event"] == "countries_loaded"
    assert event["count"] == 3
    assert event["component"] == "early"
    assert event["service"] == "country_search"
    assert event["level"] == "info"
