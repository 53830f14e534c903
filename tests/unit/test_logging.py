"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from autosemver.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.mark.parametrize(
        ("kwargs", "level"),
        [
            ({}, logging.INFO),
            ({"verbose": True}, logging.DEBUG),
            ({"quiet": True}, logging.WARNING),
            ({"verbose": True, "quiet": True}, logging.WARNING),
        ],
    )
    def test_levels(self, kwargs, level: int):
        """Verbosity maps to the root level, quiet wins."""
        configure_logging(**kwargs)

        assert logging.getLogger().level == level

    def test_json_output(self, capsys):
        """JSON mode writes one object per line to stderr."""
        configure_logging(json_log=True)

        get_logger("autosemver.test").info("version_computed", next_version="1.2.0")

        captured = capsys.readouterr()
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "version_computed"
        assert record["next_version"] == "1.2.0"
        assert record["level"] == "info"
        assert captured.out == ""
