"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from lifereel.config import LoggingConfig
from lifereel.utils.logging import configure_logging, timed


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_level_from_settings(self) -> None:
        root = configure_logging(LoggingConfig(level="warning"))

        assert root.name == "lifereel"
        assert root.level == logging.WARNING
        assert not root.propagate
        assert [type(h) for h in root.handlers] == [RichHandler]

    def test_verbose_forces_debug(self) -> None:
        root = configure_logging(LoggingConfig(level="ERROR"), verbose=True)

        assert root.level == logging.DEBUG

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "lifereel.log"

        root = configure_logging(LoggingConfig(level="INFO", log_file=log_file))
        logging.getLogger("lifereel.core.bucketing").info("grouped 3 photos")
        for handler in root.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "INFO" in text
        assert "lifereel.core.bucketing" in text
        assert "grouped 3 photos" in text
        for handler in root.handlers:
            handler.close()

    def test_reconfigure_replaces_handlers(self) -> None:
        configure_logging(LoggingConfig())
        root = configure_logging(LoggingConfig())

        assert len(root.handlers) == 1

    def test_pillow_quieted(self) -> None:
        configure_logging(LoggingConfig(), verbose=True)

        assert logging.getLogger("PIL").level == logging.WARNING


class TestTimed:
    """Tests for the timed() context manager."""

    def test_logs_duration(self, caplog) -> None:
        logger = logging.getLogger("lifereel.tests")

        with caplog.at_level(logging.DEBUG, logger="lifereel.tests"):
            with timed("Scanning", logger):
                pass

        assert "Scanning took" in caplog.text

    def test_logs_and_reraises_failure(self, caplog) -> None:
        logger = logging.getLogger("lifereel.tests")

        with caplog.at_level(logging.DEBUG, logger="lifereel.tests"):
            with pytest.raises(RuntimeError):
                with timed("Scanning", logger):
                    raise RuntimeError("disk gone")

        assert "Scanning failed after" in caplog.text
