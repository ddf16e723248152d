"""Tests for logging setup and helpers."""

import logging
from unittest.mock import Mock

from prositometry.logging_config import LogTimer, ProgressLogger, get_logger, setup_logging


class TestSetupLogging:
    """Test cases for logging setup."""

    def teardown_method(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()

    def test_console_only_by_default(self):
        setup_logging()
        handlers = logging.getLogger().handlers

        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].level == logging.INFO

    def test_quiet_console(self):
        setup_logging(quiet=True)
        assert logging.getLogger().handlers[0].level == logging.ERROR

    def test_log_dir(self, tmp_path):
        setup_logging(log_level="DEBUG", log_dir=str(tmp_path / "logs"), console=False)
        get_logger("test").debug("hello")

        files = list((tmp_path / "logs").glob("prositometry_*.log"))
        assert len(files) == 1
        assert "hello" in files[0].read_text()

    def test_get_logger(self):
        assert get_logger("pipeline").name == "prositometry.pipeline"


class TestProgressLogger:
    """Test cases for progress logging."""

    def test_logs_at_interval_and_end(self):
        logger = Mock()
        progress = ProgressLogger(logger, total=5, operation="Analysing", interval=2)

        for processed in range(1, 6):
            progress.update(processed, 5)

        # 2, 4 and the final item
        assert logger.info.call_count == 3
        assert "5/5" in logger.info.call_args[0][0]

    def test_complete(self):
        logger = Mock()
        progress = ProgressLogger(logger, total=4)
        progress.update(4)
        progress.complete(failed=1)

        assert "75.0% success rate" in logger.info.call_args[0][0]


class TestLogTimer:
    """Test cases for the timing context manager."""

    def test_success(self):
        logger = Mock()
        with LogTimer("Scan", logger) as timer:
            pass

        assert timer.elapsed >= 0
        logger.info.assert_called_once()

    def test_failure(self):
        logger = Mock()
        try:
            with LogTimer("Scan", logger):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        logger.error.assert_called_once()
