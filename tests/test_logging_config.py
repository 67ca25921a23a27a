"""Tests for nexusplt.logging_config module."""

import logging

import pytest

from nexusplt.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("nexusplt")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_and_handler(self, package_logger):
        """Test that the package logger gets a level and a console handler."""
        logger = setup_logging(logging.DEBUG)
        assert logger is package_logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_no_duplicate_handlers(self, package_logger):
        """Test that repeated setup does not stack handlers."""
        setup_logging()
        setup_logging()
        assert len(package_logger.handlers) == 1

    def test_log_file(self, package_logger, tmp_path):
        """Test that records are written to the log file."""
        log_file = tmp_path / "nexusplt.log"
        setup_logging(logging.INFO, log_file=str(log_file))
        logging.getLogger("nexusplt.summary").info("summary built")
        for handler in package_logger.handlers:
            handler.flush()
        assert "nexusplt.summary - INFO - summary built" in log_file.read_text()
