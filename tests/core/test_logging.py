"""Tests for logging configuration."""

import logging
import re
import sys
import tempfile
from pathlib import Path

import pytest

from queuecast.core.logging import setup_logging, get_logger, _generate_timestamped_filename


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the quiet test logging back after each test."""
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)
    setup_logging(level="ERROR")


class TestLogging:
    """Test logging configuration functions."""

    def test_setup_logging_standard_format(self):
        """Test setup_logging with standard format."""
        logger = setup_logging(level="DEBUG", format_type="standard")

        assert logger.name == "queuecast"
        assert logging.getLogger().level == logging.DEBUG

        handler = logging.getLogger().handlers[0]
        assert "%(asctime)s - %(name)s - %(levelname)s - %(message)s" in handler.formatter._fmt

    def test_setup_logging_json_format(self):
        """Test setup_logging with JSON format."""
        setup_logging(level="INFO", format_type="json")

        fmt = logging.getLogger().handlers[0].formatter._fmt
        for key in ('"timestamp"', '"level"', '"logger"', '"message"'):
            assert key in fmt

    def test_setup_logging_invalid_level(self):
        """An unknown level falls back to INFO."""
        setup_logging(level="LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_console_handler_writes_to_stderr(self):
        """Console logs go to stderr so stdout carries command output only."""
        setup_logging(level="WARNING")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].stream is sys.stderr
        assert handlers[0].level == logging.WARNING

    def test_setup_logging_removes_existing_handlers(self):
        """Repeated setup replaces handlers instead of stacking them."""
        dummy_handler = logging.StreamHandler()
        logging.getLogger().addHandler(dummy_handler)

        setup_logging()

        assert len(logging.getLogger().handlers) == 1
        assert dummy_handler not in logging.getLogger().handlers

    def test_setup_logging_with_file_logging(self):
        """File logging writes to a timestamped file next to the requested one."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "logs" / "queuecast.log"

            logger = setup_logging(level="DEBUG", log_file=str(log_file), max_file_size_mb=1, backup_count=2)
            assert len(logging.getLogger().handlers) == 2

            get_logger("tests").info("Rolled over something")

            log_files = list(log_file.parent.glob("queuecast_*.log"))
            assert len(log_files) == 1
            assert re.match(r"queuecast_\d{8}_\d{6}\.log", log_files[0].name)

            root_logger = logging.getLogger()
            for handler in root_logger.handlers[:]:
                handler.close()
                root_logger.removeHandler(handler)

            assert "Rolled over something" in log_files[0].read_text(encoding="utf-8")
            assert logger.name == "queuecast"

    def test_setup_logging_file_logging_failure(self):
        """A log file that cannot be created leaves console logging in place."""
        with tempfile.TemporaryDirectory() as temp_dir:
            blocker = Path(temp_dir) / "not-a-dir"
            blocker.write_text("")

            setup_logging(level="INFO", log_file=str(blocker / "queuecast.log"))

            handlers = logging.getLogger().handlers
            assert len(handlers) == 1
            assert isinstance(handlers[0], logging.StreamHandler)


class TestGetLogger:
    """Test get_logger naming."""

    def test_base_logger(self):
        assert get_logger().name == "queuecast"
        assert get_logger("").name == "queuecast"

    def test_prefixes_plain_names(self):
        assert get_logger("tests.module").name == "queuecast.tests.module"

    def test_keeps_package_module_names(self):
        """Module __name__ values inside the package are not double-prefixed."""
        assert get_logger("queuecast.core.rollover").name == "queuecast.core.rollover"
        assert get_logger("queuecast").name == "queuecast"


class TestTimestampedFilename:
    """Test _generate_timestamped_filename."""

    def test_keeps_directory_and_suffix(self):
        result = Path(_generate_timestamped_filename("/var/log/queuecast.log"))

        assert result.parent == Path("/var/log")
        assert result.suffix == ".log"
        assert re.match(r"queuecast_\d{8}_\d{6}$", result.stem)
