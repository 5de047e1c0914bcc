"""Tests for process logging setup."""

import io
import logging

import pytest
from rich.console import Console

from simplebackup.util.logging import LOGGER_NAME, get_logger, resolve_level, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    yield logger
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestResolveLevel:
    """Test log level names."""

    def test_names(self):
        """Test names are case-insensitive."""
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Warning ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name(self):
        """Test unknown names are rejected."""
        with pytest.raises(ValueError):
            resolve_level("chatty")


class TestSetupLogging:
    """Test handler configuration."""

    def test_console_only(self, package_logger):
        """Test a single rich handler at the requested level."""
        console = Console(file=io.StringIO())

        setup_logging("WARNING", console=console)

        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING
        get_logger("simplebackup.backup.executor").warning("disk almost full")
        assert "disk almost full" in console.file.getvalue()

    def test_repeated_setup_replaces_handlers(self, package_logger):
        """Test calling setup twice does not duplicate output."""
        setup_logging(console=Console(file=io.StringIO()))
        setup_logging(console=Console(file=io.StringIO()))

        assert len(package_logger.handlers) == 1

    def test_log_file_gets_debug_records(self, package_logger, tmp_path):
        """Test the detailed log file receives debug records as UTF-8."""
        log_file = tmp_path / "logs" / "simplebackup.log"
        setup_logging("INFO", log_file=log_file, console=Console(file=io.StringIO()))

        get_logger("simplebackup.store.memory").debug("Loaded workspace médias")
        for handler in package_logger.handlers:
            handler.flush()

        content = log_file.read_bytes()
        assert "Loaded workspace médias".encode("utf-8") in content
        assert b"DEBUG" in content
