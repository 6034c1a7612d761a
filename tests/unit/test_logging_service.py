"""Tests for logging service configuration."""

import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

from condoledger.services.logging import get_log_level, setup_logging


class TestSetupLogging:
    """Test logging configuration."""

    def setup_method(self):
        """Save original handlers before each test."""
        self.root_logger = logging.getLogger()
        self.original_handlers = self.root_logger.handlers.copy()
        self.original_level = self.root_logger.level

    def teardown_method(self):
        """Restore original handlers after each test."""
        for handler in self.root_logger.handlers[:]:
            handler.close()
            self.root_logger.removeHandler(handler)
        for handler in self.original_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.original_level)

    def test_creates_log_directory(self) -> None:
        """Verify setup_logging creates the log directory if missing."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "nested" / "condoledger.log"
            assert not log_file.parent.exists()

            setup_logging(str(log_file))

            assert log_file.parent.exists()

    def test_creates_stdout_and_file_handlers(self) -> None:
        """Verify exactly two handlers are installed, even when called twice."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "condoledger.log"

            setup_logging(str(log_file))
            setup_logging(str(log_file))

            assert len(self.root_logger.handlers) == 2
            assert any(isinstance(h, logging.FileHandler) for h in self.root_logger.handlers)

    def test_level_from_environment(self) -> None:
        """Verify LOG_LEVEL is used when no level is passed."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "condoledger.log"

            with patch.dict("os.environ", {"LOG_LEVEL": "WARNING"}, clear=False):
                setup_logging(str(log_file))

            assert self.root_logger.level == logging.WARNING
            for handler in self.root_logger.handlers:
                assert handler.level == logging.WARNING

    def test_explicit_level_wins(self) -> None:
        """Verify an explicit level overrides LOG_LEVEL."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "condoledger.log"

            with patch.dict("os.environ", {"LOG_LEVEL": "ERROR"}, clear=False):
                setup_logging(str(log_file), level="debug")

            assert self.root_logger.level == logging.DEBUG

    def test_writes_to_file(self) -> None:
        """Verify messages reach the log file with the expected format."""
        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = Path(temp_dir) / "condoledger.log"

            setup_logging(str(log_file), level="INFO")
            logging.getLogger("condoledger.test").info("Recorded posting")
            for handler in self.root_logger.handlers:
                handler.flush()

            content = log_file.read_text()
            assert "condoledger.test - INFO - Recorded posting" in content

    def test_unknown_level_defaults_to_info(self) -> None:
        """Verify unrecognized level names fall back to INFO."""
        assert get_log_level("VERBOSE") == logging.INFO
