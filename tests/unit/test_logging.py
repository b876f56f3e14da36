# =============================================================================
# tests/unit/test_logging.py
# Unit Tests for logging setup and LogContext
# =============================================================================

import logging
from unittest.mock import MagicMock

import pytest


class TestSetupLogging:
    """Test root logger configuration"""

    def test_file_handler_and_quiet_libraries(self, tmp_path):
        """A log file is created and chatty libraries are raised to WARNING"""
        from studio_core.logging import setup_logging

        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("DEBUG", log_file=tmp_path / "logs" / "studio.log")

            assert (tmp_path / "logs" / "studio.log").exists()
            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestLogContext:
    """Test operation timing logs"""

    def test_success_logs_completed(self):
        """A clean block logs start and completion"""
        from studio_core.logging import LogContext

        logger = MagicMock()
        with LogContext(logger, "Restoring backup"):
            pass

        messages = [c.args[0] for c in logger.info.call_args_list]
        assert messages[0] == "Restoring backup... started"
        assert messages[1].startswith("Restoring backup... completed")

    def test_failure_is_logged_and_raised(self):
        """Exceptions are logged and propagate"""
        from studio_core.logging import LogContext

        logger = MagicMock()
        with pytest.raises(KeyError):
            with LogContext(logger, "Saving"):
                raise KeyError("x")

        assert logger.error.call_args.args[0].startswith("Saving... failed")
