"""Tests for settlers/core/logging_config.py - Unified logging configuration."""

import logging

from settlers.core.logging_config import configure_third_party_loggers, setup_logging


class TestSetupLogging:
    """Test setup_logging function."""

    def test_returns_logger(self):
        """setup_logging should return a Logger instance."""
        logger = setup_logging("settlers_test_1")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "settlers_test_1"

    def test_level_default_and_string(self):
        assert setup_logging("settlers_test_2").level == logging.INFO
        assert setup_logging("settlers_test_3", level="warning").level == logging.WARNING

    def test_unknown_level_string(self):
        assert setup_logging("settlers_test_4", level="LOUD").level == logging.INFO

    def test_idempotent(self):
        """Calling setup_logging twice shouldn't add duplicate handlers."""
        logger1 = setup_logging("settlers_test_5")
        handler_count = len(logger1.handlers)
        logger2 = setup_logging("settlers_test_5")
        assert logger1 is logger2
        assert len(logger2.handlers) == handler_count

    def test_log_dir(self, tmp_path):
        logger = setup_logging("settlers.test6", log_dir=tmp_path, console=False)
        logger.info("saved a game")
        for handler in logger.handlers:
            handler.flush()
        log_file = tmp_path / "settlers_test6.log"
        assert log_file.exists()
        assert "saved a game" in log_file.read_text()

    def test_unknown_format_style(self):
        assert setup_logging("settlers_test_7", format_style="nonexistent") is not None

    def test_propagate_default_false(self):
        assert setup_logging("settlers_test_8").propagate is False


def test_third_party_quieted():
    logging.getLogger("urllib3").setLevel(logging.INFO)
    configure_third_party_loggers(quiet=True)
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_third_party_verbose_package_kept():
    logging.getLogger("asyncio").setLevel(logging.DEBUG)
    configure_third_party_loggers(verbose_packages=["asyncio"])
    assert logging.getLogger("asyncio").level == logging.DEBUG
