"""Tests for the logging setup module."""

import io
import logging

from receipt_text.utils.logger import get_logger, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def teardown_method(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(logging.WARNING)

    def test_setup_creates_handler(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("DEBUG")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_setup_idempotent(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("INFO")
        setup_logging("DEBUG")
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_setup_invalid_level_defaults_to_info(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()

        setup_logging("NONEXISTENT")
        assert root.level == logging.INFO

    def test_writes_to_stream(self) -> None:
        logging.getLogger().handlers.clear()
        stream = io.StringIO()

        setup_logging("INFO", stream=stream)
        get_logger("receipt_text.test").info("parsed %d receipts", 3)
        assert "receipt_text.test - INFO - parsed 3 receipts" in stream.getvalue()


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("test.module")
        assert logger.name == "test.module"
        assert isinstance(logger, logging.Logger)

    def test_same_name_returns_same_logger(self) -> None:
        assert get_logger("test.same") is get_logger("test.same")
