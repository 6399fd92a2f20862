"""Unit tests for logging configuration."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from gcptrace.core.settings import LoggingSettings
from gcptrace.infra.logging import config as logging_config
from gcptrace.infra.logging.formatters import JSONFormatter


@pytest.fixture
def restore_root_logger(monkeypatch):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    monkeypatch.setattr(logging_config, "_LOGGING_INITIALIZED", False)
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(False)


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_json_console_handler(self, restore_root_logger):
        """Test that a stderr handler with the JSON formatter is installed."""
        logging_config.configure_logging(log_level="debug")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        (handler,) = root.handlers
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, JSONFormatter)

    def test_plain_formatter(self, restore_root_logger):
        """Test json_logs=False."""
        logging_config.configure_logging(json_logs=False)

        (handler,) = restore_root_logger.handlers
        assert not isinstance(handler.formatter, JSONFormatter)

    def test_console_disabled(self, restore_root_logger):
        """Test that no handler is attached when the console is disabled."""
        logging_config.configure_logging(console_enabled=False)

        assert restore_root_logger.handlers == []


@pytest.mark.unit
class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_configures_once(self, restore_root_logger):
        """Test that repeated calls only configure once unless forced."""
        with patch.object(logging_config, "configure_logging") as configure:
            logging_config.setup_logging(LoggingSettings(level="WARNING"))
            logging_config.setup_logging(LoggingSettings(level="WARNING"))
            logging_config.setup_logging(LoggingSettings(level="ERROR"), force=True)

        assert configure.call_count == 2
        assert configure.call_args.kwargs["log_level"] == "ERROR"

    def test_kwargs_override_settings(self, restore_root_logger):
        """Test that explicit kwargs win over settings values."""
        with patch.object(logging_config, "configure_logging") as configure:
            logging_config.setup_logging(LoggingSettings(json_logs=True), json_logs=False)

        assert configure.call_args.kwargs["json_logs"] is False

    def test_loads_settings_when_omitted(self, restore_root_logger, monkeypatch):
        """Test that LOG_ variables are used by default."""
        monkeypatch.setenv("LOG_LEVEL", "error")

        with patch.object(logging_config, "configure_logging") as configure:
            logging_config.setup_logging()

        assert configure.call_args.kwargs["log_level"] == "ERROR"
