"""
Unit tests for utils.logging

Tests JSON and console formatting of replacement log records, setup of
console and file handlers, and environment-based configuration.
"""

import json
import logging
import logging.handlers
import sys
from unittest.mock import patch

import pytest

from utils.logging import (
    ConsoleFormatter,
    JSONFormatter,
    configure_from_env,
    get_logger,
    setup_logging,
)


def make_record(msg="apply replace on property greeting", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="replacement.replacer",
        level=level,
        pathname="/path/to/replacer.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a setup_logging call."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


class TestJSONFormatter:
    """Test JSONFormatter class"""

    def test_init_with_defaults(self):
        """Test initialization with default parameters"""
        # Arrange & Act
        formatter = JSONFormatter()

        # Assert
        assert formatter.include_timestamp is True
        assert formatter.include_hostname is True
        assert formatter.app_name == "property-replacer"
        assert formatter.hostname is not None

    def test_format_basic_log_record(self):
        """Test formatting a basic log record"""
        # Arrange
        formatter = JSONFormatter()

        # Act
        data = json.loads(formatter.format(make_record()))

        # Assert
        assert data["level"] == "INFO"
        assert data["logger"] == "replacement.replacer"
        assert data["message"] == "apply replace on property greeting"
        assert data["app"] == "property-replacer"
        assert "timestamp" in data
        assert data["source"]["line"] == 42
        assert "context" not in data

    def test_format_without_timestamp_and_hostname(self):
        """Test disabling optional fields"""
        # Arrange
        formatter = JSONFormatter(include_timestamp=False, include_hostname=False)

        # Act
        data = json.loads(formatter.format(make_record()))

        # Assert
        assert "timestamp" not in data
        assert "hostname" not in data

    def test_format_with_replacement_context(self):
        """Test that extra context is nested under 'context'"""
        # Arrange
        formatter = JSONFormatter()
        record = make_record(property_key="build", destination_key="build.masked")

        # Act
        data = json.loads(formatter.format(record))

        # Assert
        assert data["context"] == {
            "property_key": "build",
            "destination_key": "build.masked",
        }

    def test_format_with_exception_info(self):
        """Test that evaluator errors are serialized"""
        # Arrange
        formatter = JSONFormatter()
        try:
            raise RuntimeError("evaluation failed")
        except RuntimeError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        # Act
        data = json.loads(formatter.format(record))

        # Assert
        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "evaluation failed"
        assert isinstance(data["exception"]["traceback"], list)


class TestConsoleFormatter:
    """Test ConsoleFormatter class"""

    def test_format_without_colors(self):
        """Test plain console output"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=False)

        # Act
        result = formatter.format(make_record())

        # Assert
        assert "[INFO] replacement.replacer: apply replace on property greeting" in result
        assert "\033[" not in result

    @patch("sys.stderr.isatty", return_value=True)
    def test_format_with_colors_restores_levelname(self, mock_isatty):
        """Test that colouring does not leak into the record"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=True)
        record = make_record()

        # Act
        result = formatter.format(record)

        # Assert
        assert "\033[32mINFO\033[0m" in result
        assert record.levelname == "INFO"

    def test_format_with_extra_context(self):
        """Test that extra context is appended"""
        # Arrange
        formatter = ConsoleFormatter(use_colors=False)
        record = make_record(property_key="build", destination_key="build")

        # Act
        result = formatter.format(record)

        # Assert
        assert result.endswith("[property_key=build, destination_key=build]")


class TestSetupLogging:
    """Test setup_logging function"""

    def test_setup_logging_with_defaults(self, restore_root_logger):
        """Test setup with default parameters"""
        # Act
        setup_logging()

        # Assert
        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_setup_logging_with_invalid_level_defaults_to_info(self, restore_root_logger):
        """Test that invalid level defaults to INFO"""
        # Act
        setup_logging(level="INVALID")

        # Assert
        assert restore_root_logger.level == logging.INFO

    def test_setup_logging_json_console(self, restore_root_logger):
        """Test JSON console output"""
        # Act
        setup_logging(level="DEBUG", json_format=True, app_name="replacer-test")

        # Assert
        formatter = restore_root_logger.handlers[0].formatter
        assert restore_root_logger.level == logging.DEBUG
        assert isinstance(formatter, JSONFormatter)
        assert formatter.app_name == "replacer-test"

    def test_setup_logging_with_file(self, restore_root_logger, tmp_path):
        """Test file logging in a directory that does not exist yet"""
        # Arrange
        log_file = tmp_path / "logs" / "replacer.log"

        # Act
        setup_logging(log_file=str(log_file), console_output=False, json_format=True)
        get_logger("replacement.replacer").info(
            "apply replace on property a", extra={"property_key": "a"}
        )
        for handler in restore_root_logger.handlers:
            handler.flush()

        # Assert
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(
            restore_root_logger.handlers[0], logging.handlers.RotatingFileHandler
        )
        lines = log_file.read_text().strip().splitlines()
        last = json.loads(lines[-1])
        assert last["message"] == "apply replace on property a"
        assert last["context"]["property_key"] == "a"

    def test_setup_logging_replaces_existing_handlers(self, restore_root_logger):
        """Test that repeated setup does not stack handlers"""
        # Act
        setup_logging()
        setup_logging()

        # Assert
        assert len(restore_root_logger.handlers) == 1

    def test_setup_logging_quiets_opentelemetry(self, restore_root_logger):
        """Test that exporter noise is suppressed"""
        # Act
        setup_logging(level="DEBUG")

        # Assert
        assert logging.getLogger("opentelemetry").level == logging.ERROR


class TestConfigureFromEnv:
    """Test configure_from_env function"""

    @patch("utils.logging.config.setup_logging")
    def test_configure_from_env_with_defaults(self, mock_setup, monkeypatch):
        """Test defaults when no variables are set"""
        # Arrange
        for name in ("LOG_LEVEL", "LOG_FILE", "LOG_JSON", "LOG_CONSOLE"):
            monkeypatch.delenv(name, raising=False)

        # Act
        configure_from_env()

        # Assert
        mock_setup.assert_called_once_with(
            level="INFO",
            log_file=None,
            console_output=True,
            json_format=False,
        )

    @patch("utils.logging.config.setup_logging")
    def test_configure_from_env_all_vars_set(self, mock_setup, monkeypatch):
        """Test that every variable is honoured"""
        # Arrange
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FILE", "/tmp/replacer.log")
        monkeypatch.setenv("LOG_JSON", "yes")
        monkeypatch.setenv("LOG_CONSOLE", "false")

        # Act
        configure_from_env()

        # Assert
        mock_setup.assert_called_once_with(
            level="DEBUG",
            log_file="/tmp/replacer.log",
            console_output=False,
            json_format=True,
        )

    @pytest.mark.parametrize("value", ["true", "1", "YES"])
    @patch("utils.logging.config.setup_logging")
    def test_configure_from_env_json_true_variations(self, mock_setup, value, monkeypatch):
        """Test accepted truthy spellings"""
        # Arrange
        monkeypatch.setenv("LOG_JSON", value)

        # Act
        configure_from_env()

        # Assert
        assert mock_setup.call_args.kwargs["json_format"] is True
