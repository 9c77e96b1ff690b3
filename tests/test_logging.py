"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from dailybudget.logging_config import JSONFormatter, get_logger, setup_logging

pytestmark = pytest.mark.usefixtures("reset_logging")


def test_json_formatter():
    """Test that JSONFormatter correctly formats log records."""
    formatter = JSONFormatter()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Balance %s",
        args=("2985.00",),
        exc_info=None,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    record.budget_id = 7

    log_data = json.loads(formatter.format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Balance 2985.00"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"budget_id": 7}
    assert "timestamp" in log_data


def test_json_formatter_skips_console_asctime():
    """A record already rendered by the console handler carries no stray extras."""
    record = logging.LogRecord(
        name="dailybudget.services",
        level=logging.INFO,
        pathname="test.py",
        lineno=7,
        msg="Budget created",
        args=(),
        exc_info=None,
    )
    record.budget_id = 3
    logging.Formatter("%(asctime)s %(message)s").format(record)
    assert hasattr(record, "asctime")

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"budget_id": 3}


def test_json_formatter_with_exception():
    """Test that JSONFormatter correctly handles exceptions."""
    formatter = JSONFormatter()

    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="test.logger",
        level=logging.ERROR,
        pathname="test.py",
        lineno=42,
        msg="Error occurred",
        args=(),
        exc_info=exc_info,
    )

    log_data = json.loads(formatter.format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_setup_logging(config):
    """Test that logging setup creates a rotating JSON log file."""
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "dailybudget"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    log_file = config.DATA_DIR / "logs" / "dailybudget.log"
    assert log_file.exists()

    get_logger("services.monthly_budgets").info("Budget created", extra={"budget_id": 3})
    for handler in logger.handlers:
        handler.flush()

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "dailybudget.services.monthly_budgets"
    assert entries[-1]["extra"] == {"budget_id": 3}


def test_setup_logging_is_repeatable(config):
    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    """Test that get_logger returns properly namespaced loggers."""
    assert get_logger("module1").name == "dailybudget.module1"
    assert get_logger("dailybudget.services").name == "dailybudget.services"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(config, dev_mode):
    """Test that console logging level adjusts based on dev mode."""
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    expected_level = logging.INFO if dev_mode else logging.WARNING
    assert console_handler.level == expected_level
