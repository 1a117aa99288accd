"""
Centralized Logging Configuration for PropScore
===============================================

Provides structured JSON logging for the API and pipeline.

Features:
- JSON structured logging format for log aggregation
- Configurable log level via LOG_LEVEL env var
- Console (human-readable or JSON) handler, optional rotating JSON file handler
- Structured logging with extra fields support

Usage:
    from propscore.core.logging_config import get_logger, setup_logging

    # At process start:
    setup_logging("propscore_api")

    # In modules:
    logger = get_logger(__name__)
    logger.info("Processing props", extra={"count": 12, "event_id": "abc"})

Environment Variables:
    LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    LOG_FORMAT: Console format ('json' or 'text', default: 'text')
    LOG_DIR: Enables the rotating JSON file handler in this directory
"""

import json
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs log records as JSON objects with consistent schema:
    {
        "timestamp": "2025-11-20T19:30:00.123456",
        "level": "INFO",
        "logger": "propscore.pipeline.orchestrator",
        "message": "Props ranked",
        "module": "orchestrator",
        "function": "get_top_props",
        "line": 212,
        "extra": {"event_id": "abc", "recommended": 4}
    }
    """

    # Standard log record attributes to exclude from extra fields
    RESERVED_ATTRS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
        "color_message",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_dict: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        extra_fields = {}
        for key, value in record.__dict__.items():
            if key not in self.RESERVED_ATTRS and not key.startswith("_"):
                try:
                    json.dumps(value)
                    extra_fields[key] = value
                except (TypeError, ValueError):
                    extra_fields[key] = str(value)

        if extra_fields:
            log_dict["extra"] = extra_fields

        if record.exc_info:
            log_dict["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_dict, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color support.

    Format: TIMESTAMP - LEVEL - LOGGER - MESSAGE [extra_key=extra_value, ...]
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors and level in self.COLORS:
            level_str = f"{self.COLORS[level]}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"

        log_line = f"{timestamp} - {level_str} - {record.name} - {record.getMessage()}"

        extra_fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in JSONFormatter.RESERVED_ATTRS and not key.startswith("_")
        ]
        if extra_fields:
            log_line += f" [{', '.join(extra_fields)}]"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


def get_log_level() -> int:
    """Get log level from LOG_LEVEL environment variable."""
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_name, logging.INFO)


def setup_logging(
    log_name: str = "propscore",
    level: Optional[int] = None,
    log_dir: Optional[str] = None,
    console_format: Optional[str] = None,
    file_format: str = "json",
    quiet: bool = False,
) -> logging.Logger:
    """
    Configure structured logging.

    Args:
        log_name: Base name for the log file (e.g., 'propscore_api')
        level: Logging level (default: from LOG_LEVEL env var or INFO)
        log_dir: Directory for log files (default: LOG_DIR env var; no file if unset)
        console_format: Console output format ('text' or 'json', default: LOG_FORMAT or 'text')
        file_format: File output format ('text' or 'json')
        quiet: If True, only show WARNING+ on console

    Returns:
        Configured root logger instance
    """
    if level is None:
        level = get_log_level()
    if console_format is None:
        console_format = os.environ.get("LOG_FORMAT", "text").lower()
    if log_dir is None:
        log_dir = os.environ.get("LOG_DIR")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING if quiet else level)
    if console_format == "json":
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(ConsoleFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    log_file = None
    if log_dir:
        logs_path = Path(log_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime("%Y-%m-%d")
        log_file = logs_path / f"{log_name}_{today}.log"

        file_handler = RotatingFileHandler(
            log_file,
            mode="a",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=7,
        )
        file_handler.setLevel(level)
        if file_format == "json":
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        root_logger.addHandler(file_handler)

    # Suppress overly verbose libraries
    for lib in ["aiohttp", "asyncio", "urllib3"]:
        logging.getLogger(lib).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging initialized",
        extra={
            "log_name": log_name,
            "level": logging.getLevelName(level),
            "log_file": str(log_file) if log_file else None,
            "console_format": console_format,
        },
    )

    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance for a module.

    Example:
        logger = get_logger(__name__)
        logger.info("Fetched game logs", extra={"player_id": 265, "games": 15})
    """
    return logging.getLogger(name)
