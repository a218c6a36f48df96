"""
Logging Module - Centralized logging configuration
=================================================

This module provides logging setup and utilities including:
- Structured JSON logging
- File and console handlers
- Context-aware logging
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any
import json
import threading

ROOT_LOGGER_NAME = "rule_chatbot"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, used for the log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if getattr(record, "context", None):
            entry["context"] = record.context
        return json.dumps(entry)


class ColoredFormatter(logging.Formatter):
    """Console formatter; warnings are yellow and errors red."""

    YELLOW = "\033[33m"
    RED = "\033[31m"

    def __init__(self):
        super().__init__("%(levelname)s %(asctime)s | %(name)s | %(message)s", "%H:%M:%S")

    def formatMessage(self, record: logging.LogRecord) -> str:
        text = super().formatMessage(record)
        if record.levelno >= logging.ERROR:
            return f"{self.RED}{text}\033[0m"
        if record.levelno >= logging.WARNING:
            return f"{self.YELLOW}{text}\033[0m"
        return text


class ContextFilter(logging.Filter):
    """
    Logging filter that adds context information to records.

    Attached to handlers so records from every child logger
    pick up the current thread's context (e.g. the session user id).
    """

    _context = threading.local()

    @classmethod
    def set_context(cls, **kwargs) -> None:
        if not hasattr(cls._context, "data"):
            cls._context.data = {}
        cls._context.data.update(kwargs)

    @classmethod
    def clear_context(cls) -> None:
        cls._context.data = {}

    @classmethod
    def get_context(cls) -> Dict[str, Any]:
        return dict(getattr(cls._context, "data", {}))

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context to log record. Always lets the record through."""
        record.context = self.get_context()
        return True


_configured = False


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: str = "INFO",
    json_format: bool = False,
    console_output: bool = True,
    force: bool = False
) -> None:
    """
    Set up logging configuration for the application.

    This should be called once at application startup. Later calls
    are ignored unless ``force`` is set.

    Args:
        log_dir: Directory for log files (optional)
        log_level: Minimum log level to capture
        json_format: Use JSON format for file logs
        console_output: Also output to console (stderr)
        force: Reconfigure even if logging was already set up

    Example:
        setup_logging(
            log_dir="~/.local/share/rule-chatbot/logs",
            log_level="DEBUG",
            json_format=True
        )
    """
    global _configured

    if _configured and not force:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    context_filter = ContextFilter()

    # Console output goes to stderr so it never interleaves with chat replies
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(ColoredFormatter())
        console_handler.addFilter(context_filter)
        root_logger.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir).expanduser()
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / "chatbot.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)

        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
                )
            )
        file_handler.addFilter(context_filter)
        root_logger.addHandler(file_handler)

        error_handler = logging.FileHandler(log_path / "errors.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(JSONFormatter())
        error_handler.addFilter(context_filter)
        root_logger.addHandler(error_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    _configured = True


def get_logger(name: str, **extra) -> logging.LoggerAdapter:
    """
    Get a logger under the ``rule_chatbot`` root.

    Keyword arguments become ``extra`` on every record, e.g.
    ``get_logger("rules.store", component="store")``.
    """
    full_name = name if name.startswith(ROOT_LOGGER_NAME) else f"{ROOT_LOGGER_NAME}.{name}"
    return logging.LoggerAdapter(logging.getLogger(full_name), extra)


def set_log_context(**kwargs) -> None:
    """
    Set thread-local logging context.

    Context values are attached to all subsequent log records
    in the current thread.

    Example:
        set_log_context(user_id="user123")
    """
    ContextFilter.set_context(**kwargs)


def clear_log_context() -> None:
    """Clear thread-local logging context."""
    ContextFilter.clear_context()
