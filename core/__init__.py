"""
Core Module - Foundation components for Rule Chatbot
====================================================

This module provides the foundational components including:
- Configuration management
- Logging setup
- Exception handling
"""

from .config import Config, load_config, save_config, create_default_config
from .exceptions import (
    ResponderError,
    ConfigError,
    SourceUnavailable,
    MalformedRules,
    EmptyTemplate,
)
from .logging import setup_logging, get_logger, set_log_context, clear_log_context

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "create_default_config",
    "ResponderError",
    "ConfigError",
    "SourceUnavailable",
    "MalformedRules",
    "EmptyTemplate",
    "setup_logging",
    "get_logger",
    "set_log_context",
    "clear_log_context",
]
