"""
Exception Definitions - Custom exceptions for Rule Chatbot
==========================================================

This module defines all custom exceptions used throughout the application,
providing clear error handling and meaningful error messages.
"""


class ResponderError(Exception):
    """
    Base exception for all Rule Chatbot errors.

    All custom exceptions in this application inherit from this base class,
    allowing for easy catching of all application-specific errors.

    Attributes:
        message (str): Human-readable error description
        details (dict): Additional error details for debugging
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message with details if present."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(ResponderError):
    """
    Configuration-related errors.

    Raised when there are issues with:
    - Unreadable configuration files
    - Invalid configuration values
    - Configuration parsing errors
    """
    pass


class SourceUnavailable(ResponderError):
    """
    Rule source cannot be read.

    Raised when the rules file is missing, is a directory,
    or cannot be opened for reading.
    """
    pass


class MalformedRules(ResponderError):
    """
    Rule data is structurally invalid.

    Raised when:
    - The source cannot be decoded (bad JSON/YAML syntax)
    - The top level is not a list of records
    - A record is missing a field or a field has the wrong type
    """
    pass


class EmptyTemplate(ResponderError):
    """
    A matched rule has no response templates to render.
    """
    pass
