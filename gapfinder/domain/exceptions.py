"""
Domain-specific exception hierarchy for the gap finder application.
"""


class GapFinderError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(GapFinderError):
    """Raised when a configuration value or search parameter is invalid."""

    def __init__(self, message: str, parameter: str | None = None):
        super().__init__(message)
        self.parameter = parameter

    def __str__(self) -> str:
        message = super().__str__()
        if self.parameter:
            return f"{self.parameter}: {message}"
        return message


class CalendarAPIError(GapFinderError):
    """Raised when calendar data cannot be fetched or parsed."""


class AuthenticationError(GapFinderError):
    """Raised when authentication or token handling fails."""


class ClipboardError(GapFinderError):
    """Raised when the report cannot be copied to the system clipboard."""
