"""Custom exceptions for task parsing functionality."""


class TaskParsingError(Exception):
    """Base exception for task parsing errors."""

    pass


class AiUnavailableError(TaskParsingError):
    """Exception raised when the AI parser cannot be reached or times out."""

    pass


class AiResponseError(TaskParsingError):
    """Exception raised when the AI parser returns an unusable payload."""

    pass
