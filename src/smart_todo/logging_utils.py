"""Logging setup with a custom trace level."""

import logging
from typing import Any

# Define custom TRACE level (lower than DEBUG)
TRACE_LEVEL = 5

VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def add_trace_level() -> None:
    """Register the TRACE level name and a ``Logger.trace`` method."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        """Log a message with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    logging.Logger.trace = trace  # type: ignore[attr-defined]


def configure_logging(verbose: bool = False, trace: bool = False) -> int:
    """
    Configure root logging for command-line use.

    Args:
        verbose: Show DEBUG messages, including every rule hit
        trace: Show TRACE messages (most verbose)

    Returns:
        The level that was configured
    """
    add_trace_level()

    if trace:
        level, fmt = TRACE_LEVEL, VERBOSE_FORMAT
    elif verbose:
        level, fmt = logging.DEBUG, VERBOSE_FORMAT
    else:
        level, fmt = logging.WARNING, DEFAULT_FORMAT

    logging.basicConfig(level=level, format=fmt)

    # The Ollama client logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.INFO if trace else logging.WARNING)
    return level
