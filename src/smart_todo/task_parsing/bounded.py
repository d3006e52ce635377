"""Deadline-bounded awaiting of fallible collaborators."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .models import Failed, Ok, TimedOut

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded_call(
    call: Callable[[], Awaitable[T]], timeout: float, label: str = "call"
) -> Ok[T] | TimedOut | Failed:
    """
    Await a collaborator for at most ``timeout`` seconds.

    The call is started inside the guard, so a collaborator that raises before
    returning an awaitable is reported like any other failure. The pending call
    is cancelled when the deadline passes, so a late result can never reach the
    caller.

    Args:
        call: Zero-argument callable returning the coroutine or future to wait on
        timeout: Deadline in seconds
        label: Name used in log messages

    Returns:
        Ok with the value, TimedOut, or Failed with the error description
    """
    try:
        value = await asyncio.wait_for(call(), timeout=timeout)
    except TimeoutError:
        logger.warning(f"{label} timed out after {timeout:.1f}s")
        return TimedOut(timeout=timeout)
    except Exception as e:
        logger.warning(f"{label} failed: {e}")
        return Failed(reason=f"{type(e).__name__}: {e}")

    return Ok(value=value)
