"""Human-readable rendering of draft dates and times."""

import logging
from dataclasses import replace
from datetime import date, time, timedelta

from .models import TaskDraft

logger = logging.getLogger(__name__)


def day_suffix(day: int) -> str:
    """Ordinal suffix for a day of the month (1 -> "st", 12 -> "th")."""
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def format_time(value: time | str | None) -> str:
    """
    Render a 24-hour time as 12-hour clock text.

    Strings that are not ``HH:MM`` are returned unchanged.
    """
    if value is None or value == "":
        return ""

    if isinstance(value, str):
        try:
            hour_text, minute_text = value.split(":")
            hour, minute = int(hour_text), int(minute_text)
        except ValueError:
            logger.debug(f"Cannot format time '{value}'")
            return value
    else:
        hour, minute = value.hour, value.minute

    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {period}"


def format_date(value: date | None, today: date) -> str:
    """Render a due date relative to today: Today, Tomorrow, a weekday, or a full date."""
    if value is None:
        return ""
    if value == today:
        return "Today"
    if value == today + timedelta(days=1):
        return "Tomorrow"
    if value == today + timedelta(days=2):
        return f"{value:%A}"
    return f"{value:%A, %b} {value.day}, {value.year}"


def annotate_due_time(draft: TaskDraft) -> TaskDraft:
    """
    Add a "Due at ..." note to the description of a draft with date and time.

    An empty description becomes the full due statement; an existing one is
    prefixed once.
    """
    if draft.due_date is None or draft.due_time is None:
        return draft

    due_at = f"Due at {format_time(draft.due_time)}."
    if not draft.description:
        day = draft.due_date.day
        description = (
            f"{due_at} {draft.due_date:%B} {day}{day_suffix(day)} "
            f"at {format_time(draft.due_time)}"
        )
    elif "Due at" in draft.description:
        return draft
    else:
        description = f"{due_at} {draft.description}"

    return replace(draft, description=description)
