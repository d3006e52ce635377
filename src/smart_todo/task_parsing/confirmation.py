"""Applying the user's date/time confirmation to a parsed draft."""

from dataclasses import replace
from datetime import date, time

from .formatting import annotate_due_time
from .models import TaskDraft


def picker_defaults(draft: TaskDraft) -> tuple[str, str]:
    """Values to pre-fill a date picker (YYYY-MM-DD) and time selector (HH:MM)."""
    return (
        draft.due_date.isoformat() if draft.due_date else "",
        draft.due_time.strftime("%H:%M") if draft.due_time else "",
    )


def confirm_draft(
    draft: TaskDraft,
    original_text: str,
    due_date: date | None,
    due_time: time | None,
) -> TaskDraft:
    """
    Build the draft the user confirmed.

    The picked date and time replace the parsed ones (None clears them), an
    empty title falls back to the original text, and a draft with both date
    and time gets its due time noted in the description.
    """
    confirmed = replace(
        draft,
        title=draft.title or original_text.strip(),
        due_date=due_date,
        due_time=due_time,
    )
    return annotate_due_time(confirmed)
