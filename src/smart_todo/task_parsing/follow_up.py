"""Follow-up suggestions for completed tasks."""

import logging

from .bounded import bounded_call
from .config import DEFAULT_FOLLOW_UP_TIMEOUT
from .interfaces import FollowUpGenerator
from .models import Ok, TaskCategory, TaskDraft

logger = logging.getLogger(__name__)


def fallback_follow_up(draft: TaskDraft) -> str:
    """Pick a canned follow-up from the task's category and title."""
    title = draft.title.lower()

    if draft.category == TaskCategory.WORK:
        return "Update team on progress"
    if "email" in title:
        return "Follow up if no response within 2 days"
    if draft.category == TaskCategory.SHOPPING:
        return "Check if you need anything else from the store"
    if draft.category == TaskCategory.HEALTH:
        return "Schedule your next appointment"
    if "call" in title or "phone" in title:
        return "Send a follow-up message with call summary"
    return "Review what you've accomplished today"


class FollowUpSuggester:
    """Suggests what to do after a task is completed, with or without AI."""

    def __init__(
        self,
        generator: FollowUpGenerator | None = None,
        timeout: float = DEFAULT_FOLLOW_UP_TIMEOUT,
    ) -> None:
        self._generator = generator
        self._timeout = timeout

    async def suggest(self, draft: TaskDraft) -> str:
        """
        Suggest a single follow-up action.

        Never raises; falls back to a canned suggestion when the generator is
        missing, fails, or misses the deadline.
        """
        generator = self._generator
        if generator is not None:
            outcome = await bounded_call(
                lambda: generator.suggest_follow_up(draft), self._timeout, label="Follow-up"
            )
            if isinstance(outcome, Ok):
                return outcome.value
            logger.warning(f"Follow-up suggestion unavailable ({outcome}), using fallback")

        return fallback_follow_up(draft)
