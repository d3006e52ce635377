"""Abstract interfaces for the AI collaborators of the task parser."""

from abc import ABC, abstractmethod
from datetime import datetime

from smart_todo.task_parsing.models import AiParseResult, TaskDraft


class AiTaskParser(ABC):
    """Abstract interface for an AI-backed task parser."""

    @abstractmethod
    async def parse_task(self, text: str, now: datetime) -> AiParseResult:
        """
        Extract structured task fields from text.

        The result is an untrusted best-effort guess; callers validate every
        field before use. Implementations do not bound their own latency, the
        caller races them against a deadline.

        Args:
            text: Raw task description
            now: Reference instant for relative date expressions

        Returns:
            AiParseResult with the raw field values

        Raises:
            AiUnavailableError: If the service cannot be reached
            AiResponseError: If the service returns an unusable payload
        """
        pass


class FollowUpGenerator(ABC):
    """Abstract interface for suggesting a follow-up to a completed task."""

    @abstractmethod
    async def suggest_follow_up(self, draft: TaskDraft) -> str:
        """
        Suggest one short follow-up action.

        Args:
            draft: The completed task

        Returns:
            Follow-up action text

        Raises:
            AiUnavailableError: If the service cannot be reached
            AiResponseError: If the service returns an unusable payload
        """
        pass
