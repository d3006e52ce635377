"""Parse Reconciler merging AI guesses with the deterministic fallback parser."""

import logging
import time
from dataclasses import replace
from datetime import date, datetime, timedelta
from datetime import time as clock_time
from enum import Enum
from typing import TypeVar

from .bounded import bounded_call
from .config import DEFAULT_PARSE_TIMEOUT
from .fallback_parser import FallbackTaskParser, has_urgent_prefix
from .interfaces import AiTaskParser
from .models import (
    AiParseResult,
    Failed,
    Ok,
    ParseSource,
    ReconciliationResult,
    TaskCategory,
    TaskDraft,
    TaskPriority,
    TimedOut,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def parse_iso_date(value: str | None) -> date | None:
    """Parse an ISO 8601 date (or date-time) string, None if it is not one."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def parse_clock_time(value: str | None) -> clock_time | None:
    """Parse a 24-hour ``HH:MM`` string, None if it is not one."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        return None


def mentions_tomorrow(text: str) -> bool:
    return "tomorrow" in text.lower()


class ParseReconciler:
    """
    Produces the final task draft for a piece of text.

    The AI parser is raced against a fixed deadline while the deterministic
    parser always runs as a safety net. The reconciler never raises: any AI
    failure degrades silently to the deterministic draft.
    """

    def __init__(
        self,
        ai_parser: AiTaskParser | None = None,
        fallback_parser: FallbackTaskParser | None = None,
        timeout: float = DEFAULT_PARSE_TIMEOUT,
    ) -> None:
        """
        Initialize the reconciler.

        Args:
            ai_parser: Optional AI collaborator; None means AI is not configured
            fallback_parser: Deterministic parser, a default one is created if omitted
            timeout: Deadline for the AI parser in seconds
        """
        self._ai_parser = ai_parser
        self._fallback_parser = fallback_parser or FallbackTaskParser()
        self._timeout = timeout

    async def parse(self, text: str, now: datetime) -> TaskDraft:
        """Parse text into the final task draft."""
        result = await self.reconcile(text, now)
        return result.draft

    async def reconcile(self, text: str, now: datetime) -> ReconciliationResult:
        """
        Parse text and report which source the final draft came from.

        Args:
            text: Raw task description
            now: Reference instant

        Returns:
            ReconciliationResult with the final and fallback drafts
        """
        start_time = time.time()

        outcome: Ok[AiParseResult] | TimedOut | Failed | None = None
        ai_parser = self._ai_parser
        if ai_parser is not None:
            outcome = await bounded_call(
                lambda: ai_parser.parse_task(text, now), self._timeout, label="AI parse"
            )

        try:
            fallback = self._fallback_parser.parse(text, now)
        except Exception as e:
            logger.error(f"Fallback parser failed on '{text}': {e}")
            fallback = TaskDraft(title=text.strip())

        if isinstance(outcome, Ok):
            draft = self.merge(text, now, outcome.value, fallback)
            source = ParseSource.AI
        else:
            if outcome is not None:
                logger.warning(f"AI parser unavailable ({outcome}), using fallback result")
            draft = fallback
            source = ParseSource.FALLBACK

        processing_time = time.time() - start_time
        logger.info(
            f"Reconciled '{text}' from {source.value}: due_date={draft.due_date}, "
            f"due_time={draft.due_time}, priority={draft.priority.value}, "
            f"category={draft.category.value}, time={processing_time:.3f}s"
        )

        return ReconciliationResult(
            draft=draft,
            source=source,
            fallback_draft=fallback,
            ai_outcome=outcome,
            processing_time=processing_time,
        )

    def merge(
        self, text: str, now: datetime, ai_result: AiParseResult, fallback: TaskDraft
    ) -> TaskDraft:
        """
        Merge an AI guess onto the fallback draft.

        The AI result is the base. Its due date is replaced by the fallback's
        when invalid or in the past, "tomorrow" in the text always pins the due
        date to the next day, a missing due date is backfilled from the
        fallback, and an URGENT prefix always forces high priority. Fields the
        AI got wrong or left out fall back to the deterministic values.
        """
        today = now.date()

        due_date = parse_iso_date(ai_result.due_date)
        if due_date is None or due_date < today:
            if ai_result.due_date:
                logger.warning(
                    f"Invalid or past date from AI parser: {ai_result.due_date}, "
                    f"using fallback date {fallback.due_date}"
                )
            due_date = fallback.due_date

        if mentions_tomorrow(text):
            tomorrow = today + timedelta(days=1)
            if due_date != tomorrow:
                logger.warning(
                    f"Task mentions 'tomorrow' but date was {due_date}, forcing {tomorrow}"
                )
            due_date = tomorrow

        if due_date is None and fallback.due_date is not None:
            due_date = fallback.due_date

        due_time = fallback.due_time
        if ai_result.due_time:
            due_time = parse_clock_time(ai_result.due_time) or fallback.due_time

        priority = self._coerce(TaskPriority, ai_result.priority, fallback.priority)
        if has_urgent_prefix(text):
            priority = TaskPriority.HIGH

        return replace(
            fallback,
            title=(ai_result.title or "").strip() or fallback.title,
            description=(ai_result.description or "").strip(),
            due_date=due_date,
            due_time=due_time,
            priority=priority,
            category=self._coerce(TaskCategory, ai_result.category, fallback.category),
            notes="",
        )

    @staticmethod
    def _coerce(enum_type: type[E], value: str | None, default: E) -> E:
        if not value:
            return default
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            logger.warning(f"Invalid {enum_type.__name__} '{value}', using '{default.value}'")
            return default
