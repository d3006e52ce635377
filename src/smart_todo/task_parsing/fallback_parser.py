"""Deterministic, rule-based task parser that works without any AI service."""

import logging
from datetime import date, datetime, time

from smart_todo.logging_utils import TRACE_LEVEL

from .config import URGENT_HYPHEN_WINDOW, URGENT_PREFIX
from .models import TaskCategory, TaskDraft, TaskPriority
from .rules import CATEGORY_RULES, DATE_RULES, PRIORITY_RULES, TIME_RULES

logger = logging.getLogger(__name__)


def has_urgent_prefix(text: str) -> bool:
    """Check whether the text opens with the URGENT marker (any case)."""
    return text.strip().upper().startswith(URGENT_PREFIX)


class FallbackTaskParser:
    """
    Extracts task attributes from free-form text using ordered rule tables.

    Parsing is a pure function of the text and the reference instant: the
    same input always yields the same draft, and malformed input simply
    leaves the corresponding fields at their defaults.
    """

    def parse(self, text: str, now: datetime) -> TaskDraft:
        """
        Parse a task description into a draft.

        Args:
            text: Raw task description
            now: Reference instant for relative date expressions

        Returns:
            TaskDraft with every field the rules could detect
        """
        text = text.strip()
        today = now.date()

        draft = TaskDraft(
            title=self.extract_title(text),
            due_date=self.detect_due_date(text, today),
            due_time=self.detect_time(text),
            priority=self.detect_priority(text),
            category=self.detect_category(text),
        )

        logger.debug(
            f"Fallback parse of '{text}': due_date={draft.due_date}, "
            f"due_time={draft.due_time}, priority={draft.priority.value}, "
            f"category={draft.category.value}"
        )
        return draft

    def extract_title(self, text: str) -> str:
        """Use the full text as title, minus an ``URGENT -`` style prefix."""
        text = text.strip()
        if has_urgent_prefix(text):
            hyphen = text.find("-")
            if 0 <= hyphen < URGENT_HYPHEN_WINDOW:
                return text[hyphen + 1 :].strip()
        return text

    def detect_priority(self, text: str) -> TaskPriority:
        if has_urgent_prefix(text):
            return TaskPriority.HIGH

        for priority, pattern in PRIORITY_RULES:
            match = pattern.search(text)
            if match:
                logger.debug(f"Priority '{priority.value}' from keyword '{match.group(0)}'")
                return priority

        return TaskPriority.MEDIUM

    def detect_time(self, text: str) -> time | None:
        for rule in TIME_RULES:
            match = rule.pattern.search(text)
            if not match:
                continue

            value = rule.resolver(match)
            if value is not None:
                logger.debug(f"Detected time ({rule.name}): '{match.group(0)}' -> {value:%H:%M}")
                return value

        return None

    def detect_category(self, text: str) -> TaskCategory:
        for category, pattern in CATEGORY_RULES:
            if pattern.search(text):
                return category

        return TaskCategory.GENERAL

    def detect_due_date(self, text: str, today: date) -> date | None:
        """
        Resolve the due date with the first date rule that succeeds.

        Args:
            text: Raw task description
            today: Reference day

        Returns:
            Due date, or None if no rule matched
        """
        for rule in DATE_RULES:
            match = rule.pattern.search(text)
            if not match:
                continue

            value = rule.resolver(match, today)
            if value is None:
                logger.debug(f"Ignoring invalid date ({rule.name}): '{match.group(0)}'")
                continue

            logger.debug(f"Detected date ({rule.name}): '{match.group(0)}' -> {value.isoformat()}")
            return value

        logger.log(TRACE_LEVEL, f"No date rule matched '{text}'")
        return None
