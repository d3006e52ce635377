"""Tests for follow-up suggestions."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from smart_todo.task_parsing.exceptions import AiUnavailableError
from smart_todo.task_parsing.follow_up import FollowUpSuggester, fallback_follow_up
from smart_todo.task_parsing.models import TaskCategory, TaskDraft


@pytest.mark.unit
class TestFallbackFollowUp:
    """Test cases for canned follow-up selection."""

    @pytest.mark.parametrize(
        ("title", "category", "expected"),
        [
            ("Email the client", TaskCategory.WORK, "Update team on progress"),
            ("Email the landlord", TaskCategory.PERSONAL, "Follow up if no response within 2 days"),
            ("Buy milk", TaskCategory.SHOPPING, "Check if you need anything else from the store"),
            ("Dentist checkup", TaskCategory.HEALTH, "Schedule your next appointment"),
            ("Call mom", TaskCategory.PERSONAL, "Send a follow-up message with call summary"),
            ("Phone the plumber", TaskCategory.GENERAL, "Send a follow-up message with call summary"),
            ("Water the plants", TaskCategory.GENERAL, "Review what you've accomplished today"),
        ],
    )
    def test_rule_order(self, title: str, category: TaskCategory, expected: str) -> None:
        """Test that the first matching rule decides the suggestion."""
        assert fallback_follow_up(TaskDraft(title=title, category=category)) == expected


@pytest.mark.unit
@pytest.mark.asyncio
class TestFollowUpSuggester:
    """Test cases for FollowUpSuggester."""

    async def test_uses_generator_answer(self) -> None:
        """Test that the generator's suggestion is returned when available."""
        generator = AsyncMock()
        generator.suggest_follow_up.return_value = "Send the meeting notes"
        draft = TaskDraft(title="Team meeting", category=TaskCategory.WORK)

        suggestion = await FollowUpSuggester(generator).suggest(draft)

        assert suggestion == "Send the meeting notes"
        generator.suggest_follow_up.assert_called_once_with(draft)

    async def test_generator_error_falls_back(self) -> None:
        """Test that a failing generator yields the canned suggestion."""
        generator = AsyncMock()
        generator.suggest_follow_up.side_effect = AiUnavailableError("Connection failed")

        suggestion = await FollowUpSuggester(generator).suggest(
            TaskDraft(title="Buy milk", category=TaskCategory.SHOPPING)
        )

        assert suggestion == "Check if you need anything else from the store"

    async def test_slow_generator_falls_back(self) -> None:
        """Test that a generator missing the deadline is abandoned."""

        async def slow(draft: TaskDraft) -> str:
            await asyncio.sleep(5)
            return "too late"

        generator = AsyncMock()
        generator.suggest_follow_up.side_effect = slow

        suggestion = await FollowUpSuggester(generator, timeout=0.01).suggest(
            TaskDraft(title="Call mom")
        )

        assert suggestion == "Send a follow-up message with call summary"

    async def test_generator_raising_immediately_falls_back(self) -> None:
        """Test that a generator failing before returning an awaitable is contained."""
        generator = Mock()
        generator.suggest_follow_up.side_effect = RuntimeError("client not configured")

        suggestion = await FollowUpSuggester(generator).suggest(
            TaskDraft(title="Dentist checkup", category=TaskCategory.HEALTH)
        )

        assert suggestion == "Schedule your next appointment"

    async def test_without_generator(self) -> None:
        """Test that no generator means the canned suggestion."""
        suggestion = await FollowUpSuggester().suggest(TaskDraft(title="Water the plants"))

        assert suggestion == "Review what you've accomplished today"
