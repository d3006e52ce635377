"""Unit tests for the Parse Reconciler."""

import asyncio
from datetime import date, datetime, time
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from smart_todo.task_parsing.exceptions import AiResponseError, AiUnavailableError
from smart_todo.task_parsing.fallback_parser import FallbackTaskParser
from smart_todo.task_parsing.models import (
    AiParseResult,
    Failed,
    Ok,
    ParseSource,
    TaskCategory,
    TaskDraft,
    TaskPriority,
    TimedOut,
)
from smart_todo.task_parsing.reconciler import (
    ParseReconciler,
    parse_clock_time,
    parse_iso_date,
)

# Wednesday
NOW = datetime(2024, 1, 10, 9, 30)


@pytest.fixture
def mock_ai_parser() -> AsyncMock:
    """Create a mock AI parser for testing."""
    ai_parser = AsyncMock()
    ai_parser.parse_task = AsyncMock()
    return ai_parser


def ai_result(**overrides: Any) -> AiParseResult:
    """Build a well-formed AI result with optional overrides."""
    fields: dict[str, Any] = {
        "title": "Call the Bank",
        "description": "Ask about the mortgage",
        "due_date": "2024-01-12",
        "due_time": "15:00",
        "priority": "medium",
        "category": "personal",
    }
    fields.update(overrides)
    return AiParseResult(**fields)


@pytest.mark.unit
class TestValueParsing:
    """Test cases for AI value parsing helpers."""

    def test_parse_iso_date(self) -> None:
        """Test ISO dates and date-times are accepted."""
        assert parse_iso_date("2024-01-12") == date(2024, 1, 12)
        assert parse_iso_date("2024-01-12T10:00:00") == date(2024, 1, 12)

    @pytest.mark.parametrize("value", [None, "", "next friday", "2024-02-30"])
    def test_parse_iso_date_rejects_invalid(self, value: str | None) -> None:
        """Test that non-dates parse to None."""
        assert parse_iso_date(value) is None

    def test_parse_clock_time(self) -> None:
        """Test HH:MM parsing."""
        assert parse_clock_time("09:05") == time(9, 5)
        assert parse_clock_time("3pm") is None
        assert parse_clock_time("25:00") is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestAiUnavailable:
    """Test that any AI failure yields the fallback draft."""

    @pytest.mark.parametrize(
        "error",
        [
            AiUnavailableError("Connection failed"),
            AiResponseError("Invalid JSON response"),
            RuntimeError("unexpected"),
        ],
    )
    async def test_ai_errors_fall_back(self, mock_ai_parser: AsyncMock, error: Exception) -> None:
        """Test that AI errors return the fallback result unchanged."""
        mock_ai_parser.parse_task.side_effect = error
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)
        text = "URGENT - call the bank tomorrow at 3pm"

        result = await reconciler.reconcile(text, NOW)

        assert result.source == ParseSource.FALLBACK
        assert isinstance(result.ai_outcome, Failed)
        assert result.draft == FallbackTaskParser().parse(text, NOW)
        assert result.draft.priority == TaskPriority.HIGH
        assert result.draft.due_date == date(2024, 1, 11)

    async def test_ai_timeout_falls_back(self, mock_ai_parser: AsyncMock) -> None:
        """Test that a slow AI is abandoned at the deadline."""

        async def slow_parse(text: str, now: datetime) -> AiParseResult:
            await asyncio.sleep(5)
            return ai_result(title="Late answer")

        mock_ai_parser.parse_task.side_effect = slow_parse
        reconciler = ParseReconciler(ai_parser=mock_ai_parser, timeout=0.01)

        result = await reconciler.reconcile("buy groceries next monday morning", NOW)

        assert isinstance(result.ai_outcome, TimedOut)
        assert result.source == ParseSource.FALLBACK
        assert result.draft.title == "buy groceries next monday morning"
        assert result.draft.due_time == time(9, 0)

    async def test_synchronous_ai_error_falls_back(self) -> None:
        """Test that an AI parser raising before returning an awaitable is contained."""
        ai_parser = Mock()
        ai_parser.parse_task.side_effect = RuntimeError("client not configured")
        reconciler = ParseReconciler(ai_parser=ai_parser)

        result = await reconciler.reconcile("pay rent friday", NOW)

        assert result.source == ParseSource.FALLBACK
        assert result.ai_outcome == Failed(reason="RuntimeError: client not configured")
        assert result.draft.due_date == date(2024, 1, 12)

    async def test_out_of_range_due_in_with_ai_down(self, mock_ai_parser: AsyncMock) -> None:
        """Test that huge 'due in' amounts give a dateless draft instead of an error."""
        mock_ai_parser.parse_task.side_effect = AiUnavailableError("down")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("pay due in 5000000 days", NOW)

        assert draft.title == "pay due in 5000000 days"
        assert draft.due_date is None

    async def test_broken_fallback_parser_is_contained(self) -> None:
        """Test that the reconciler still returns a draft if the rule parser fails."""
        fallback_parser = Mock()
        fallback_parser.parse.side_effect = OverflowError("date value out of range")
        reconciler = ParseReconciler(fallback_parser=fallback_parser)

        draft = await reconciler.parse("  pay rent  ", NOW)

        assert draft == TaskDraft(title="pay rent")

    async def test_no_ai_configured(self) -> None:
        """Test that a reconciler without AI returns the fallback draft."""
        reconciler = ParseReconciler()

        draft = await reconciler.parse("schedule dentist checkup", NOW)

        assert draft == FallbackTaskParser().parse("schedule dentist checkup", NOW)
        assert draft.category == TaskCategory.HEALTH


@pytest.mark.unit
@pytest.mark.asyncio
class TestMergeRules:
    """Test the precedence rules applied to a successful AI result."""

    async def test_ai_result_is_the_base(self, mock_ai_parser: AsyncMock) -> None:
        """Test that valid AI fields are used as they are."""
        mock_ai_parser.parse_task.return_value = ai_result()
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        result = await reconciler.reconcile("call the bank on friday at 3pm", NOW)

        assert result.source == ParseSource.AI
        assert isinstance(result.ai_outcome, Ok)
        assert result.draft.title == "Call the Bank"
        assert result.draft.description == "Ask about the mortgage"
        assert result.draft.due_date == date(2024, 1, 12)
        assert result.draft.due_time == time(15, 0)
        assert result.draft.category == TaskCategory.PERSONAL
        assert result.draft.notes == ""
        mock_ai_parser.parse_task.assert_called_once_with("call the bank on friday at 3pm", NOW)

    async def test_past_ai_date_uses_fallback_date(self, mock_ai_parser: AsyncMock) -> None:
        """Test that an AI date before today is replaced by the fallback date."""
        mock_ai_parser.parse_task.return_value = ai_result(due_date="2024-01-09")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("pay rent friday", NOW)

        assert draft.due_date == date(2024, 1, 12)

    async def test_past_ai_date_without_fallback_date(self, mock_ai_parser: AsyncMock) -> None:
        """Test that an AI date before today is dropped when the fallback has none."""
        mock_ai_parser.parse_task.return_value = ai_result(due_date="2024-01-09")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("water the plants", NOW)

        assert draft.due_date is None

    async def test_today_is_not_past(self, mock_ai_parser: AsyncMock) -> None:
        """Test that an AI date of today is kept."""
        mock_ai_parser.parse_task.return_value = ai_result(due_date="2024-01-10")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("water the plants", NOW)

        assert draft.due_date == date(2024, 1, 10)

    async def test_invalid_ai_date_uses_fallback_date(self, mock_ai_parser: AsyncMock) -> None:
        """Test that an unparseable AI date is replaced by the fallback date."""
        mock_ai_parser.parse_task.return_value = ai_result(due_date="next-ish friday")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("submit report 2/1", NOW)

        assert draft.due_date == date(2024, 2, 1)

    async def test_tomorrow_overrides_ai_date(self, mock_ai_parser: AsyncMock) -> None:
        """Test that 'tomorrow' in the text always pins the date to the next day."""
        mock_ai_parser.parse_task.return_value = ai_result(due_date="2024-01-20")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("Call mom Tomorrow", NOW)

        assert draft.due_date == date(2024, 1, 11)

    async def test_missing_ai_date_is_backfilled(self, mock_ai_parser: AsyncMock) -> None:
        """Test that the fallback date fills in when the AI found none."""
        mock_ai_parser.parse_task.return_value = ai_result(due_date=None)
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("book flights next friday", NOW)

        assert draft.due_date == date(2024, 1, 19)

    async def test_urgent_prefix_forces_high_priority(self, mock_ai_parser: AsyncMock) -> None:
        """Test that an URGENT prefix overrides the AI priority."""
        mock_ai_parser.parse_task.return_value = ai_result(priority="low")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("urgent - renew passport", NOW)

        assert draft.priority == TaskPriority.HIGH

    async def test_invalid_enums_use_fallback_values(self, mock_ai_parser: AsyncMock) -> None:
        """Test that out-of-range priority and category values are replaced."""
        mock_ai_parser.parse_task.return_value = ai_result(
            priority="super-duper", category="errands"
        )
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("buy milk someday", NOW)

        assert draft.priority == TaskPriority.LOW
        assert draft.category == TaskCategory.SHOPPING

    async def test_enum_values_are_case_insensitive(self, mock_ai_parser: AsyncMock) -> None:
        """Test that AI enum values are normalized."""
        mock_ai_parser.parse_task.return_value = ai_result(priority="High", category="WORK")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("send invoice", NOW)

        assert draft.priority == TaskPriority.HIGH
        assert draft.category == TaskCategory.WORK

    async def test_invalid_ai_time_uses_fallback_time(self, mock_ai_parser: AsyncMock) -> None:
        """Test that a malformed AI time is replaced by the fallback time."""
        mock_ai_parser.parse_task.return_value = ai_result(due_time="3 in the afternoon")
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("dentist friday at 4pm", NOW)

        assert draft.due_time == time(16, 0)

    async def test_empty_ai_title_uses_fallback_title(self, mock_ai_parser: AsyncMock) -> None:
        """Test that a blank AI title falls back to the input text."""
        mock_ai_parser.parse_task.return_value = ai_result(title="  ", description=None)
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        draft = await reconciler.parse("water the plants", NOW)

        assert draft.title == "water the plants"
        assert draft.description == ""

    async def test_reconciliation_is_deterministic(self, mock_ai_parser: AsyncMock) -> None:
        """Test that the same inputs give the same draft."""
        mock_ai_parser.parse_task.return_value = ai_result()
        reconciler = ParseReconciler(ai_parser=mock_ai_parser)

        first = await reconciler.parse("call the bank friday", NOW)
        second = await reconciler.parse("call the bank friday", NOW)

        assert first == second
