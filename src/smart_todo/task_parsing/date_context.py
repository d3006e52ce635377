"""Date/time context rendered into AI prompts so relative dates resolve correctly."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .rules import add_months


@dataclass
class DayReference:
    """One calendar day as presented to the model."""

    weekday: str
    readable: str
    iso: str
    is_today: bool = False


@dataclass
class DateTimeContext:
    """Reference dates around ``now``."""

    now: datetime
    current_week: list[DayReference] = field(default_factory=list)
    next_week: list[DayReference] = field(default_factory=list)
    tomorrow: date | None = None
    next_month_start: date | None = None
    end_of_month: date | None = None

    def render(self) -> str:
        """Render the context as the prompt section describing today's dates."""
        this_week = "\n".join(
            f"  {day.weekday} is {day.readable}{' (Today)' if day.is_today else ''}"
            for day in self.current_week
        )
        following_week = "\n".join(
            f"  {day.weekday} is {day.readable}" for day in self.next_week
        )
        return (
            "Today's complete date and time information:\n"
            f"- Current date and time: {self.now:%A, %B} {self.now.day}, {self.now:%Y %H:%M}\n"
            f"- Today is {_long_date(self.now.date())}\n"
            f"- ISO format: {self.now.isoformat(timespec='seconds')}\n\n"
            f"This week's dates:\n{this_week}\n\n"
            f"Next week's dates:\n{following_week}\n\n"
            "Other reference dates:\n"
            f"- Tomorrow is {_long_date(self.tomorrow)}\n"
            f"- Start of next month is {_long_date(self.next_month_start)}\n"
            f"- End of this month is {_long_date(self.end_of_month)}"
        )


def _long_date(day: date | None) -> str:
    if day is None:
        return "unknown"
    return f"{day:%A, %B} {day.day}, {day.year}"


def _reference(day: date, is_today: bool = False) -> DayReference:
    return DayReference(
        weekday=f"{day:%A}",
        readable=f"{day:%B} {day.day}, {day.year}",
        iso=day.isoformat(),
        is_today=is_today,
    )


def build_date_context(now: datetime) -> DateTimeContext:
    """
    Build the reference dates for a given instant.

    The current week is the seven days starting today; the next week is the
    seven days after that.
    """
    today = now.date()
    first_of_month = today.replace(day=1)
    next_month_start = add_months(first_of_month, 1)

    return DateTimeContext(
        now=now,
        current_week=[
            _reference(today + timedelta(days=offset), is_today=offset == 0)
            for offset in range(7)
        ],
        next_week=[_reference(today + timedelta(days=offset)) for offset in range(7, 14)],
        tomorrow=today + timedelta(days=1),
        next_month_start=next_month_start,
        end_of_month=next_month_start - timedelta(days=1),
    )
