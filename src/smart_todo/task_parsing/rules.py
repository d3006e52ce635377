"""Rule tables for deterministic task parsing.

Each concern (priority, time of day, category, due date) is described by an
ordered table. Tables are evaluated top to bottom and the first rule that
resolves to a value wins. Rules never raise for unexpected input; a resolver
that cannot produce a valid value returns ``None`` and evaluation moves on to
the next rule.
"""

import calendar
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, time, timedelta

from .models import TaskCategory, TaskPriority

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_WEEKDAY_ALT = "|".join(WEEKDAYS)
_MONTH_ALT = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
_MERIDIEM = r"(am|pm|a\.m\.|p\.m\.)"


def _keywords(*words: str) -> re.Pattern[str]:
    """Compile a case-insensitive, word-bounded alternation of phrases."""
    alternation = "|".join(re.escape(word) for word in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Priority
# ---------------------------------------------------------------------------

HIGH_PRIORITY_PATTERN = _keywords(
    "urgent", "asap", "emergency", "high priority", "important", "critical",
    "super important", "very important", "top priority", "highest priority",
    "crucial", "vital", "essential", "priority", "immediate", "right away",
    "as soon as possible", "immediately", "now", "quick", "quickly", "fast",
    "promptly", "expedite", "expedited", "rush", "hurry", "hurried", "pressing",
    "imperative", "prioritize", "significant", "serious", "severe", "major",
    "key", "primary", "main", "principal", "foremost", "paramount", "supreme",
    "utmost", "extreme", "dire", "grave", "life-or-death", "time-sensitive",
    "deadline", "due", "overdue", "stat",
)

LOW_PRIORITY_PATTERN = _keywords(
    "low priority", "whenever", "not urgent", "someday", "when you have time",
    "no rush", "not important", "can wait", "later", "eventually", "sometime",
    "some time", "at your leisure", "when convenient", "if you have time",
    "if you get a chance", "if possible", "maybe", "perhaps", "possibly",
    "optionally", "secondary", "minor", "trivial", "non-essential",
    "non-critical", "non-urgent", "unimportant", "insignificant", "negligible",
    "marginal", "peripheral", "incidental", "supplementary", "extra", "bonus",
    "additional", "any time", "leisurely", "casual", "relaxed", "easy",
    "simple", "basic", "standard", "regular", "normal", "ordinary", "common",
    "usual", "typical", "average", "moderate", "reasonable", "fair", "decent",
    "acceptable", "tolerable", "adequate", "sufficient", "enough", "fine",
    "okay", "alright", "not critical", "not essential", "not pressing",
    "not serious", "not significant", "not time-sensitive",
)

# Checked in order; the high table wins when both match.
PRIORITY_RULES: tuple[tuple[TaskPriority, re.Pattern[str]], ...] = (
    (TaskPriority.HIGH, HIGH_PRIORITY_PATTERN),
    (TaskPriority.LOW, LOW_PRIORITY_PATTERN),
)


# ---------------------------------------------------------------------------
# Time of day
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeRule:
    """Maps a regex match to a time of day."""

    name: str
    pattern: re.Pattern[str]
    resolver: Callable[[re.Match[str]], time | None]


def _to_24h(hour: int, minute: int, is_pm: bool) -> time:
    if is_pm:
        return time(hour if hour == 12 else hour + 12, minute)
    return time(0 if hour == 12 else hour, minute)


def _resolve_meridiem_clock(match: re.Match[str]) -> time:
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    return _to_24h(hour, minute, match.group(3).lower().startswith("p"))


def _resolve_24h_clock(match: re.Match[str]) -> time:
    return time(int(match.group(1)), int(match.group(2)))


def _resolve_at_clock(match: re.Match[str]) -> time:
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    if match.group(3):
        return _to_24h(hour, minute, match.group(3).lower().startswith("p"))
    if hour == 12:
        return time(12, minute)
    # Bare "at 7" reads as evening; 1-5 stay in the morning.
    return _to_24h(hour, minute, 6 <= hour <= 11)


NAMED_INSTANTS = {
    "noon": time(12, 0),
    "midday": time(12, 0),
    "midnight": time(0, 0),
}

NAMED_PERIODS = {
    "early morning": time(7, 0),
    "late morning": time(11, 0),
    "morning": time(9, 0),
    "early afternoon": time(13, 0),
    "late afternoon": time(16, 0),
    "afternoon": time(14, 0),
    "early evening": time(17, 0),
    "late evening": time(21, 0),
    "evening": time(19, 0),
    "night": time(21, 0),
}

TIME_RULES: tuple[TimeRule, ...] = (
    TimeRule(
        "12-hour clock",
        re.compile(
            rf"\b(1[0-2]|0?[1-9])(?::([0-5][0-9]))?\s*{_MERIDIEM}(?![a-z])",
            re.IGNORECASE,
        ),
        _resolve_meridiem_clock,
    ),
    TimeRule(
        "24-hour clock",
        re.compile(r"\b([01][0-9]|2[0-3]):([0-5][0-9])\b"),
        _resolve_24h_clock,
    ),
    TimeRule(
        "named instant",
        re.compile(r"\b(noon|midday|midnight)\b", re.IGNORECASE),
        lambda match: NAMED_INSTANTS[match.group(1).lower()],
    ),
    TimeRule(
        "named period",
        # Longer phrases first so "early morning" is not read as "morning".
        re.compile(r"\b(" + "|".join(NAMED_PERIODS) + r")\b", re.IGNORECASE),
        lambda match: NAMED_PERIODS[" ".join(match.group(1).lower().split())],
    ),
    TimeRule(
        "at clock",
        re.compile(
            rf"\bat\s+(1[0-2]|0?[1-9])(?::([0-5][0-9]))?\s*(?:o'?clock)?\s*{_MERIDIEM}?",
            re.IGNORECASE,
        ),
        _resolve_at_clock,
    ),
)


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------

# Checked in order; the first matching bucket wins.
CATEGORY_RULES: tuple[tuple[TaskCategory, re.Pattern[str]], ...] = (
    (
        TaskCategory.WORK,
        _keywords("work", "job", "office", "meeting", "presentation", "client", "project"),
    ),
    (
        TaskCategory.PERSONAL,
        _keywords("personal", "home", "family", "hobby", "myself"),
    ),
    (
        TaskCategory.SHOPPING,
        _keywords("shop", "buy", "purchase", "get", "grocery", "groceries", "store"),
    ),
    (
        TaskCategory.HEALTH,
        _keywords(
            "doctor", "health", "exercise", "gym", "workout", "medicine", "medical",
            "dentist",
        ),
    ),
)


# ---------------------------------------------------------------------------
# Due date
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateRule:
    """Maps a regex match and the reference day to a due date."""

    name: str
    pattern: re.Pattern[str]
    resolver: Callable[[re.Match[str], date], date | None]


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _upcoming(year: int, month: int, day: int, today: date) -> date | None:
    """The given month/day this year, or next year if it has already passed."""
    candidate = _safe_date(year, month, day)
    if candidate is None or candidate < today:
        return _safe_date(year + 1, month, day)
    return candidate


def _resolve_tomorrow(match: re.Match[str], today: date) -> date:
    return today + timedelta(days=1)


def _resolve_numeric(match: re.Match[str], today: date) -> date | None:
    month = int(match.group(1))
    day = int(match.group(2))
    if match.group(3):
        year = int(match.group(3))
        if year < 100:
            year += 2000
        return _safe_date(year, month, day)
    return _upcoming(today.year, month, day, today)


def _weekday_index(name: str) -> int:
    return WEEKDAYS.index(name.lower())


def _resolve_this_weekday(match: re.Match[str], today: date) -> date:
    days_ahead = (_weekday_index(match.group(1)) - today.weekday()) % 7
    return today + timedelta(days=days_ahead)


def _resolve_next_weekday(match: re.Match[str], today: date) -> date:
    days_ahead = 7 + (_weekday_index(match.group(1)) - today.weekday()) % 7
    return today + timedelta(days=days_ahead)


def _resolve_bare_weekday(match: re.Match[str], today: date) -> date:
    days_ahead = (_weekday_index(match.group(1)) - today.weekday()) % 7 or 7
    return today + timedelta(days=days_ahead)


def _resolve_month_day(match: re.Match[str], today: date) -> date | None:
    month = MONTHS[match.group(1).lower()[:3]]
    return _upcoming(today.year, month, int(match.group(2)), today)


def _resolve_today(match: re.Match[str], today: date) -> date:
    return today


def _resolve_next_week(match: re.Match[str], today: date) -> date:
    return today + timedelta(days=7)


def _resolve_due_in(match: re.Match[str], today: date) -> date | None:
    amount = int(match.group(1))
    unit = match.group(2).lower()
    try:
        if unit.startswith("day"):
            return today + timedelta(days=amount)
        if unit.startswith("week"):
            return today + timedelta(weeks=amount)
        return add_months(today, amount)
    except (OverflowError, ValueError):
        # Beyond the supported calendar range
        return None


# Order matters: specific forms (numeric dates) come before generic ones
# (bare weekday names) and the first rule that resolves wins.
DATE_RULES: tuple[DateRule, ...] = (
    DateRule("tomorrow", re.compile(r"tomorrow", re.IGNORECASE), _resolve_tomorrow),
    DateRule(
        "numeric date",
        re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b"),
        _resolve_numeric,
    ),
    DateRule(
        "this weekday",
        re.compile(rf"\bthis\s+({_WEEKDAY_ALT})\b", re.IGNORECASE),
        _resolve_this_weekday,
    ),
    DateRule(
        "next weekday",
        re.compile(rf"\bnext\s+({_WEEKDAY_ALT})\b", re.IGNORECASE),
        _resolve_next_weekday,
    ),
    DateRule(
        "weekday",
        # A weekday directly followed by a month and day is a full date and is
        # left to the month-name rule.
        re.compile(
            rf"\b({_WEEKDAY_ALT})s?\b(?!,?\s+(?:{_MONTH_ALT})\.?\s+\d)",
            re.IGNORECASE,
        ),
        _resolve_bare_weekday,
    ),
    DateRule(
        "month name",
        re.compile(
            rf"\b({_MONTH_ALT})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?\b",
            re.IGNORECASE,
        ),
        _resolve_month_day,
    ),
    DateRule(
        "today",
        re.compile(
            r"\b(today|tonight|this\s+morning|this\s+afternoon|this\s+evening)\b",
            re.IGNORECASE,
        ),
        _resolve_today,
    ),
    DateRule("next week", re.compile(r"\bnext\s+week\b", re.IGNORECASE), _resolve_next_week),
    DateRule(
        "due in",
        re.compile(r"\bdue\s+in\s+(\d+)\s+(days?|weeks?|months?)\b", re.IGNORECASE),
        _resolve_due_in,
    ),
)
