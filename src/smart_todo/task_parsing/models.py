"""Data models for natural-language task parsing."""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCategory(str, Enum):
    """Task category enumeration."""

    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    HEALTH = "health"
    GENERAL = "general"


class ParseSource(str, Enum):
    """Which parser the final draft was based on."""

    AI = "ai"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class TaskDraft:
    """Structured, not yet persisted result of parsing one task description."""

    title: str
    description: str = ""
    due_date: date | None = None
    due_time: time | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.GENERAL
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase field names of the draft contract."""
        return {
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "dueTime": self.due_time.strftime("%H:%M") if self.due_time else None,
            "priority": self.priority.value,
            "category": self.category.value,
            "notes": self.notes,
        }


@dataclass
class AiParseResult:
    """Best-effort guess returned by the AI parser.

    Values are kept exactly as the model produced them; validation happens
    during reconciliation.
    """

    title: str | None = None
    description: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    priority: str | None = None
    category: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Bounded call completed in time."""

    value: T


@dataclass(frozen=True)
class TimedOut:
    """Bounded call exceeded its deadline."""

    timeout: float


@dataclass(frozen=True)
class Failed:
    """Bounded call raised."""

    reason: str


BoundedResult = Ok[T] | TimedOut | Failed


@dataclass(frozen=True)
class ReconciliationResult:
    """Final draft plus how it was produced."""

    draft: TaskDraft
    source: ParseSource
    fallback_draft: TaskDraft
    ai_outcome: Ok[AiParseResult] | TimedOut | Failed | None = None
    processing_time: float = 0.0
