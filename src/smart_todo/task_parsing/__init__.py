"""Natural-language task parsing with a rule-based fallback and optional AI."""

from .confirmation import confirm_draft, picker_defaults
from .fallback_parser import FallbackTaskParser
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
from .reconciler import ParseReconciler

__all__ = [
    "TaskDraft",
    "TaskPriority",
    "TaskCategory",
    "ParseSource",
    "AiParseResult",
    "Ok",
    "TimedOut",
    "Failed",
    "ReconciliationResult",
    "FallbackTaskParser",
    "ParseReconciler",
    "picker_defaults",
    "confirm_draft",
]
