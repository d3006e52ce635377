"""Heuristics deciding whether a free-form chat message reads like a new task."""

TASK_QUERY_PHRASES = (
    "what tasks",
    "show me my tasks",
    "list my tasks",
    "my tasks for",
    "do i have any tasks",
)

QUESTION_OPENERS = (
    "what",
    "how",
    "who",
    "when",
    "where",
    "why",
    "can you",
    "could you",
)

STRONG_TASK_INDICATORS = (
    "remind me to",
    "need to",
    "have to",
    "must",
    "don't forget to",
    "remember to",
    "add to my list",
    "add task",
    "new task",
)


def looks_like_task(message: str) -> bool:
    """
    Check whether a message should be offered as a new task.

    Questions and queries about existing tasks never qualify; anything else
    needs one of the strong task indicators.
    """
    lowered = message.strip().lower()

    if any(phrase in lowered for phrase in TASK_QUERY_PHRASES):
        return False
    if lowered.endswith("?") or lowered.startswith(QUESTION_OPENERS):
        return False

    return any(indicator in lowered for indicator in STRONG_TASK_INDICATORS)
