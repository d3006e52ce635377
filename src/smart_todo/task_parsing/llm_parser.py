"""AI task parser backed by a local LLM via Ollama."""

import json
import logging
import time
from datetime import datetime, timedelta
from typing import Any

import ollama

from .config import (
    DEFAULT_FOLLOW_UP_PROMPT,
    DEFAULT_OLLAMA_BASE_URL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_TEMPERATURE,
    DEFAULT_PARSE_PROMPT,
    DEFAULT_PROMPT_INPUT_LIMIT,
    FOLLOW_UP_MAX_WORDS,
)
from .date_context import build_date_context
from .exceptions import AiResponseError, AiUnavailableError
from .interfaces import AiTaskParser, FollowUpGenerator
from .models import AiParseResult, TaskDraft

logger = logging.getLogger(__name__)

# Accepted spellings for each result field, first match wins.
_FIELD_ALIASES = {
    "title": ("title",),
    "description": ("description",),
    "due_date": ("dueDate", "due_date"),
    "due_time": ("dueTime", "due_time"),
    "priority": ("priority",),
    "category": ("category",),
}


class OllamaTaskParser(AiTaskParser, FollowUpGenerator):
    """Parses task text and suggests follow-ups using a local LLM via Ollama."""

    def __init__(
        self,
        model: str = DEFAULT_OLLAMA_MODEL,
        base_url: str = DEFAULT_OLLAMA_BASE_URL,
        temperature: float = DEFAULT_OLLAMA_TEMPERATURE,
        input_limit: int = DEFAULT_PROMPT_INPUT_LIMIT,
    ) -> None:
        """
        Initialize the Ollama task parser.

        Args:
            model: Ollama model name
            base_url: Ollama service URL
            temperature: LLM temperature for generation
            input_limit: Maximum number of characters of user text sent to the model
        """
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.input_limit = input_limit
        self._client = ollama.AsyncClient(host=base_url)

    def _sanitize(self, text: str) -> str:
        return " ".join(text.split())[: self.input_limit]

    def _generate_system_prompt(self, now: datetime) -> str:
        """
        Generate the parsing instructions for the LLM.

        Args:
            now: Reference instant rendered into the prompt

        Returns:
            Formatted system prompt
        """
        today = now.date()
        return DEFAULT_PARSE_PROMPT.format(
            context=build_date_context(now).render(),
            today=today.isoformat(),
            tomorrow=(today + timedelta(days=1)).isoformat(),
            year=today.year,
        )

    def _parse_response(self, response_text: str) -> AiParseResult:
        """
        Parse LLM response into AiParseResult.

        Field values are kept as strings and are not validated here.

        Args:
            response_text: Raw JSON response text from LLM

        Returns:
            AiParseResult object

        Raises:
            AiResponseError: If response is not a JSON object
        """
        content = response_text.strip()
        if content.startswith("```"):
            content = content.strip("`").strip()
            if content.lower().startswith("json"):
                content = content[4:]

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise AiResponseError(f"Invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise AiResponseError(f"Expected a JSON object, got {type(data).__name__}")

        fields: dict[str, str | None] = {}
        known_keys: set[str] = set()
        for name, aliases in _FIELD_ALIASES.items():
            fields[name] = None
            for alias in aliases:
                known_keys.add(alias)
                value = data.get(alias)
                if value is not None and value != "":
                    fields[name] = str(value).strip()
                    break

        metadata: dict[str, Any] = {
            key: value for key, value in data.items() if key not in known_keys
        }
        return AiParseResult(**fields, metadata=metadata)

    async def _chat(self, messages: list[dict[str, str]], json_output: bool) -> str:
        try:
            response = await self._client.chat(
                model=self.model,
                messages=messages,
                format="json" if json_output else None,
                options={"temperature": self.temperature},
            )
        except ollama.ResponseError as e:
            logger.error(f"Ollama returned status {e.status_code}: {e.error}")
            raise AiUnavailableError(f"Ollama error {e.status_code}: {e.error}") from e
        except ConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise AiUnavailableError(f"Connection failed: {e}") from e

        return response["message"]["content"]

    async def parse_task(self, text: str, now: datetime) -> AiParseResult:
        """
        Ask the LLM to extract task fields from text.

        Args:
            text: Raw task description
            now: Reference instant for relative dates

        Returns:
            AiParseResult with the model's unvalidated guess

        Raises:
            AiUnavailableError: If the model cannot be reached
            AiResponseError: If the model's answer is not a JSON object
        """
        start_time = time.time()
        content = await self._chat(
            [
                {"role": "system", "content": self._generate_system_prompt(now)},
                {"role": "user", "content": self._sanitize(text)},
            ],
            json_output=True,
        )
        result = self._parse_response(content)

        inference_time = time.time() - start_time
        result.metadata["inference_time"] = inference_time
        logger.info(
            f"AI parse complete: title='{result.title}', due_date={result.due_date}, "
            f"due_time={result.due_time}, priority={result.priority}, "
            f"time={inference_time:.3f}s"
        )
        return result

    async def suggest_follow_up(self, draft: TaskDraft) -> str:
        """
        Ask the LLM for a single follow-up action to a completed task.

        Raises:
            AiUnavailableError: If the model cannot be reached
            AiResponseError: If the model returned an empty answer
        """
        prompt = DEFAULT_FOLLOW_UP_PROMPT.format(
            title=self._sanitize(draft.title),
            description=self._sanitize(draft.description) or "None",
            category=draft.category.value,
            max_words=FOLLOW_UP_MAX_WORDS,
        )
        content = await self._chat([{"role": "system", "content": prompt}], json_output=False)

        suggestion = content.strip().strip('"').strip()
        if not suggestion:
            raise AiResponseError("Empty follow-up suggestion")
        return suggestion
