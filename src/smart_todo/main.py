"""Command-line interface for natural-language task parsing."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from .logging_utils import configure_logging
from .task_parsing.config import DEFAULT_OLLAMA_MODEL, DEFAULT_PARSE_TIMEOUT
from .task_parsing.formatting import format_date, format_time
from .task_parsing.llm_parser import OllamaTaskParser
from .task_parsing.models import ReconciliationResult
from .task_parsing.reconciler import ParseReconciler

logger = logging.getLogger(__name__)


class TaskParserCLI:
    """Command-line front end for the parse reconciler."""

    def __init__(
        self,
        reconciler: ParseReconciler | None = None,
        use_ai: bool = True,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: float = DEFAULT_PARSE_TIMEOUT,
        as_json: bool = False,
    ) -> None:
        """
        Initialize the CLI.

        Args:
            reconciler: Optional ParseReconciler instance. If None, creates a new one.
            use_ai: Whether to consult the Ollama model before the fallback parser
            model: Ollama model name
            timeout: Deadline for the AI parser in seconds
            as_json: Print the draft as JSON instead of text
        """
        if reconciler is None:
            ai_parser = OllamaTaskParser(model=model) if use_ai else None
            reconciler = ParseReconciler(ai_parser=ai_parser, timeout=timeout)
        self._reconciler = reconciler
        self._as_json = as_json

    def render(self, result: ReconciliationResult, now: datetime) -> str:
        """Render a reconciliation result for the terminal."""
        draft = result.draft
        if self._as_json:
            return json.dumps({**draft.to_dict(), "source": result.source.value}, indent=2)

        due = " at ".join(
            part
            for part in (format_date(draft.due_date, now.date()), format_time(draft.due_time))
            if part
        )

        lines = [
            f"📝 Title:       {draft.title}",
            f"📅 Due:         {due or '-'}",
            f"⚡ Priority:    {draft.priority.value}",
            f"🏷️  Category:    {draft.category.value}",
        ]
        if draft.description:
            lines.append(f"🗒️  Description: {draft.description}")
        lines.append(f"🔎 Parsed by:   {result.source.value}")
        return "\n".join(lines)

    async def run(self, text: str, now: datetime) -> int:
        """
        Parse one task description and print it.

        Returns:
            Process exit code
        """
        result = await self._reconciler.reconcile(text, now)
        print(self.render(result, now))
        return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Smart To-Do Parser - Turn a task description into structured fields",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  smart-todo "call the bank tomorrow at 3pm"               # Parse with AI + fallback
  smart-todo --no-ai "buy groceries next monday morning"   # Rule-based parsing only
  smart-todo --now 2024-01-10T09:00 "dentist on March 15th"  # Fixed reference time
  smart-todo --json "URGENT - renew passport"              # JSON output
  smart-todo -v "team meeting friday at 10am"              # Show every rule hit
        """,
    )

    parser.add_argument("text", nargs="+", help="Task description to parse")

    parser.add_argument(
        "--now",
        type=str,
        default=None,
        metavar="ISO",
        help="Reference date-time in ISO format (default: current time)",
    )

    parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the Ollama model and use only the rule-based parser",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=DEFAULT_OLLAMA_MODEL,
        help=f"Ollama model to use (default: {DEFAULT_OLLAMA_MODEL})",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_PARSE_TIMEOUT,
        metavar="SECONDS",
        help=f"Deadline for the AI parser (default: {DEFAULT_PARSE_TIMEOUT:g})",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed task as JSON",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging and debug information",
    )

    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace logging (most verbose, includes all debug info)",
    )

    return parser


def handle_arguments(args: argparse.Namespace) -> tuple[bool, str, datetime | None]:
    """
    Handle parsed command-line arguments.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Tuple of (success, text, now):
        - success: False if the arguments cannot be used
        - text: Task description joined from the positional words
        - now: Reference instant, None on failure
    """
    configure_logging(verbose=args.verbose, trace=args.trace)

    text = " ".join(args.text).strip()
    if not text:
        print("❌ Task text is empty.")
        return False, text, None

    if args.now is None:
        return True, text, datetime.now()

    try:
        return True, text, datetime.fromisoformat(args.now)
    except ValueError:
        print(f"❌ Invalid --now value: {args.now}")
        return False, text, None


def cli_entry_with_args() -> None:
    """CLI entry point with argument parsing."""
    parser = create_argument_parser()

    try:
        args = parser.parse_args()

        success, text, now = handle_arguments(args)
        if not success or now is None:
            sys.exit(1)

        cli = TaskParserCLI(
            use_ai=not args.no_ai,
            model=args.model,
            timeout=args.timeout,
            as_json=args.json,
        )
        sys.exit(asyncio.run(cli.run(text, now)))

    except KeyboardInterrupt:
        pass  # Graceful shutdown
    except SystemExit:
        # Re-raise SystemExit (from argparse help, etc.)
        raise
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli_entry_with_args()
