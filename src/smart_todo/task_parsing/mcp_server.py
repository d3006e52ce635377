"""MCP Server exposing task parsing using FastMCP."""

import logging
import sys
from datetime import datetime
from typing import Any

from fastmcp import FastMCP

from .config import DEFAULT_MCP_HOST, DEFAULT_MCP_PORT, DEFAULT_MCP_SERVER_NAME
from .follow_up import FollowUpSuggester
from .llm_parser import OllamaTaskParser
from .models import TaskCategory, TaskDraft
from .reconciler import ParseReconciler
from .task_hints import looks_like_task

logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(DEFAULT_MCP_SERVER_NAME)

# Global collaborators (initialized in cli_entry())
_reconciler: ParseReconciler | None = None
_suggester: FollowUpSuggester | None = None


def get_reconciler() -> ParseReconciler:
    """Get the global reconciler instance."""
    if _reconciler is None:
        raise RuntimeError("Reconciler not initialized")
    return _reconciler


def get_suggester() -> FollowUpSuggester:
    """Get the global follow-up suggester instance."""
    if _suggester is None:
        raise RuntimeError("Follow-up suggester not initialized")
    return _suggester


def set_collaborators(reconciler: ParseReconciler, suggester: FollowUpSuggester) -> None:
    """Set the global collaborators (also used by tests)."""
    global _reconciler, _suggester
    _reconciler = reconciler
    _suggester = suggester


async def _parse_task_impl(text: str, now: str | None = None) -> dict[str, Any]:
    """Implementation of parse_task tool."""
    if not text or not text.strip():
        return {"success": False, "error": "Empty task text"}

    reference = datetime.now()
    if now:
        try:
            reference = datetime.fromisoformat(now)
        except ValueError:
            return {"success": False, "error": f"Invalid date format: {now}"}

    try:
        result = await get_reconciler().reconcile(text, reference)
    except Exception as e:
        logger.error(f"Error parsing task: {e}")
        return {"success": False, "error": str(e)}

    return {
        "success": True,
        "task": result.draft.to_dict(),
        "source": result.source.value,
    }


async def _suggest_follow_up_impl(
    title: str, description: str = "", category: str = "general"
) -> dict[str, Any]:
    """Implementation of suggest_follow_up tool."""
    if not title or not title.strip():
        return {"success": False, "error": "Missing required field: title"}

    try:
        task_category = TaskCategory(category)
    except ValueError:
        return {"success": False, "error": f"Invalid category: {category}"}

    draft = TaskDraft(title=title.strip(), description=description, category=task_category)
    try:
        suggestion = await get_suggester().suggest(draft)
    except Exception as e:
        logger.error(f"Error suggesting follow-up: {e}")
        return {"success": False, "error": str(e)}

    return {"success": True, "suggestion": suggestion}


async def _check_task_like_impl(message: str) -> dict[str, Any]:
    """Implementation of check_task_like tool."""
    return {"success": True, "looks_like_task": looks_like_task(message or "")}


# FastMCP decorated wrappers (for actual MCP server)
@mcp.tool()
async def parse_task(text: str, now: str | None = None) -> dict[str, Any]:
    """
    Parse a natural-language task description.

    Args:
        text: Task description, e.g. "call the bank tomorrow at 3pm"
        now: Reference date-time in ISO format (optional, defaults to now)

    Returns:
        Dictionary with the parsed task and which parser produced it
    """
    return await _parse_task_impl(text=text, now=now)


@mcp.tool()
async def suggest_follow_up(
    title: str, description: str = "", category: str = "general"
) -> dict[str, Any]:
    """
    Suggest a follow-up action for a completed task.

    Args:
        title: Title of the completed task
        description: Task description (optional)
        category: Task category (work, personal, shopping, health, general)

    Returns:
        Dictionary with the suggestion
    """
    return await _suggest_follow_up_impl(
        title=title, description=description, category=category
    )


@mcp.tool()
async def check_task_like(message: str) -> dict[str, Any]:
    """
    Check whether a chat message reads like a new task.

    Args:
        message: Chat message text

    Returns:
        Dictionary with the looks_like_task flag
    """
    return await _check_task_like_impl(message=message)


# Compatibility wrapper for tests
class MCPServer:
    """
    Compatibility wrapper for testing.

    The actual MCP server uses FastMCP with function decorators.
    This class provides a compatible interface for tests.
    """

    def __init__(
        self,
        reconciler: ParseReconciler,
        suggester: FollowUpSuggester,
        server_name: str = DEFAULT_MCP_SERVER_NAME,
        host: str = DEFAULT_MCP_HOST,
        port: int = DEFAULT_MCP_PORT,
    ) -> None:
        """Initialize MCP Server wrapper."""
        self._reconciler = reconciler
        self._suggester = suggester
        self._server_name = server_name
        self._host = host
        self._port = port
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the server."""
        set_collaborators(self._reconciler, self._suggester)
        self._initialized = True

    async def shutdown(self) -> None:
        """Shutdown the server."""
        self._initialized = False

    def get_available_tools(self) -> list[str]:
        """Get list of available tools."""
        return ["parse_task", "suggest_follow_up", "check_task_like"]

    async def handle_parse_task(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle parse_task request."""
        if "text" not in params:
            return {"success": False, "error": "Missing required field: text"}
        return await _parse_task_impl(text=params["text"], now=params.get("now"))

    async def handle_suggest_follow_up(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle suggest_follow_up request."""
        if "title" not in params:
            return {"success": False, "error": "Missing required field: title"}
        return await _suggest_follow_up_impl(
            title=params["title"],
            description=params.get("description", ""),
            category=params.get("category", "general"),
        )

    async def handle_check_task_like(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle check_task_like request."""
        if "message" not in params:
            return {"success": False, "error": "Missing required field: message"}
        return await _check_task_like_impl(message=params["message"])


def cli_entry() -> None:
    """CLI entry point for the MCP server."""
    # Check for transport argument
    transport_type = "stdio"
    if len(sys.argv) > 1 and sys.argv[1] in ("stdio", "sse", "http"):
        transport_type = "sse" if sys.argv[1] == "http" else sys.argv[1]

    ai_parser = OllamaTaskParser()
    set_collaborators(ParseReconciler(ai_parser=ai_parser), FollowUpSuggester(ai_parser))
    logger.info(f"MCP Server initialized with 3 tools (transport={transport_type})")

    # FastMCP's run() manages its own event loop
    if transport_type == "stdio":
        mcp.run(transport="stdio")
    else:
        logger.info(f"Server will listen on http://{DEFAULT_MCP_HOST}:{DEFAULT_MCP_PORT}")
        mcp.run(transport="sse", host=DEFAULT_MCP_HOST, port=DEFAULT_MCP_PORT)


if __name__ == "__main__":
    cli_entry()
