"""Example demonstrating MCP Server usage."""

import asyncio
import logging

from smart_todo.task_parsing.follow_up import FollowUpSuggester
from smart_todo.task_parsing.mcp_server import MCPServer
from smart_todo.task_parsing.reconciler import ParseReconciler

logging.basicConfig(level=logging.INFO)


async def main() -> None:
    """Demonstrate MCP Server functionality without a running Ollama service."""
    mcp_server = MCPServer(reconciler=ParseReconciler(), suggester=FollowUpSuggester())
    await mcp_server.initialize()

    print("Available MCP tools:", mcp_server.get_available_tools())
    print()

    # Example 1: Parse a task with a fixed reference time
    print("=== Parsing a task ===")
    result = await mcp_server.handle_parse_task(
        {"text": "URGENT - call the bank tomorrow at 3pm", "now": "2024-01-10T09:30:00"}
    )
    print(f"Parse result: {result}")
    print()

    # Example 2: Relative weekday
    print("=== Parsing a relative date ===")
    result = await mcp_server.handle_parse_task(
        {"text": "buy groceries next monday morning", "now": "2024-01-10T09:30:00"}
    )
    task = result["task"]
    print(f"Due {task['dueDate']} at {task['dueTime']} ({task['category']})")
    print()

    # Example 3: Check whether chat messages read like tasks
    print("=== Checking chat messages ===")
    for message in ("remind me to renew my passport", "what tasks do I have today?"):
        result = await mcp_server.handle_check_task_like({"message": message})
        print(f"{message!r}: {result['looks_like_task']}")
    print()

    # Example 4: Suggest a follow-up for a completed task
    print("=== Suggesting a follow-up ===")
    result = await mcp_server.handle_suggest_follow_up(
        {"title": "Email the landlord", "category": "personal"}
    )
    print(f"Suggestion: {result['suggestion']}")
    print()

    await mcp_server.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
