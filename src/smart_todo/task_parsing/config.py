"""Configuration constants for task parsing functionality."""

# AI Parser (Ollama)
DEFAULT_OLLAMA_MODEL = "llama3.2:3b"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_OLLAMA_TEMPERATURE = 0.7
DEFAULT_PROMPT_INPUT_LIMIT = 500  # characters of user text sent to the model

# Bounded waits
DEFAULT_PARSE_TIMEOUT = 10.0  # seconds
DEFAULT_FOLLOW_UP_TIMEOUT = 8.0  # seconds

# Title extraction
URGENT_PREFIX = "URGENT"
URGENT_HYPHEN_WINDOW = 10  # hyphen must appear before this index to strip the prefix

# Follow-up suggestions
FOLLOW_UP_MAX_WORDS = 15

# MCP Server Configuration
DEFAULT_MCP_HOST = "localhost"
DEFAULT_MCP_PORT = 3000
DEFAULT_MCP_SERVER_NAME = "smart-todo-parser"

# LLM Prompt Template
# Placeholders: {context}, {today}, {tomorrow}, {year}
DEFAULT_PARSE_PROMPT = """You are an AI assistant helping to parse natural language task inputs.

{context}

Extract the following information from the task:

1. Task title - a concise, action-oriented title (5-7 words max).
   - Focus ONLY on the core action
   - REMOVE all date/time information, priority indicators and filler words
   - Start with a verb when possible
   - Example: "super important one on one with my manager on monday at 9am" -> "One on One with Manager"
   - Example: "need to buy milk from the store tomorrow morning" -> "Buy Milk from Store"

2. Description - every detail removed from the title (priority words, context).

3. Due date - ISO format YYYY-MM-DD, if mentioned.
   - Today is {today}
   - Tomorrow is {tomorrow}; if "tomorrow" is mentioned use {tomorrow}
   - Use {year} for dates without a year
   - All dates must be in the future relative to today

4. Due time - 24-hour HH:MM, if mentioned.
   - "morning" -> "09:00", "afternoon" -> "14:00", "evening" -> "19:00"
   - "night" -> "21:00", "noon" -> "12:00", "midnight" -> "00:00"

5. Priority - "high", "medium" or "low".
   - High: urgent, important, critical, asap, top priority, crucial, vital, essential
   - Low: low priority, whenever, not urgent, someday, no rush, can wait
   - Default to "medium"

6. Category - one of work, personal, shopping, health, general.

Respond with a single JSON object only, for example:
{{"title": "One on One with Manager", "description": "Important meeting to discuss project updates", "dueDate": "2025-03-03", "dueTime": "09:00", "priority": "high", "category": "work"}}"""

# Placeholders: {title}, {description}, {category}, {max_words}
DEFAULT_FOLLOW_UP_PROMPT = """You are an AI assistant helping with task management.
A user has just completed the following task:

Title: {title}
Description: {description}
Category: {category}

Suggest a single, specific follow-up action that would be logical to do next.
Keep it brief (under {max_words} words) and actionable. Do not use phrases like
"you could" or "I suggest" - just state the follow-up task directly."""
