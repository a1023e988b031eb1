"""Centralized constants for the web search agent.

This module contains the user-facing literals, provider limits and retry
constants used throughout the codebase.
"""

from __future__ import annotations

from enum import Enum


class ToolName(str, Enum):
    """Type-safe tool identifiers advertised to the LLM provider.

    Inherits from str to work as dict keys and in string operations.
    """

    WEB_SEARCH = "webSearch"

    def __str__(self) -> str:
        """Return the string value."""
        return self.value


# Interactive session
EXIT_WORD = "bye"
USER_PROMPT = "You: "
WELCOME_BANNER = "Welcome! Type '{exit_word}' to exit.\n"
GOODBYE_MESSAGE = "Goodbye!"
ASSISTANT_PREFIX = "\nAssistant:"
SEARCHING_NOTICE = "\nSearching for information..."
FALLBACK_NOTICE = "Retrying without tool calls..."

# Completion requests
COMPLETION_TEMPERATURE = 0.0  # Deterministic-leaning sampling
TOOL_CHOICE_AUTO = "auto"  # Let the model decide whether to call a tool
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
TOOL_USE_FAILED_STATUS = 400
TOOL_USE_FAILED_CODE = "tool_use_failed"

# Web search
SEARCH_MAX_RESULTS = 5  # Results requested from the provider
SEARCH_DISPLAY_RESULTS = 3  # Results rendered for the model
SEARCH_CONTENT_CHARS = 500  # Characters kept per result body
TRUNCATION_MARKER = "..."
TAVILY_SEARCH_DEPTH = "basic"

# Tool results fed back to the model
NO_QUERY_MESSAGE = "Error: No search query provided"
INVALID_ARGUMENTS_MESSAGE = "Error: Invalid search parameters"

# Retry behavior (ddgs backend)
DEFAULT_SEARCH_TIMEOUT = 10.0  # Per-request timeout (seconds)
RETRY_INITIAL_DELAY = 0.5  # First backoff delay (seconds)
RETRY_JITTER_MAX = 0.2  # Maximum random jitter for retry delay (seconds)
RETRY_BACKOFF_MULTIPLIER = 1.75  # Exponential backoff multiplier
RETRY_MAX_DELAY = 3.0  # Maximum delay between retries (seconds)

__all__ = [
    # Enums
    "ToolName",
    # Session literals
    "EXIT_WORD",
    "USER_PROMPT",
    "WELCOME_BANNER",
    "GOODBYE_MESSAGE",
    "ASSISTANT_PREFIX",
    "SEARCHING_NOTICE",
    "FALLBACK_NOTICE",
    # Completion
    "COMPLETION_TEMPERATURE",
    "TOOL_CHOICE_AUTO",
    "DEFAULT_GROQ_MODEL",
    "DEFAULT_OLLAMA_BASE_URL",
    "TOOL_USE_FAILED_STATUS",
    "TOOL_USE_FAILED_CODE",
    # Search
    "SEARCH_MAX_RESULTS",
    "SEARCH_DISPLAY_RESULTS",
    "SEARCH_CONTENT_CHARS",
    "TRUNCATION_MARKER",
    "TAVILY_SEARCH_DEPTH",
    "NO_QUERY_MESSAGE",
    "INVALID_ARGUMENTS_MESSAGE",
    # Retry
    "DEFAULT_SEARCH_TIMEOUT",
    "RETRY_INITIAL_DELAY",
    "RETRY_JITTER_MAX",
    "RETRY_BACKOFF_MULTIPLIER",
    "RETRY_MAX_DELAY",
]
