"""Web Search Agent - command-line assistant with LLM tool calling and web search.

This package provides a conversational agent that delegates reasoning to a
hosted chat-completion API and lets the model request web searches, feeding
the results back for a grounded final answer.
"""

from .agent import Agent
from .completion import CompletionClient, Empty, FinalAnswer, ToolCallsRequested
from .config import AgentConfig
from .conversation import ConversationState, ToolCallRequest
from .exceptions import (
    AgentError,
    ArgumentParseError,
    ConfigurationError,
    ProviderError,
    SearchProviderError,
    ToolUseFailedError,
    TranscriptError,
)
from .search import WebSearchTool

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Agent",
    "AgentConfig",
    "CompletionClient",
    "ConversationState",
    "ToolCallRequest",
    "WebSearchTool",
    # Completion results
    "FinalAnswer",
    "ToolCallsRequested",
    "Empty",
    # Exceptions
    "AgentError",
    "ArgumentParseError",
    "ConfigurationError",
    "ProviderError",
    "SearchProviderError",
    "ToolUseFailedError",
    "TranscriptError",
]
