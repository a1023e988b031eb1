"""Custom exceptions for the web search agent.

This module defines a hierarchy of exceptions for different error categories,
making error handling more specific and maintainable.
"""

from __future__ import annotations


# ============================================================================
# Base Exception
# ============================================================================


class AgentError(Exception):
    """Base exception for all web search agent errors.

    All custom exceptions in this project should inherit from this base class.
    This allows catching all project-specific errors with a single except clause.
    """


# ============================================================================
# Configuration & Transcript Errors
# ============================================================================


class ConfigurationError(AgentError):
    """Raised when configuration values are invalid.

    Examples:
        - Result display cap larger than the provider result cap
        - Unknown LLM provider or search backend
        - Invalid parameter ranges
    """


class TranscriptError(AgentError):
    """Raised when a transcript mutation would break its ordering rules.

    Examples:
        - Tool result with no matching pending tool-call request
        - Attempt to remove or re-add the system instruction
    """


# ============================================================================
# LLM Provider Errors
# ============================================================================


class ProviderError(AgentError):
    """Raised when a request to the LLM completion provider fails.

    Carries the HTTP status and provider error code when the underlying
    SDK exposes them; both are None for transport-level failures.
    """

    def __init__(self, message: str, *, status: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, status={self.status!r}, code={self.code!r})"


class ToolUseFailedError(ProviderError):
    """Raised when the provider rejects a generated tool call (400 ``tool_use_failed``).

    The agent answers this one with a tool-less fallback pass instead of
    abandoning the turn.
    """


# ============================================================================
# Tool Errors
# ============================================================================


class ToolError(AgentError):
    """Base class for tool-related errors."""


class ArgumentParseError(ToolError):
    """Raised when tool-call arguments are not valid JSON of the expected shape.

    Recovered by the agent loop and surfaced to the model as a tool result.
    """


class SearchProviderError(ToolError):
    """Raised by search clients when the provider call fails.

    Examples:
        - Missing or rejected API key
        - Network errors and timeouts
        - Provider-side rate limiting
    """


# ============================================================================
# Exports
# ============================================================================


__all__ = [
    # Base
    "AgentError",
    # Configuration & Transcript
    "ConfigurationError",
    "TranscriptError",
    # Provider
    "ProviderError",
    "ToolUseFailedError",
    # Tools
    "ToolError",
    "ArgumentParseError",
    "SearchProviderError",
]
