"""Configuration using Pydantic for improved validation and error messages."""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

from .constants import (
    DEFAULT_GROQ_MODEL,
    DEFAULT_OLLAMA_BASE_URL,
    DEFAULT_SEARCH_TIMEOUT,
    EXIT_WORD,
    SEARCH_CONTENT_CHARS,
    SEARCH_DISPLAY_RESULTS,
    SEARCH_MAX_RESULTS,
)
from .exceptions import ConfigurationError

# Credentials are read from the environment only and never exposed as CLI flags.
SECRET_FIELDS = frozenset({"groq_api_key", "tavily_api_key"})


class AgentConfig(BaseModel):
    """Configuration parameters for Agent behavior, the LLM provider and web search.

    Uses Pydantic for robust validation with clear error messages.
    All parameters have sensible defaults and can be overridden via CLI arguments
    or environment variables.
    """

    # LLM provider
    provider: Literal["groq", "ollama"] = Field(default="groq", description="Chat completion provider")
    model: str = Field(
        default_factory=lambda: os.getenv("AGENT_MODEL", DEFAULT_GROQ_MODEL),
        description="Chat model name",
    )
    ollama_base_url: str = Field(default=DEFAULT_OLLAMA_BASE_URL, description="Ollama server URL")

    # Search engine configuration
    search_backend: Literal["tavily", "ddgs"] = Field(default="tavily", description="Web search backend")
    search_max_results: int = Field(default=SEARCH_MAX_RESULTS, ge=1, description="Results requested per query")
    search_display_results: int = Field(
        default=SEARCH_DISPLAY_RESULTS, ge=1, description="Results shown to the model per query"
    )
    search_content_chars: int = Field(default=SEARCH_CONTENT_CHARS, ge=1, description="Characters kept per result")
    search_retries: int = Field(default=1, ge=1, description="Attempts per ddgs search call")
    search_timeout: float = Field(default=DEFAULT_SEARCH_TIMEOUT, gt=0, description="ddgs timeout in seconds")
    ddg_region: str = Field(default="us-en", description="DuckDuckGo region")
    ddg_safesearch: Literal["off", "moderate", "strict"] = Field(
        default="moderate", description="DuckDuckGo SafeSearch level"
    )
    ddg_backend: str = Field(default="auto", description="DuckDuckGo backend")
    max_concurrent_searches: int = Field(default=1, ge=1, description="Parallel tool calls per round")

    # Session behavior
    exit_word: str = Field(default=EXIT_WORD, min_length=1, description="Word that ends the session")

    # Logging configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: str | None = Field(default=None, description="Log file path")
    log_console: bool = Field(default=True, description="Enable console logging")

    # CLI question
    question: str | None = Field(default=None, description="Initial question from CLI")

    # Credentials (passed through as empty strings when absent)
    groq_api_key: str = Field(default_factory=lambda: os.getenv("GROQ_API_KEY", ""), repr=False)
    tavily_api_key: str = Field(default_factory=lambda: os.getenv("TAVILY_API_KEY", ""), repr=False)

    @model_validator(mode="after")
    def validate_search_limits(self) -> "AgentConfig":
        """Ensure the display cap fits inside the provider result cap.

        Raises:
            ValueError: If search_display_results exceeds search_max_results
        """
        if self.search_display_results > self.search_max_results:
            raise ValueError(
                "search_display_results cannot exceed search_max_results "
                f"({self.search_display_results} > {self.search_max_results})"
            )
        return self

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",  # Raise error on unknown fields
    }

    @classmethod
    def _format_validation_error(cls, e: ValidationError, data: dict) -> str:
        """Format Pydantic ValidationError into user-friendly message.

        Args:
            e: Pydantic ValidationError
            data: Input data dict

        Returns:
            Formatted error message string
        """
        errors = e.errors()
        if not errors:
            return f"Configuration validation failed: {e}"

        first_error = errors[0]
        field_name = str(first_error["loc"][0]) if first_error["loc"] else "unknown"
        error_type = first_error["type"]
        value = data.get(field_name)
        ctx = first_error.get("ctx", {})

        if "greater_than_equal" in error_type:
            return f"{field_name} must be >= {ctx.get('ge')}, got {value}"
        elif "greater_than" in error_type:
            return f"{field_name} must be > {ctx.get('gt')}, got {value}"
        elif "literal_error" in error_type:
            return f"{field_name} must be {ctx.get('expected')}, got {value}"
        elif "extra_forbidden" in error_type:
            return f"Unknown configuration field: {field_name}"
        else:
            msg = first_error.get("msg", str(e))
            return f"Invalid configuration: {msg}"

    def __init__(self, **data: Any) -> None:
        """Initialize config with validation error conversion."""
        try:
            super().__init__(**data)
        except ValidationError as e:
            # Convert Pydantic ValidationError to ConfigurationError with clearer messages
            raise ConfigurationError(self._format_validation_error(e, data)) from e


__all__ = ["AgentConfig", "SECRET_FIELDS"]
