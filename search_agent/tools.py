"""Tool registration and argument parsing.

Maps tool names advertised to the LLM onto typed handlers so the agent loop
can dispatch tool calls without branching on names.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from pydantic import BaseModel, ValidationError

from .constants import ToolName
from .exceptions import ArgumentParseError


@dataclass(frozen=True)
class ToolSpec:
    """A callable capability advertised to the model.

    ``parameters`` is the JSON schema sent to the provider; ``args_model``
    validates the raw argument text before ``handler`` runs.
    """

    name: str
    description: str
    parameters: Dict[str, Any]
    args_model: type[BaseModel]
    handler: Callable[[Any], str]
    announce: Callable[[Any], str | None] | None = None

    def schema(self) -> Dict[str, Any]:
        """Return the function schema in the provider's tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def parse_arguments(self, arguments_json: str) -> BaseModel:
        """Validate raw tool-call argument text.

        Args:
            arguments_json: Raw JSON text produced by the model

        Returns:
            Parsed arguments model

        Raises:
            ArgumentParseError: If the text is not JSON or has the wrong shape
        """
        try:
            return self.args_model.model_validate_json(arguments_json or "")
        except ValidationError as exc:
            raise ArgumentParseError(f"Invalid arguments for {self.name}: {arguments_json!r}") from exc

    def describe(self, args: BaseModel) -> str | None:
        return self.announce(args) if self.announce is not None else None

    def run(self, args: BaseModel) -> str:
        return self.handler(args)


class ToolRegistry:
    """Manages tool registration and lookup."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, spec: ToolSpec) -> None:
        """Register a tool by its name."""
        if spec.name in self._tools:
            raise ValueError(f"Tool '{spec.name}' is already registered")
        self._tools[spec.name] = spec
        logging.debug("Registered tool: %s", spec.name)

    def lookup(self, name: str) -> ToolSpec | None:
        """Return the tool registered under ``name``, or None if unknown."""
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def schemas(self) -> List[Dict[str, Any]]:
        """Return provider schemas for all registered tools, in registration order."""
        return [spec.schema() for spec in self._tools.values()]


class WebSearchArgs(BaseModel):
    """Arguments of the ``webSearch`` tool."""

    query: str = ""


WEB_SEARCH_DESCRIPTION = "Search the latest information and real time data on the internet."

WEB_SEARCH_PARAMETERS: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "The web search query",
        },
    },
    "required": ["query"],
}


def _announce_search(args: WebSearchArgs) -> str | None:
    if not args.query.strip():
        return None
    return f'Searching for: "{args.query}"'


def web_search_spec(search_fn: Callable[[str], str]) -> ToolSpec:
    """Build the ``webSearch`` tool around a query -> text search function."""
    return ToolSpec(
        name=str(ToolName.WEB_SEARCH),
        description=WEB_SEARCH_DESCRIPTION,
        parameters=WEB_SEARCH_PARAMETERS,
        args_model=WebSearchArgs,
        handler=lambda args: search_fn(args.query),
        announce=_announce_search,
    )


def build_tool_registry(search_fn: Callable[[str], str]) -> ToolRegistry:
    """Create the registry of tools available to the agent."""
    registry = ToolRegistry()
    registry.register(web_search_spec(search_fn))
    return registry


__all__ = [
    "ToolSpec",
    "ToolRegistry",
    "WebSearchArgs",
    "WEB_SEARCH_DESCRIPTION",
    "WEB_SEARCH_PARAMETERS",
    "web_search_spec",
    "build_tool_registry",
]
