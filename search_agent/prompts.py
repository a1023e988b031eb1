from __future__ import annotations

from .constants import ToolName
from .tools import WEB_SEARCH_DESCRIPTION

# Fixed first message of every transcript.
SYSTEM_PROMPT = (
    "You are a smart helpful assistant who answers the asked questions. "
    "You have access to the following tool:\n\n"
    f"1. {ToolName.WEB_SEARCH} - {WEB_SEARCH_DESCRIPTION}\n\n"
    f"When you need to use the {ToolName.WEB_SEARCH} tool, respond with a JSON object containing:\n"
    '- "query": The search query string\n\n'
    "Important: Always use the tool calling format specified by the API. "
    "Do not use XML or other formats."
)

__all__ = ["SYSTEM_PROMPT"]
