"""Text truncation helpers for tool results."""

from __future__ import annotations

from .constants import SEARCH_CONTENT_CHARS, TRUNCATION_MARKER


def truncate_content(text: str, max_chars: int = SEARCH_CONTENT_CHARS) -> str:
    """Cut text to exactly ``max_chars`` characters and mark the cut.

    Args:
        text: Text to truncate
        max_chars: Maximum characters kept

    Returns:
        The text unchanged when it fits, otherwise its first ``max_chars``
        characters followed by "..."
    """
    if len(text) <= max_chars:
        return text
    return f"{text[:max_chars]}{TRUNCATION_MARKER}"


__all__ = ["truncate_content"]
