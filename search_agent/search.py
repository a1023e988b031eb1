"""Web search tool execution.

``WebSearchTool.search`` turns a query into the bounded text block fed back
to the model. It never raises: provider failures become a readable message.
"""

from __future__ import annotations

import logging
from typing import List, TYPE_CHECKING

from .constants import NO_QUERY_MESSAGE, SEARCH_CONTENT_CHARS, SEARCH_DISPLAY_RESULTS, SEARCH_MAX_RESULTS
from .exceptions import SearchProviderError
from .text_utils import truncate_content

if TYPE_CHECKING:  # pragma: no cover
    from .config import AgentConfig
    from .protocols import SearchProvider
    from .search_client import SearchResult


def format_result(index: int, result: "SearchResult", content_chars: int = SEARCH_CONTENT_CHARS) -> str:
    """Render one 1-indexed result block."""
    content = truncate_content(result.content or "", content_chars)
    return f"[{index}] Title: {result.title or 'No title'}\nURL: {result.url}\nContent: {content}"


def format_results(
    query: str,
    results: List["SearchResult"],
    *,
    display_results: int = SEARCH_DISPLAY_RESULTS,
    content_chars: int = SEARCH_CONTENT_CHARS,
) -> str:
    """Render the first ``display_results`` results and the provider's total count."""
    blocks = "\n\n".join(
        format_result(index, result, content_chars)
        for index, result in enumerate(results[:display_results], start=1)
    )
    return f'Search Results for "{query}":\n\n{blocks}\n\nTotal results found: {len(results)}'


def no_results_message(query: str) -> str:
    return f'No results found for "{query}". Please try a different search query.'


def search_failed_message(query: str) -> str:
    return f'Error occurred while searching for "{query}". Please try again.'


class WebSearchTool:
    """Runs web searches and formats results for the model.

    Result count and per-result length are bounded to keep prompts small.
    """

    def __init__(
        self,
        client: "SearchProvider",
        *,
        max_results: int = SEARCH_MAX_RESULTS,
        display_results: int = SEARCH_DISPLAY_RESULTS,
        content_chars: int = SEARCH_CONTENT_CHARS,
    ) -> None:
        self.client = client
        self.max_results = max_results
        self.display_results = display_results
        self.content_chars = content_chars

    @classmethod
    def from_config(cls, client: "SearchProvider", cfg: "AgentConfig") -> "WebSearchTool":
        return cls(
            client,
            max_results=cfg.search_max_results,
            display_results=cfg.search_display_results,
            content_chars=cfg.search_content_chars,
        )

    def search(self, query: str) -> str:
        """Search the web and return a text summary for the model.

        Args:
            query: Search query produced by the model

        Returns:
            Formatted results, a no-results notice, or an error message
        """
        if not query or not query.strip():
            return NO_QUERY_MESSAGE

        try:
            results = self.client.fetch(query, self.max_results)
        except SearchProviderError as exc:
            logging.error("Error in web search: %s", exc)
            return search_failed_message(query)

        if not results:
            logging.info("No search results for '%s'", query)
            return no_results_message(query)

        logging.info("Search for '%s' returned %d results", query, len(results))
        return format_results(
            query,
            results,
            display_results=self.display_results,
            content_chars=self.content_chars,
        )

    def close(self) -> None:
        self.client.close()


__all__ = [
    "WebSearchTool",
    "format_result",
    "format_results",
    "no_results_message",
    "search_failed_message",
]
