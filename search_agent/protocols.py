"""Protocol definitions for dependency injection and type hints.

This module defines Protocol classes that specify the interfaces used throughout
the codebase, enabling better type checking without tight coupling.
"""

from __future__ import annotations

from typing import Protocol, List, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .search_client import SearchResult


class SearchProvider(Protocol):
    """Protocol for web search provider clients."""

    def fetch(self, query: str, max_results: int) -> List["SearchResult"]:
        """Fetch search results for a query.

        Args:
            query: Search query string
            max_results: Maximum number of results requested from the provider

        Returns:
            Ordered list of search results

        Raises:
            SearchProviderError: If the provider call fails
        """
        ...

    def close(self) -> None:
        """Release resources."""
        ...


__all__ = ["SearchProvider"]
