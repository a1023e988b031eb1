"""Web search provider clients.

Each client exposes ``fetch(query, max_results)`` returning normalized
``SearchResult`` records and raises ``SearchProviderError`` when the provider
call fails. Formatting for the model lives in ``search.WebSearchTool``.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, List, TYPE_CHECKING, cast

from ddgs import DDGS
from ddgs.exceptions import DDGSException, TimeoutException
from langchain_community.utilities.tavily_search import TavilySearchAPIWrapper

from .constants import (
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_INITIAL_DELAY,
    RETRY_JITTER_MAX,
    RETRY_MAX_DELAY,
    TAVILY_SEARCH_DEPTH,
)
from .exceptions import ConfigurationError, SearchProviderError

if TYPE_CHECKING:  # pragma: no cover - import for type checking only
    from .config import AgentConfig
    from .protocols import SearchProvider


@dataclass(frozen=True)
class SearchResult:
    """A single provider result."""

    url: str
    content: str = ""
    title: str | None = None


def safe_close_client(client: Any) -> None:
    """Safely close a provider client.

    Args:
        client: Client instance to close
    """
    if client is None:
        return
    close_fn = getattr(client, "close", None)
    if callable(close_fn):
        try:
            close_fn()
        except Exception as exc:
            logging.debug("Client close failed: %s", exc)


class TavilySearchClient:
    """Tavily search through LangChain's ``TavilySearchAPIWrapper``.

    The wrapper is created on first use; it validates the API key at
    construction, so an absent key fails the first search rather than startup.
    """

    def __init__(self, api_key: str) -> None:
        self._api_key = api_key
        self._wrapper: TavilySearchAPIWrapper | None = None

    def _get_wrapper(self) -> TavilySearchAPIWrapper:
        if self._wrapper is None:
            self._wrapper = TavilySearchAPIWrapper(tavily_api_key=self._api_key)
        return self._wrapper

    def fetch(self, query: str, max_results: int) -> List[SearchResult]:
        """Search Tavily without answer synthesis or raw page content.

        Raises:
            SearchProviderError: If the wrapper cannot be built or the request fails
        """
        try:
            response = self._get_wrapper().raw_results(
                query,
                max_results=max_results,
                search_depth=TAVILY_SEARCH_DEPTH,
                include_answer=False,
                include_raw_content=False,
            )
        except Exception as exc:
            raise SearchProviderError(f"Tavily search failed for '{query}': {exc}") from exc

        results: List[SearchResult] = []
        for entry in response.get("results") or []:
            results.append(
                SearchResult(
                    url=str(entry.get("url") or ""),
                    content=str(entry.get("content") or ""),
                    title=entry.get("title") or None,
                )
            )
        return results

    def close(self) -> None:
        self._wrapper = None


class DuckDuckGoSearchClient:
    """Wrap DDGS text search with retry/backoff and result normalization.

    Can be used as a context manager to ensure proper cleanup:
        with DuckDuckGoSearchClient(cfg) as client:
            results = client.fetch("query", 5)
    """

    def __init__(self, cfg: "AgentConfig") -> None:
        self.cfg = cfg

    def __enter__(self) -> "DuckDuckGoSearchClient":
        return self

    def __exit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Nothing to release; a fresh DDGS client is used per attempt."""

    @staticmethod
    def _normalize(raw_result: dict[str, Any]) -> SearchResult | None:
        title = str(raw_result.get("title") or "").strip()
        body = str(raw_result.get("body") or raw_result.get("snippet") or "").strip()
        link = str(raw_result.get("href") or raw_result.get("url") or "").strip()
        if not any([title, body, link]):
            return None
        return SearchResult(url=link, content=body, title=title or None)

    def fetch(self, query: str, max_results: int) -> List[SearchResult]:
        """Fetch search results, retrying transient ddgs failures.

        Creates a fresh DDGS client for each attempt to avoid connection reuse issues.

        Args:
            query: Search query string
            max_results: Maximum results requested

        Returns:
            List of normalized search results

        Raises:
            SearchProviderError: When every attempt failed or a non-transient error occurred
        """
        attempts = self.cfg.search_retries
        delay = RETRY_INITIAL_DELAY
        last_error: Exception | None = None
        for attempt in range(1, attempts + 1):
            client = None
            try:
                client = DDGS(timeout=cast(int | None, self.cfg.search_timeout))
                raw_results = client.text(
                    query,
                    region=self.cfg.ddg_region,
                    safesearch=self.cfg.ddg_safesearch,
                    backend=self.cfg.ddg_backend,
                    max_results=max_results,
                )
                results: List[SearchResult] = []
                for entry in raw_results or []:
                    normalized = self._normalize(entry)
                    if normalized:
                        results.append(normalized)
                return results
            except (TimeoutException, DDGSException, ConnectionError, OSError) as exc:
                logging.warning("DDGS search error for '%s' (attempt %s/%s): %s", query, attempt, attempts, exc)
                last_error = exc
            except Exception as exc:
                raise SearchProviderError(f"Unexpected search error for '{query}': {exc}") from exc
            finally:
                safe_close_client(client)

            if attempt < attempts:
                time.sleep(delay + random.random() * RETRY_JITTER_MAX)
                delay = min(delay * RETRY_BACKOFF_MULTIPLIER, RETRY_MAX_DELAY)

        raise SearchProviderError(f"Search failed after {attempts} attempts for '{query}'") from last_error


def build_search_client(cfg: "AgentConfig") -> "SearchProvider":
    """Create the search client for the configured backend."""
    if cfg.search_backend == "tavily":
        return TavilySearchClient(cfg.tavily_api_key)
    if cfg.search_backend == "ddgs":
        return DuckDuckGoSearchClient(cfg)
    raise ConfigurationError(f"Unsupported search backend: '{cfg.search_backend}'")


__all__ = [
    "SearchResult",
    "TavilySearchClient",
    "DuckDuckGoSearchClient",
    "build_search_client",
    "safe_close_client",
]
