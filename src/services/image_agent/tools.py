"""Web search tool for the Image Agent."""

import logging
from typing import Optional

import httpx

from src.core.config import settings
from src.services.image_agent.models import SearchResult

logger = logging.getLogger(__name__)


class WebSearchClient:
    """Tavily search implementation."""

    HEALTH_CHECK_TIMEOUT = 5.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        search_url: Optional[str] = None,
        max_results: Optional[int] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = settings.tavily_api_key if api_key is None else api_key
        self.search_url = search_url or settings.tavily_search_url
        self.max_results = max_results or settings.search_max_results
        self.timeout = timeout or settings.search_timeout_seconds
        self._http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Shared AsyncClient, created on first use and reused across requests."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                headers={"Content-Type": "application/json"},
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _post_search(self, payload: dict, timeout: float) -> dict:
        response = await self.http_client.post(
            self.search_url, json=payload, timeout=timeout
        )
        response.raise_for_status()
        return response.json()

    async def search(self, query: str) -> list[SearchResult]:
        """
        Execute a web search using the Tavily API.

        Args:
            query: Search query string

        Returns:
            Results in provider-ranked order, or an empty list if search is
            unavailable or fails
        """
        if not self.configured:
            logger.warning("Tavily API key not configured, skipping web search")
            return []

        payload = {
            "api_key": self.api_key,
            "query": query,
            "search_depth": "advanced",
            "include_answer": True,
            "include_domains": [],
            "exclude_domains": [],
            "max_results": self.max_results,
        }

        try:
            data = await self._post_search(payload, self.timeout)

            results = []
            for item in data.get("results") or []:
                if isinstance(item, dict):
                    results.append(
                        SearchResult(
                            title=item.get("title") or "",
                            url=item.get("url") or "",
                            content=item.get("content") or "",
                        )
                    )

            results = results[: self.max_results]
            logger.info(f"Search for '{query}' returned {len(results)} results")
            return results

        except httpx.TimeoutException:
            logger.error(f"Tavily search timed out after {self.timeout}s for '{query}'")
            return []
        except httpx.HTTPStatusError as e:
            logger.error(f"Tavily API error: {e.response.status_code} - {e.response.text}")
            return []
        except Exception as e:
            logger.error(f"Web search failed: {e}")
            return []

    async def check_health(self) -> str:
        """Return "connected", "error" or "not_configured"."""
        if not self.configured:
            return "not_configured"

        payload = {"api_key": self.api_key, "query": "test", "max_results": 1}
        try:
            await self._post_search(payload, self.HEALTH_CHECK_TIMEOUT)
            return "connected"
        except Exception as e:
            logger.warning(f"Tavily health check failed: {e}")
            return "error"


# Singleton instance
web_search_client = WebSearchClient()
