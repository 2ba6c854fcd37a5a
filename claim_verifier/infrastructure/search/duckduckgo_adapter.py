"""DuckDuckGo Instant Answer implementation of the search provider interface."""

import asyncio
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

import httpx
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.models.trust import SourceType
from ...domain.ports.search_provider import SearchProvider, SearchResult

logger = logging.getLogger(__name__)


class DuckDuckGoConfig(BaseModel):
    """Configuration for DuckDuckGo adapter."""

    base_url: str = Field(default="https://api.duckduckgo.com", description="Instant Answer API endpoint")
    user_agent: str = Field(default="ClaimVerifier/0.1", description="User agent for API requests")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")
    max_retries: int = Field(default=3, description="Maximum number of attempts")
    retry_delay: float = Field(default=1.0, description="Delay between retries in seconds")
    related_topics_limit: int = Field(default=3, description="Related topics considered per query")


class DuckDuckGoSearchAdapter(SearchProvider):
    """DuckDuckGo implementation of the search provider interface.

    The Instant Answer API returns summaries rather than a ranked web index:
    - the primary abstract becomes an Abstract record
    - the first related topics become RelatedTopic records
    - a bare heading on an article answer becomes an Article record

    Empty answers are reported as a single NoResult record and transport
    failures as a single Error record, so callers always get something to cite.
    """

    def __init__(
        self,
        config: Optional[DuckDuckGoConfig] = None,
        provider_name: str = "DuckDuckGo",
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            provider_name: Name of the provider
        """
        self._config = config or DuckDuckGoConfig()
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl,
        )

    async def initialize(self) -> None:
        """Initialize the HTTP client."""
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                    headers={"User-Agent": self._config.user_agent},
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize DuckDuckGo provider: {e}")

    async def search(self, query: str, max_results: int = 5) -> List[SearchResult]:
        """Search the Instant Answer API.

        Args:
            query: Search query
            max_results: Maximum number of results

        Returns:
            List of search results, never empty
        """
        if not self._client:
            raise RuntimeError("Provider not initialized")

        cache_key = f"search:{query}:{max_results}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        logger.info(f"🦆 DuckDuckGo search: {query[:100]}")
        try:
            data = await self._fetch(query)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ DuckDuckGo search failed for '{query[:50]}': {e}")
            return [self._error_result()]

        results = self._parse(query, data)[:max_results]
        self._cache[cache_key] = results
        return results

    async def _fetch(self, query: str) -> Dict[str, Any]:
        """Fetch the raw answer, retrying transient failures."""
        params = {
            "q": query,
            "format": "json",
            "no_html": "1",
            "skip_disambig": "1",
        }
        last_error: Optional[Exception] = None
        for attempt in range(1, self._config.max_retries + 1):
            try:
                response = await self._client.get("/", params=params)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError("Unexpected DuckDuckGo response format")
                return data
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.warning(
                    f"⚠️ DuckDuckGo attempt {attempt}/{self._config.max_retries} failed: {e}"
                )
                if attempt < self._config.max_retries:
                    await asyncio.sleep(self._config.retry_delay)
        raise last_error

    def _parse(self, query: str, data: Dict[str, Any]) -> List[SearchResult]:
        """Turn an Instant Answer payload into search records."""
        results: List[SearchResult] = []
        fallback_link = f"https://duckduckgo.com/?q={quote_plus(query)}"

        if data.get("AbstractText"):
            results.append(
                SearchResult(
                    title=data.get("Heading") or query,
                    link=data.get("AbstractURL") or fallback_link,
                    snippet=data["AbstractText"],
                    result_type=SourceType.ABSTRACT,
                )
            )

        related_topics = data.get("RelatedTopics")
        if isinstance(related_topics, list):
            for topic in related_topics[: self._config.related_topics_limit]:
                if not isinstance(topic, dict):
                    continue
                text = topic.get("Text")
                link = topic.get("FirstURL")
                if not text or not link:
                    continue
                # Topic text is usually "Title - snippet"
                parts = text.split(" - ")
                title = parts[0] if len(parts) > 1 else text[:80]
                snippet = " - ".join(parts[1:]) if len(parts) > 1 else text
                if any(existing.link == link for existing in results):
                    continue
                results.append(
                    SearchResult(
                        title=title,
                        link=link,
                        snippet=snippet,
                        result_type=SourceType.RELATED_TOPIC,
                    )
                )

        if not results and data.get("Heading") and data.get("Type") == "A":
            results.append(
                SearchResult(
                    title=data["Heading"],
                    link=fallback_link,
                    snippet="General information found on DuckDuckGo.",
                    result_type=SourceType.ARTICLE,
                )
            )

        if not results:
            results.append(
                SearchResult(
                    title=f'No specific results found for "{query[:50]}" via DuckDuckGo',
                    link=fallback_link,
                    snippet=(
                        "Try rephrasing the query or using more general terms. "
                        "The Instant Answer API only provides summaries."
                    ),
                    result_type=SourceType.NO_RESULT,
                )
            )

        return results

    @staticmethod
    def _error_result() -> SearchResult:
        return SearchResult(
            title="Search Error",
            link="#",
            snippet="Could not perform live internet search due to an error.",
            result_type=SourceType.ERROR,
        )

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "web_search": True,
            "instant_answers": True,
            "caching": True,
            "retry_mechanism": True,
        }
