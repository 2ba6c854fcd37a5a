"""Wikipedia implementation of the search provider interface."""

import asyncio
import logging
import re
from typing import Dict, FrozenSet, List, Optional
from urllib.parse import quote_plus

import wikipediaapi
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.models.trust import SourceType
from ...domain.ports.search_provider import SearchProvider, SearchResult

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES: FrozenSet[str] = frozenset({
    "en", "es", "fr", "de", "it", "pt", "nl", "pl", "ru", "ja",
    "zh", "ar", "ko", "hi", "tr", "id", "vi", "fa", "uk",
})


class WikipediaConfig(BaseModel):
    """Configuration for Wikipedia adapter."""

    user_agent: str = Field(default="ClaimVerifier/0.1", description="User agent for Wikipedia API")
    language: str = Field(default="en", description="Initial article language")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")
    min_relevance: float = Field(default=0.3, description="Minimum relevance for linked pages")
    summary_length: int = Field(default=500, description="Characters of summary kept as snippet")


class WikipediaSearchAdapter(SearchProvider):
    """Searches Wikipedia for articles that can back or refute a claim.

    The article whose title matches the query is always kept. Pages it links
    to are kept when their title and summary overlap the query terms enough.
    """

    def __init__(
        self,
        config: Optional[WikipediaConfig] = None,
        provider_name: str = "Wikipedia",
    ):
        self._config = config or WikipediaConfig()
        self._name = provider_name
        self._language = self._config.language
        self._wiki: Optional[wikipediaapi.Wikipedia] = None
        self._cache = TTLCache(maxsize=self._config.cache_maxsize, ttl=self._config.cache_ttl)

    def _make_client(self, language: str) -> wikipediaapi.Wikipedia:
        return wikipediaapi.Wikipedia(user_agent=self._config.user_agent, language=language)

    async def initialize(self) -> None:
        """Create the Wikipedia API client for the configured language.

        Raises:
            ValueError: If the configured language is not supported
            ConnectionError: If the client cannot be created
        """
        await self.set_language(self._config.language)
        try:
            self._wiki = self._make_client(self._language)
        except Exception as e:
            self._wiki = None
            raise ConnectionError(f"Failed to initialize Wikipedia provider: {e}")

    async def search(self, query: str, max_results: int = 5) -> List[SearchResult]:
        """Search for articles matching the query.

        Args:
            query: Search query
            max_results: Maximum number of results

        Returns:
            Matching articles, or a single NoResult or Error record
        """
        if self._wiki is None:
            raise RuntimeError("Provider not initialized")

        cache_key = (self._language, query, max_results)
        if cache_key in self._cache:
            return self._cache[cache_key]

        logger.info(f"📖 Wikipedia search ({self._language}): {query[:100]}")
        try:
            results = await asyncio.to_thread(self._lookup, query, max_results)
        except Exception as e:
            logger.error(f"❌ Wikipedia search failed for '{query[:50]}': {e}")
            return [
                SearchResult(
                    title="Search Error",
                    link="#",
                    snippet="Could not search Wikipedia due to an error.",
                    result_type=SourceType.ERROR,
                )
            ]

        if not results:
            return [
                SearchResult(
                    title=f'No Wikipedia article found for "{query[:50]}"',
                    link=f"https://{self._language}.wikipedia.org/w/index.php?search={quote_plus(query)}",
                    snippet="Try rephrasing the query or using more general terms.",
                    result_type=SourceType.NO_RESULT,
                )
            ]

        self._cache[cache_key] = results
        return results

    def _lookup(self, query: str, max_results: int) -> List[SearchResult]:
        """Blocking lookup of the matching article and its relevant links."""
        title = " ".join(re.sub(r"[^\w\s]", " ", query).split())
        page = self._wiki.page(title)
        if not page.exists():
            return []

        scored = [(self._calculate_relevance(title, page.title, page.summary), self._to_result(page))]
        seen = {page.title}
        for linked in list(page.links.values())[: max_results * 2]:
            if len(scored) >= max_results:
                break
            if linked.title in seen or not linked.exists():
                continue
            seen.add(linked.title)
            relevance = self._calculate_relevance(title, linked.title, linked.summary)
            if relevance >= self._config.min_relevance:
                scored.append((relevance, self._to_result(linked)))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [result for _, result in scored]

    def _to_result(self, page) -> SearchResult:
        return SearchResult(
            title=page.title,
            link=page.fullurl,
            snippet=page.summary[: self._config.summary_length],
            result_type=SourceType.ARTICLE,
        )

    @staticmethod
    def _calculate_relevance(query: str, title: str, summary: str) -> float:
        """Score a page by query term overlap with its title and summary.

        Title overlap weighs 0.6 and summary overlap 0.4. The score is
        boosted by half when the whole query appears in the title.
        """
        query = query.lower()
        terms = set(re.findall(r"\w+", query))
        if not terms:
            return 0.0

        in_title = len(terms & set(re.findall(r"\w+", title.lower())))
        in_summary = len(terms & set(re.findall(r"\w+", summary.lower())))
        score = 0.6 * in_title / len(terms) + 0.4 * in_summary / len(terms)
        if query in title.lower():
            score *= 1.5
        return min(1.0, score)

    async def set_language(self, language_code: str) -> None:
        """Switch the article language for subsequent searches.

        Raises:
            ValueError: If the language is not supported
        """
        if language_code not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Language {language_code} not supported, choose one of {sorted(SUPPORTED_LANGUAGES)}")
        self._language = language_code
        if self._wiki is not None:
            self._wiki = self._make_client(language_code)

    async def shutdown(self) -> None:
        self._wiki = None

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return self._wiki is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {"web_search": True, "multi_language": True, "caching": True}
