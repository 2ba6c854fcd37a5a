"""Service for search-backed trust and provenance analysis."""

import logging
from typing import List, Optional

from ..models.trust import TrustAnalysis
from ..ports.ai_provider import AIProvider
from ..ports.search_provider import SearchProvider
from .timeouts import call_with_timeout

logger = logging.getLogger(__name__)

MAX_SEARCH_QUERIES = 3


class TrustAnalysisService:
    """Analyzes how trustworthy the evidence around a claim is.

    The analysis runs in three steps: generate search queries for the claim,
    search the web with the chosen query, and let the AI provider synthesize
    a trust score from the results.
    """

    def __init__(
        self,
        ai_provider: AIProvider,
        search_provider: SearchProvider,
        max_results: int = 5,
        call_timeout: Optional[float] = None,
    ):
        """Initialize the service.

        Args:
            ai_provider: Provider for query generation and trust synthesis
            search_provider: Provider for web search
            max_results: Maximum search results per query
            call_timeout: Timeout applied to each collaborator call
        """
        self._ai = ai_provider
        self._search = search_provider
        self._max_results = max_results
        self._call_timeout = call_timeout

    async def analyze_trust(self, claim: str) -> TrustAnalysis:
        """Analyze the trust chain for a claim.

        Query generation failures fall back to the claim text. Search and
        synthesis failures propagate to the caller.

        Args:
            claim: Claim text

        Returns:
            Trust analysis with the query that was used
        """
        queries = await self.generate_queries(claim)
        query = queries[0]

        logger.info(f"🔎 Searching for evidence: {query[:100]}")
        results = await call_with_timeout(
            self._search.search(query, max_results=self._max_results),
            self._call_timeout,
        )
        logger.info(f"📚 Search returned {len(results)} results")

        analysis = await call_with_timeout(
            self._ai.synthesize_trust(claim, query, results),
            self._call_timeout,
        )
        logger.info(f"🛡️ Trust score {analysis.score:.2f} for claim: {claim[:60]}")
        return analysis.model_copy(update={"search_query": query})

    async def generate_queries(self, claim: str) -> List[str]:
        """Generate search queries, falling back to the claim itself."""
        try:
            queries = await call_with_timeout(
                self._ai.generate_search_queries(claim),
                self._call_timeout,
            )
        except Exception as e:
            logger.warning(f"⚠️ Search query generation failed, using claim text: {e}")
            return [claim]

        queries = [query.strip() for query in queries or [] if query and query.strip()]
        if not queries:
            logger.warning("⚠️ No search queries generated, using claim text")
            return [claim]
        return queries[:MAX_SEARCH_QUERIES]
