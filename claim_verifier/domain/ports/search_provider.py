"""Search provider interface for evidence discovery."""

from typing import Dict, List, Protocol

from pydantic import BaseModel, Field

from ..models.trust import SourceType


class SearchResult(BaseModel):
    """A single web search record."""

    title: str = Field(..., description="Result title")
    link: str = Field(..., description="Result URL")
    snippet: str = Field(..., description="Short excerpt")
    result_type: SourceType = Field(SourceType.ARTICLE, description="Kind of record")


class SearchProvider(Protocol):
    """Protocol for web search providers."""

    async def initialize(self) -> None:
        """Initialize the provider and verify connection."""
        ...

    async def search(self, query: str, max_results: int = 5) -> List[SearchResult]:
        """Search for records matching the query.

        Never returns an empty list: lack of results and transport failures
        are reported as a single NoResult or Error record.
        """
        ...

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        ...
