"""Domain models for trust and provenance analysis."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    """Kind of search record a source was built from."""

    ABSTRACT = "Abstract"
    RELATED_TOPIC = "RelatedTopic"
    ARTICLE = "Article"
    NO_RESULT = "NoResult"
    ERROR = "Error"

    @property
    def is_error_marker(self) -> bool:
        """Markers are kept for traceability but are not evidence."""
        return self in (SourceType.NO_RESULT, SourceType.ERROR)


class Source(BaseModel):
    """A source consulted while verifying a claim."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identifier of the source within its result")
    url: str = Field(..., description="URL of the source")
    title: str = Field(..., description="Title of the source")
    trust_score: Optional[float] = Field(None, ge=0.0, le=1.0, description="Trust score for this source")
    summary: Optional[str] = Field(None, description="Short summary or snippet")
    source_type: Optional[SourceType] = Field(None, description="Kind of search record")

    @property
    def is_evidence(self) -> bool:
        """Check whether the source should be presented as real evidence."""
        return self.source_type is None or not self.source_type.is_error_marker


TRUST_ERROR_REASONING = "Trust analysis could not be completed due to an error."


class TrustAnalysis(BaseModel):
    """Assessed reliability of the evidence found for a claim."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(..., ge=0.0, le=1.0, description="Trust score (0-1)")
    reasoning: str = Field(..., description="How the score was determined")
    search_query: Optional[str] = Field(None, description="Search query used")
    sources: List[Source] = Field(default_factory=list, description="Sources considered relevant")

    @property
    def evidence_sources(self) -> List[Source]:
        """Sources without error or no-result markers."""
        return [source for source in self.sources if source.is_evidence]

    @classmethod
    def error_placeholder(cls, message: Optional[str] = None) -> "TrustAnalysis":
        """Placeholder substituted when trust analysis fails."""
        return cls(
            score=0.0,
            reasoning=TRUST_ERROR_REASONING,
            search_query=None,
            sources=[
                Source(
                    id="src-error",
                    url="#",
                    title="Trust analysis error",
                    summary=message,
                    source_type=SourceType.ERROR,
                )
            ],
        )
