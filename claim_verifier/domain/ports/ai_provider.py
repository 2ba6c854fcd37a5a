"""Protocol for AI providers."""

from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from ..models.quality import QualityAssessment
from ..models.reasoning import ReasoningOutcome, Verdict
from ..models.trust import TrustAnalysis
from .search_provider import SearchResult


class ExplanationOutcome(BaseModel):
    """Final explanation for a verdict."""

    explanation: str = Field(..., description="Human-readable explanation of the verdict")
    corrected_information: Optional[str] = Field(
        None,
        description="Accurate information when the claim is wrong",
    )


class AIProvider(Protocol):
    """Protocol defining the interface for AI providers."""

    async def initialize(self) -> None:
        """Initialize the AI provider."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def extract_claims(self, text: str) -> List[str]:
        """Extract atomic, verifiable claims in source order."""
        ...

    async def evaluate_claim_quality(
        self,
        claim: str,
        original_text: Optional[str] = None,
    ) -> QualityAssessment:
        """Rate a claim along the six quality dimensions."""
        ...

    async def reason_about_claim(self, claim: str, max_iterations: int) -> ReasoningOutcome:
        """Produce a verdict, confidence and candidate sub-claims."""
        ...

    async def generate_search_queries(self, claim: str) -> List[str]:
        """Generate one to three search queries for a claim."""
        ...

    async def synthesize_trust(
        self,
        claim: str,
        query: str,
        search_results: List[SearchResult],
    ) -> TrustAnalysis:
        """Assess the trustworthiness of the evidence found for a claim."""
        ...

    async def generate_explanation(
        self,
        claim: str,
        evidence: str,
        verdict: Verdict,
    ) -> ExplanationOutcome:
        """Generate a human-readable explanation and optional correction."""
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
