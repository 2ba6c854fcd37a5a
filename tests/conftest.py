"""Test configuration and common fixtures."""

from typing import List, Optional
from unittest.mock import AsyncMock

import pytest

from claim_verifier.domain.models.quality import QualityAssessment
from claim_verifier.domain.models.reasoning import ReasoningOutcome, Verdict
from claim_verifier.domain.models.settings import PipelineSettings
from claim_verifier.domain.models.trust import Source, SourceType, TrustAnalysis
from claim_verifier.domain.ports.ai_provider import ExplanationOutcome
from claim_verifier.domain.ports.search_provider import SearchResult
from claim_verifier.domain.services.trust_analysis_service import TrustAnalysisService
from claim_verifier.domain.services.verification_service import ClaimVerificationService
from claim_verifier.infrastructure.cache.null_cache import NullVerificationCache

FIXED_EPOCH = 1700000000.0


def make_quality() -> QualityAssessment:
    """A good quality assessment."""
    return QualityAssessment(
        atomicity="high",
        fluency="good",
        decontextualization="high",
        faithfulness="high",
        focus="specific",
        checkworthiness="high",
        overall_assessment="Clear, atomic and checkable.",
    )


def make_outcome(
    verdict: Verdict = Verdict.SUPPORTED,
    confidence: Optional[float] = 0.95,
    sub_claims: Optional[List[str]] = None,
    reasoning: str = "Well documented fact.",
    nuance: Optional[str] = None,
) -> ReasoningOutcome:
    """A reasoning outcome with sensible defaults."""
    return ReasoningOutcome(
        verdict=verdict,
        reasoning=reasoning,
        confidence=confidence,
        nuance=nuance,
        sub_claims=sub_claims or [],
    )


def make_trust(score: float = 0.9) -> TrustAnalysis:
    """A trust analysis citing one encyclopedic source."""
    return TrustAnalysis(
        score=score,
        reasoning="Encyclopedic sources agree.",
        sources=[
            Source(
                id="src-1",
                url="https://en.wikipedia.org/wiki/Paris",
                title="Paris",
                summary="Paris is the capital of France.",
                source_type=SourceType.ABSTRACT,
            )
        ],
    )


@pytest.fixture
def ai_provider() -> AsyncMock:
    """AI provider whose collaborators all succeed."""
    provider = AsyncMock()
    provider.extract_claims.return_value = ["The sky is blue.", "Paris is in France."]
    provider.evaluate_claim_quality.return_value = make_quality()
    provider.reason_about_claim.return_value = make_outcome()
    provider.generate_search_queries.return_value = ["search query"]
    provider.synthesize_trust.return_value = make_trust()
    provider.generate_explanation.return_value = ExplanationOutcome(explanation="Confirmed by sources.")
    return provider


@pytest.fixture
def search_provider() -> AsyncMock:
    """Search provider returning a single abstract."""
    provider = AsyncMock()
    provider.search.return_value = [
        SearchResult(
            title="Paris",
            link="https://en.wikipedia.org/wiki/Paris",
            snippet="Paris is the capital of France.",
            result_type=SourceType.ABSTRACT,
        )
    ]
    return provider


@pytest.fixture
def settings() -> PipelineSettings:
    """Default pipeline settings."""
    return PipelineSettings()


@pytest.fixture
def trust_analyzer(ai_provider: AsyncMock, search_provider: AsyncMock) -> TrustAnalysisService:
    """Trust analysis service backed by the mocks."""
    return TrustAnalysisService(ai_provider, search_provider)


@pytest.fixture
def service(
    ai_provider: AsyncMock,
    trust_analyzer: TrustAnalysisService,
    settings: PipelineSettings,
) -> ClaimVerificationService:
    """Verification service with a fixed clock."""
    return ClaimVerificationService(
        ai_provider,
        trust_analyzer,
        cache=NullVerificationCache(),
        settings=settings,
        clock=lambda: FIXED_EPOCH,
    )
