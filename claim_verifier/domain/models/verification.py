"""Domain models for claim verification results and batch outcomes."""

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .quality import QualityAssessment
from .reasoning import Verdict
from .trust import Source, TrustAnalysis

NO_CLAIMS_FOUND_ID = "no_claims_found"
GENERAL_ERROR_ID = "error-general"

CLAIM_ERROR_EXPLANATION = "An error occurred during verification."
MISSING_EXPLANATION = "No detailed explanation available."


class ClaimStatus(str, Enum):
    """Status of a single claim result."""

    SUPPORTED = "supported"
    CONTRADICTED = "contradicted"
    NEUTRAL = "neutral"
    ERROR = "error"  # Pipeline failed for this claim

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "ClaimStatus":
        return cls(verdict.value)


class ClaimVerificationResult(BaseModel):
    """Final, immutable outcome of verifying one claim."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "claim-1718000000000-0",
                "claim_text": "Paris is in France.",
                "status": "supported",
                "explanation": "Paris is the capital and largest city of France.",
                "trust_analysis": {
                    "score": 0.9,
                    "reasoning": "Encyclopedic sources agree.",
                    "search_query": "Paris France",
                    "sources": [],
                },
                "sources": [],
                "is_processing": False,
                "confidence": 0.97,
            }
        },
    )

    id: str = Field(..., description="Result identifier")
    claim_text: str = Field(..., description="The verified claim")
    status: ClaimStatus = Field(..., description="Verification status")
    explanation: str = Field(..., description="Human-readable explanation")
    corrected_information: Optional[str] = Field(None, description="Correction when the claim is false")
    trust_analysis: Optional[TrustAnalysis] = Field(None, description="Trust/provenance analysis")
    sources: List[Source] = Field(default_factory=list, description="Sources consulted")
    is_processing: bool = Field(False, description="Whether processing is still running")
    error_message: Optional[str] = Field(None, description="Error message when status is error")
    quality_assessment: Optional[QualityAssessment] = Field(None, description="Claim quality")
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0, description="Confidence in the verdict")
    nuance: Optional[str] = Field(None, description="Nuance description")
    original_text: Optional[str] = Field(None, description="Input text the claim came from")

    @property
    def real_sources(self) -> List[Source]:
        """Sources suitable for presenting as evidence."""
        return [source for source in self.sources if source.is_evidence]

    @property
    def is_batch_sentinel(self) -> bool:
        """Check whether this result signals a batch-level outcome."""
        return self.id in (NO_CLAIMS_FOUND_ID, GENERAL_ERROR_ID)


class PerClaimResults(BaseModel):
    """Claims were extracted and each produced a result."""

    kind: Literal["per_claim_results"] = "per_claim_results"
    results: List[ClaimVerificationResult] = Field(default_factory=list)

    def to_results(self) -> List[ClaimVerificationResult]:
        return list(self.results)


class NoClaimsFound(BaseModel):
    """Extraction succeeded but found nothing to verify."""

    kind: Literal["no_claims_found"] = "no_claims_found"

    def to_results(self) -> List[ClaimVerificationResult]:
        return [
            ClaimVerificationResult(
                id=NO_CLAIMS_FOUND_ID,
                claim_text="No verifiable claims found in the provided text.",
                status=ClaimStatus.NEUTRAL,
                explanation=(
                    "The system could not identify any specific statements to verify. "
                    "Please try rephrasing or providing more detailed text."
                ),
                sources=[],
            )
        ]


class ExtractionFailed(BaseModel):
    """Claim extraction itself failed."""

    kind: Literal["extraction_failed"] = "extraction_failed"
    reason: str

    def to_results(self) -> List[ClaimVerificationResult]:
        return [
            ClaimVerificationResult(
                id=GENERAL_ERROR_ID,
                claim_text="Input Text Processing Error",
                status=ClaimStatus.ERROR,
                explanation="An error occurred while trying to process the input text.",
                error_message=self.reason,
                sources=[],
            )
        ]


BatchOutcome = Union[PerClaimResults, NoClaimsFound, ExtractionFailed]
