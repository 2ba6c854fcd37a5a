"""Domain models for claim reasoning verdicts."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    """Possible verification outcomes for a claim."""

    SUPPORTED = "supported"  # Evidence supports the claim
    CONTRADICTED = "contradicted"  # Evidence contradicts the claim
    NEUTRAL = "neutral"  # Not enough evidence either way


class ReasoningOutcome(BaseModel):
    """Result of reasoning about a single claim."""

    model_config = ConfigDict(frozen=True)

    verdict: Verdict = Field(..., description="Overall verdict for the claim")
    reasoning: str = Field(..., description="Explanation of the reasoning process")
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0, description="Confidence in the verdict (0-1)")
    nuance: Optional[str] = Field(None, description="Ambiguities or context dependencies")
    sub_claims: List[str] = Field(
        default_factory=list,
        description="Narrower claims worth verifying independently",
    )

    def should_expand(self, threshold: float) -> bool:
        """Check whether the sub-claims should be verified on their own.

        Expansion requires at least one candidate sub-claim and a confidence
        that is either unknown or strictly below the threshold.
        """
        if not self.sub_claims:
            return False
        return self.confidence is None or self.confidence < threshold
