"""Settings that govern the verification pipeline."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CorrectionPolicy(str, Enum):
    """When a synthesized correction is kept on the final result."""

    CONTRADICTED_ONLY = "contradicted_only"  # Only when the primary verdict is contradicted
    SYNTHESIZER = "synthesizer"  # Whatever the explanation synthesizer returns


class PipelineSettings(BaseModel):
    """Read-only configuration for the claim verification service."""

    model_config = ConfigDict(frozen=True)

    sub_claim_confidence_threshold: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="Sub-claims are expanded only below this confidence",
    )
    primary_max_iterations: int = Field(default=2, ge=1, description="Reasoning depth for a main claim")
    sub_claim_max_iterations: int = Field(default=1, ge=1, description="Reasoning depth for a sub-claim")
    max_concurrent_claims: int = Field(default=8, ge=1, description="Claim pipelines allowed in flight")
    call_timeout: Optional[float] = Field(default=60.0, gt=0, description="Timeout per collaborator call (seconds)")
    batch_timeout: Optional[float] = Field(default=None, gt=0, description="Deadline for a whole batch (seconds)")
    search_max_results: int = Field(default=5, ge=1, description="Search results requested per query")
    correction_policy: CorrectionPolicy = Field(default=CorrectionPolicy.CONTRADICTED_ONLY)
