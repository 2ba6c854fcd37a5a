"""Cache interface for previously verified claims."""

from typing import Optional, Protocol

from ..models.verification import ClaimVerificationResult


class VerificationCache(Protocol):
    """Protocol for looking up earlier verification results.

    Implementations are expected to match semantically similar claims and
    return a hit only above their own similarity threshold.
    """

    async def lookup(self, claim: str) -> Optional[ClaimVerificationResult]:
        """Return a cached result for the claim, or None on a miss."""
        ...
