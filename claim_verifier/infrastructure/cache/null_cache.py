"""Verification cache that never reports a hit."""

from typing import Optional

from ...domain.models.verification import ClaimVerificationResult
from ...domain.ports.verification_cache import VerificationCache


class NullVerificationCache(VerificationCache):
    """Placeholder cache: every lookup is a miss."""

    async def lookup(self, claim: str) -> Optional[ClaimVerificationResult]:
        return None
