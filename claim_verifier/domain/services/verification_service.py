"""Service for coordinating claim verification across AI and search providers."""

import asyncio
import logging
import time
from typing import Callable, List, Optional, Tuple

from ..models.claim import Claim
from ..models.evidence import (
    EvidenceBundle,
    QualityEvidence,
    ReasoningEvidence,
    SubClaimEvidence,
    TrustEvidence,
)
from ..models.quality import QualityAssessment
from ..models.reasoning import Verdict
from ..models.settings import CorrectionPolicy, PipelineSettings
from ..models.trust import TrustAnalysis
from ..models.verification import (
    CLAIM_ERROR_EXPLANATION,
    MISSING_EXPLANATION,
    BatchOutcome,
    ClaimStatus,
    ClaimVerificationResult,
    ExtractionFailed,
    NoClaimsFound,
    PerClaimResults,
)
from ..ports.ai_provider import AIProvider
from ..ports.verification_cache import VerificationCache
from .timeouts import VerificationTimeoutError, call_with_timeout
from .trust_analysis_service import TrustAnalysisService

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Non-empty message for an exception."""
    message = str(error).strip()
    return message or type(error).__name__


class ClaimVerificationService:
    """Drives every stage of claim verification for a block of text.

    Claims are verified concurrently and independently. Within a claim the
    stages run in order: cache gate, quality evaluation, reasoning, optional
    sub-claim expansion, trust analysis and explanation. Only a reasoning
    failure marks a claim as errored; every other stage degrades to a
    fallback value.
    """

    def __init__(
        self,
        ai_provider: AIProvider,
        trust_analyzer: TrustAnalysisService,
        cache: Optional[VerificationCache] = None,
        settings: Optional[PipelineSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the service.

        Args:
            ai_provider: Provider for extraction, quality, reasoning and explanation
            trust_analyzer: Search-backed trust analysis
            cache: Cache consulted before verifying a claim
            settings: Pipeline settings
            clock: Time source used for result identifiers
        """
        self.ai = ai_provider
        self.trust_analyzer = trust_analyzer
        self.cache = cache
        self.settings = settings or PipelineSettings()
        self._clock = clock or time.time
        logger.info("🔧 ClaimVerificationService initialized")

    async def verify_claims_in_text(self, text: str) -> List[ClaimVerificationResult]:
        """Verify every claim found in the text.

        Args:
            text: Free text to verify

        Returns:
            One result per extracted claim in extraction order, an empty list
            for blank input, or a single sentinel result for batch-level outcomes
        """
        outcome = await self.verify_text(text)
        return outcome.to_results()

    async def verify_text(self, text: str) -> BatchOutcome:
        """Verify every claim found in the text and report a typed batch outcome."""
        if not text or not text.strip():
            logger.info("📭 Empty input text, nothing to verify")
            return PerClaimResults(results=[])

        logger.info(f"🔍 Starting verification for text: {text[:100]}...")

        try:
            claim_texts = await call_with_timeout(
                self.ai.extract_claims(text),
                self.settings.call_timeout,
            )
        except Exception as e:
            logger.error(f"❌ Claim extraction failed: {e}", exc_info=True)
            return ExtractionFailed(reason=describe_error(e))

        # One claim per extracted entry, so ids follow extraction position
        claims = [
            Claim(text=(claim_text or "").strip(), index=index)
            for index, claim_text in enumerate(claim_texts or [])
        ]
        if not claims:
            logger.info("📭 No verifiable claims found")
            return NoClaimsFound()

        logger.info(f"📝 Extracted {len(claims)} claims")
        batch_stamp = int(self._clock() * 1000)
        results = await self._verify_all(claims, text, batch_stamp)

        counts = {}
        for result in results:
            counts[result.status.value] = counts.get(result.status.value, 0) + 1
        logger.info(f"✅ Verification complete: {counts}")
        return PerClaimResults(results=results)

    async def _verify_all(
        self,
        claims: List[Claim],
        original_text: str,
        batch_stamp: int,
    ) -> List[ClaimVerificationResult]:
        """Fan out one task per claim and collect results by claim index."""
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_claims)

        async def run(claim: Claim) -> ClaimVerificationResult:
            async with semaphore:
                return await self._run_claim(claim, original_text, batch_stamp)

        tasks = [asyncio.create_task(run(claim)) for claim in claims]

        if self.settings.batch_timeout is None:
            return list(await asyncio.gather(*tasks))

        try:
            done, pending = await asyncio.wait(tasks, timeout=self.settings.batch_timeout)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.error(
                f"⏱️ Batch deadline of {self.settings.batch_timeout}s expired with "
                f"{len(pending)} of {len(claims)} claims unfinished"
            )

        results = []
        for claim, task in zip(claims, tasks):
            if task in done:
                results.append(task.result())
            else:
                timeout_error = VerificationTimeoutError(
                    f"Verification did not finish within {self.settings.batch_timeout} seconds"
                )
                results.append(
                    self._error_result(
                        claim,
                        self._claim_id(batch_stamp, claim),
                        original_text,
                        timeout_error,
                    )
                )
        return results

    async def _run_claim(
        self,
        claim: Claim,
        original_text: str,
        batch_stamp: int,
    ) -> ClaimVerificationResult:
        """Verify one claim, turning any escaped failure into an error result."""
        claim_id = self._claim_id(batch_stamp, claim)
        try:
            return await self._verify_claim(claim, claim_id, original_text)
        except Exception as e:
            logger.error(f"❌ Unexpected failure verifying claim '{claim.text}': {e}", exc_info=True)
            return self._error_result(claim, claim_id, original_text, e)

    async def _verify_claim(
        self,
        claim: Claim,
        claim_id: str,
        original_text: str,
    ) -> ClaimVerificationResult:
        """Run every stage of the pipeline for a single claim."""
        logger.info(f"🔍 Verifying claim {claim.index + 1}: {claim.text}")

        cached = await self._check_cache(claim.text)
        if cached is not None:
            logger.info(f"♻️ Cache hit for claim: {claim.text}")
            return cached.model_copy(update={"id": claim_id, "original_text": original_text})

        bundle = EvidenceBundle(claim=claim.text)

        quality = await self._evaluate_quality(claim.text, original_text)
        bundle.add(QualityEvidence(quality))

        try:
            outcome = await call_with_timeout(
                self.ai.reason_about_claim(claim.text, max_iterations=self.settings.primary_max_iterations),
                self.settings.call_timeout,
            )
        except Exception as e:
            logger.error(f"❌ Reasoning failed for claim '{claim.text}': {e}", exc_info=True)
            return self._error_result(claim, claim_id, original_text, e, quality)

        logger.info(f"🤖 Verdict {outcome.verdict.value} (confidence {outcome.confidence}) for: {claim.text}")
        bundle.add(ReasoningEvidence(outcome))

        if outcome.should_expand(self.settings.sub_claim_confidence_threshold):
            logger.info(f"🌿 Expanding {len(outcome.sub_claims)} sub-claims for: {claim.text}")
            bundle.extend(await self._expand_sub_claims(outcome.sub_claims))

        trust = await self._analyze_trust_or_placeholder(claim.text)
        bundle.add(TrustEvidence(trust))

        explanation, corrected_information = await self._explain(claim.text, bundle, outcome.verdict)

        return ClaimVerificationResult(
            id=claim_id,
            claim_text=claim.text,
            status=ClaimStatus.from_verdict(outcome.verdict),
            explanation=explanation,
            corrected_information=corrected_information,
            trust_analysis=trust,
            sources=list(trust.sources),
            is_processing=False,
            quality_assessment=quality,
            confidence=outcome.confidence,
            nuance=outcome.nuance,
            original_text=original_text,
        )

    async def _check_cache(self, claim: str) -> Optional[ClaimVerificationResult]:
        if self.cache is None:
            return None
        try:
            return await self.cache.lookup(claim)
        except Exception as e:
            logger.warning(f"⚠️ Cache lookup failed, treating as miss: {e}")
            return None

    async def _evaluate_quality(self, claim: str, original_text: str) -> QualityAssessment:
        try:
            return await call_with_timeout(
                self.ai.evaluate_claim_quality(claim, original_text),
                self.settings.call_timeout,
            )
        except Exception as e:
            logger.warning(f"⚠️ Quality evaluation failed for claim '{claim}': {e}")
            return QualityAssessment.fallback()

    async def _expand_sub_claims(self, sub_claims: List[str]) -> List[SubClaimEvidence]:
        """Verify sub-claims one after another, in candidate order."""
        evidence: List[SubClaimEvidence] = []
        candidates = [sub_claim.strip() for sub_claim in sub_claims if sub_claim and sub_claim.strip()]
        for position, sub_claim in enumerate(candidates):
            evidence.append(await self._verify_sub_claim(position, sub_claim))
        return evidence

    async def _verify_sub_claim(self, position: int, sub_claim: str) -> SubClaimEvidence:
        logger.info(f"🌱 Verifying sub-claim {position + 1}: {sub_claim}")
        try:
            outcome = await call_with_timeout(
                self.ai.reason_about_claim(sub_claim, max_iterations=self.settings.sub_claim_max_iterations),
                self.settings.call_timeout,
            )
        except Exception as e:
            logger.warning(f"⚠️ Sub-claim reasoning failed for '{sub_claim}': {e}")
            return SubClaimEvidence(position=position, sub_claim=sub_claim, error=describe_error(e))

        trust = await self._analyze_trust_or_placeholder(sub_claim)
        return SubClaimEvidence(position=position, sub_claim=sub_claim, outcome=outcome, trust=trust)

    async def _analyze_trust_or_placeholder(self, claim: str) -> TrustAnalysis:
        try:
            return await self.trust_analyzer.analyze_trust(claim)
        except Exception as e:
            logger.warning(f"⚠️ Trust analysis failed for '{claim}': {e}")
            return TrustAnalysis.error_placeholder(describe_error(e))

    async def _explain(
        self,
        claim: str,
        bundle: EvidenceBundle,
        verdict: Verdict,
    ) -> Tuple[str, Optional[str]]:
        """Synthesize the final explanation and apply the correction policy."""
        try:
            outcome = await call_with_timeout(
                self.ai.generate_explanation(claim, bundle.render(), verdict),
                self.settings.call_timeout,
            )
        except Exception as e:
            logger.warning(f"⚠️ Explanation synthesis failed for '{claim}': {e}")
            return bundle.fallback_explanation() or MISSING_EXPLANATION, None

        explanation = (outcome.explanation or "").strip() or MISSING_EXPLANATION
        corrected_information = (outcome.corrected_information or "").strip() or None
        if (
            self.settings.correction_policy == CorrectionPolicy.CONTRADICTED_ONLY
            and verdict != Verdict.CONTRADICTED
        ):
            corrected_information = None
        return explanation, corrected_information

    def _error_result(
        self,
        claim: Claim,
        claim_id: str,
        original_text: str,
        error: BaseException,
        quality: Optional[QualityAssessment] = None,
    ) -> ClaimVerificationResult:
        return ClaimVerificationResult(
            id=claim_id,
            claim_text=claim.text,
            status=ClaimStatus.ERROR,
            explanation=CLAIM_ERROR_EXPLANATION,
            error_message=describe_error(error),
            sources=[],
            is_processing=False,
            quality_assessment=quality,
            original_text=original_text,
        )

    @staticmethod
    def _claim_id(batch_stamp: int, claim: Claim) -> str:
        return f"claim-{batch_stamp}-{claim.index}"
