"""Tests for the claim verification service."""

import asyncio
from unittest.mock import AsyncMock, call

import pytest

from claim_verifier.domain.models.quality import QualityAssessment
from claim_verifier.domain.models.reasoning import Verdict
from claim_verifier.domain.models.settings import CorrectionPolicy, PipelineSettings
from claim_verifier.domain.models.trust import SourceType
from claim_verifier.domain.models.verification import (
    GENERAL_ERROR_ID,
    NO_CLAIMS_FOUND_ID,
    ClaimStatus,
    ClaimVerificationResult,
    ExtractionFailed,
    NoClaimsFound,
    PerClaimResults,
)
from claim_verifier.domain.ports.ai_provider import ExplanationOutcome
from claim_verifier.domain.services.trust_analysis_service import TrustAnalysisService
from claim_verifier.domain.services.verification_service import ClaimVerificationService

from conftest import FIXED_EPOCH, make_outcome, make_trust


def build_service(ai_provider, search_provider, cache=None, clock=None, **settings) -> ClaimVerificationService:
    """Service with custom pipeline settings."""
    return ClaimVerificationService(
        ai_provider,
        TrustAnalysisService(ai_provider, search_provider),
        cache=cache,
        settings=PipelineSettings(**settings),
        clock=clock or (lambda: FIXED_EPOCH),
    )


def evidence_passed_to_explanation(ai_provider: AsyncMock, claim: str) -> str:
    """Evidence text handed to the explanation synthesizer for a claim."""
    for recorded in ai_provider.generate_explanation.await_args_list:
        if recorded.args[0] == claim:
            return recorded.args[1]
    raise AssertionError(f"No explanation requested for {claim!r}")


@pytest.mark.asyncio
async def test_two_supported_claims(service, ai_provider, search_provider):
    """Test the reference example: two confident, supported claims."""
    results = await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    assert len(results) == 2
    assert [r.claim_text for r in results] == ["The sky is blue.", "Paris is in France."]
    assert all(r.status == ClaimStatus.SUPPORTED for r in results)
    assert all(r.trust_analysis.score == 0.9 for r in results)
    assert all(not r.is_processing for r in results)
    assert results[0].id == f"claim-{int(FIXED_EPOCH * 1000)}-0"
    assert results[1].id == f"claim-{int(FIXED_EPOCH * 1000)}-1"
    assert results[0].original_text == "The sky is blue. Paris is in France."
    assert results[0].explanation == "Confirmed by sources."
    assert results[0].confidence == 0.95

    # No sub-claim expansion at confidence 0.95
    assert ai_provider.reason_about_claim.await_count == 2
    ai_provider.reason_about_claim.assert_any_await("The sky is blue.", max_iterations=2)
    assert search_provider.search.await_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_blank_input_returns_empty_list(service, ai_provider, text):
    """Test that blank input produces no results and no collaborator calls."""
    assert await service.verify_claims_in_text(text) == []
    ai_provider.extract_claims.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_claims_found(service, ai_provider):
    """Test the sentinel returned when nothing is extracted."""
    ai_provider.extract_claims.return_value = []

    results = await service.verify_claims_in_text("Hello there!")

    assert len(results) == 1
    assert results[0].id == NO_CLAIMS_FOUND_ID
    assert results[0].status == ClaimStatus.NEUTRAL
    assert results[0].is_batch_sentinel
    assert isinstance(await service.verify_text("Hello there!"), NoClaimsFound)


@pytest.mark.asyncio
async def test_extraction_failure(service, ai_provider):
    """Test that an extraction failure becomes a single batch-level error."""
    ai_provider.extract_claims.side_effect = RuntimeError("model offline")

    results = await service.verify_claims_in_text("Paris is in France.")

    assert len(results) == 1
    assert results[0].id == GENERAL_ERROR_ID
    assert results[0].status == ClaimStatus.ERROR
    assert results[0].error_message == "model offline"
    assert results[0].sources == []

    outcome = await service.verify_text("Paris is in France.")
    assert isinstance(outcome, ExtractionFailed)
    assert outcome.reason == "model offline"


@pytest.mark.asyncio
async def test_reasoner_failure_is_isolated(service, ai_provider, search_provider):
    """Test that a reasoning failure only affects its own claim."""
    async def reason(claim, max_iterations):
        if claim == "The sky is blue.":
            raise ValueError("Model returned invalid JSON")
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = reason

    results = await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    assert results[0].status == ClaimStatus.ERROR
    assert results[0].error_message == "Model returned invalid JSON"
    assert results[0].sources == []
    assert results[0].trust_analysis is None
    assert results[0].explanation == "An error occurred during verification."
    assert results[1].status == ClaimStatus.SUPPORTED
    assert len(results[1].sources) == 1

    # Downstream stages never ran for the failed claim
    assert search_provider.search.await_count == 1
    assert ai_provider.generate_explanation.await_count == 1


@pytest.mark.asyncio
async def test_quality_failure_uses_fallback(service, ai_provider):
    """Test that a quality evaluation failure degrades instead of failing."""
    ai_provider.evaluate_claim_quality.side_effect = RuntimeError("quality model down")

    results = await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    assert all(r.status == ClaimStatus.SUPPORTED for r in results)
    assert all(r.quality_assessment == QualityAssessment.fallback() for r in results)
    assert results[0].quality_assessment.atomicity.value == "low"
    assert results[0].quality_assessment.fluency.value == "poor"
    assert results[0].quality_assessment.faithfulness.value == "na"


@pytest.mark.asyncio
async def test_quality_receives_original_text(service, ai_provider):
    """Test that quality evaluation sees the input text."""
    await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    ai_provider.evaluate_claim_quality.assert_any_await(
        "Paris is in France.", "The sky is blue. Paris is in France."
    )


@pytest.mark.asyncio
async def test_search_failure_uses_trust_placeholder(service, search_provider):
    """Test that a search failure yields the zero-score placeholder."""
    search_provider.search.side_effect = ConnectionError("network unreachable")

    results = await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    for result in results:
        assert result.status == ClaimStatus.SUPPORTED
        assert result.trust_analysis.score == 0
        assert len(result.sources) == 1
        assert result.sources[0].source_type == SourceType.ERROR
        assert result.real_sources == []


@pytest.mark.asyncio
async def test_trust_synthesis_failure_uses_trust_placeholder(service, ai_provider):
    """Test that a synthesis failure yields the zero-score placeholder."""
    ai_provider.synthesize_trust.side_effect = ValueError("Model did not return a trust score")

    results = await service.verify_claims_in_text("Paris is in France.")

    assert results[0].status == ClaimStatus.SUPPORTED
    assert results[0].trust_analysis.score == 0
    assert [s.source_type for s in results[0].sources] == [SourceType.ERROR]


@pytest.mark.asyncio
async def test_low_confidence_expands_sub_claims(service, ai_provider, search_provider):
    """Test that low confidence with candidates triggers sub-claim verification."""
    ai_provider.extract_claims.return_value = ["Ancient aliens built the pyramids."]

    async def reason(claim, max_iterations):
        if claim == "Ancient aliens built the pyramids.":
            return make_outcome(
                verdict=Verdict.NEUTRAL,
                confidence=0.3,
                sub_claims=["Aliens visited Egypt.", "Pyramids required unknown technology."],
            )
        return make_outcome(verdict=Verdict.CONTRADICTED, confidence=0.9, reasoning=f"No evidence: {claim}")

    ai_provider.reason_about_claim.side_effect = reason

    results = await service.verify_claims_in_text("Ancient aliens built the pyramids.")

    assert results[0].status == ClaimStatus.NEUTRAL
    assert ai_provider.reason_about_claim.await_args_list == [
        call("Ancient aliens built the pyramids.", max_iterations=2),
        call("Aliens visited Egypt.", max_iterations=1),
        call("Pyramids required unknown technology.", max_iterations=1),
    ]
    # One trust analysis per sub-claim plus the main claim
    assert search_provider.search.await_count == 3

    evidence = evidence_passed_to_explanation(ai_provider, "Ancient aliens built the pyramids.")
    assert "Sub-claim 1: Aliens visited Egypt." in evidence
    assert "Sub-claim 2: Pyramids required unknown technology." in evidence
    assert "Verdict: contradicted (confidence 0.90)" in evidence
    assert "Search query: search query" in evidence
    assert evidence.index("Claim quality") < evidence.index("Initial verdict") < evidence.index("Sub-claim 1") \
        < evidence.index("Sub-claim 2") < evidence.rindex("Trust score")


@pytest.mark.asyncio
async def test_unknown_confidence_expands_sub_claims(service, ai_provider):
    """Test that a missing confidence counts as low confidence."""
    ai_provider.extract_claims.return_value = ["Claim"]
    ai_provider.reason_about_claim.side_effect = [
        make_outcome(confidence=None, sub_claims=["Sub-claim"]),
        make_outcome(),
    ]

    await service.verify_claims_in_text("Claim")

    assert ai_provider.reason_about_claim.await_count == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("confidence", [0.85, 0.9, 1.0])
async def test_high_confidence_skips_sub_claims(service, ai_provider, search_provider, confidence):
    """Test that confidence at or above the threshold never expands."""
    ai_provider.extract_claims.return_value = ["Claim"]
    ai_provider.reason_about_claim.return_value = make_outcome(
        confidence=confidence, sub_claims=["Sub-claim A", "Sub-claim B"]
    )

    await service.verify_claims_in_text("Claim")

    assert ai_provider.reason_about_claim.await_count == 1
    assert search_provider.search.await_count == 1


@pytest.mark.asyncio
async def test_low_confidence_without_candidates_skips_sub_claims(service, ai_provider):
    """Test that expansion needs at least one candidate sub-claim."""
    ai_provider.extract_claims.return_value = ["Claim"]
    ai_provider.reason_about_claim.return_value = make_outcome(confidence=0.2, sub_claims=[])

    await service.verify_claims_in_text("Claim")

    assert ai_provider.reason_about_claim.await_count == 1


@pytest.mark.asyncio
async def test_threshold_is_configurable(ai_provider, search_provider):
    """Test that the expansion threshold comes from settings."""
    service = build_service(ai_provider, search_provider, sub_claim_confidence_threshold=0.99)
    ai_provider.extract_claims.return_value = ["Claim"]
    ai_provider.reason_about_claim.return_value = make_outcome(confidence=0.95, sub_claims=["Sub-claim"])

    await service.verify_claims_in_text("Claim")

    assert ai_provider.reason_about_claim.await_count == 2


@pytest.mark.asyncio
async def test_sub_claim_failure_is_noted_inline(service, ai_provider):
    """Test that a failing sub-claim does not abort its parent."""
    ai_provider.extract_claims.return_value = ["Main claim"]

    async def reason(claim, max_iterations):
        if claim == "Main claim":
            return make_outcome(verdict=Verdict.SUPPORTED, confidence=0.5, sub_claims=["Broken", "Fine"])
        if claim == "Broken":
            raise RuntimeError("sub-claim model error")
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = reason

    results = await service.verify_claims_in_text("Main claim")

    assert results[0].status == ClaimStatus.SUPPORTED
    evidence = evidence_passed_to_explanation(ai_provider, "Main claim")
    assert "Sub-claim 1: Broken\n  Error verifying this sub-claim: sub-claim model error" in evidence
    assert "Sub-claim 2: Fine\n  Verdict: supported" in evidence


@pytest.mark.asyncio
async def test_sub_claim_trust_failure_uses_placeholder(service, ai_provider, search_provider):
    """Test that a sub-claim trust failure degrades to the placeholder."""
    ai_provider.extract_claims.return_value = ["Main claim"]
    ai_provider.reason_about_claim.side_effect = [
        make_outcome(confidence=0.4, sub_claims=["Sub-claim"]),
        make_outcome(),
    ]
    search_provider.search.side_effect = [ConnectionError("down"), search_provider.search.return_value]

    results = await service.verify_claims_in_text("Main claim")

    assert results[0].status == ClaimStatus.SUPPORTED
    assert results[0].trust_analysis.score == 0.9
    evidence = evidence_passed_to_explanation(ai_provider, "Main claim")
    assert "Sub-claim 1: Sub-claim\n  Verdict: supported" in evidence
    assert "  Trust score: 0.00" in evidence


@pytest.mark.asyncio
async def test_explanation_failure_falls_back_to_reasoning(service, ai_provider):
    """Test that a failing synthesizer still yields an explanation."""
    ai_provider.extract_claims.return_value = ["Paris is in France."]
    ai_provider.reason_about_claim.return_value = make_outcome(reasoning="Paris is the French capital.")
    ai_provider.generate_explanation.side_effect = RuntimeError("explanation model down")

    results = await service.verify_claims_in_text("Paris is in France.")

    assert results[0].status == ClaimStatus.SUPPORTED
    assert "Paris is the French capital." in results[0].explanation
    assert "Trust analysis: Encyclopedic sources agree." in results[0].explanation
    assert results[0].corrected_information is None


@pytest.mark.asyncio
async def test_explanation_receives_primary_verdict(service, ai_provider):
    """Test that the synthesizer is called with the primary verdict."""
    ai_provider.extract_claims.return_value = ["The Earth is flat."]
    ai_provider.reason_about_claim.return_value = make_outcome(verdict=Verdict.CONTRADICTED, confidence=0.98)

    await service.verify_claims_in_text("The Earth is flat.")

    recorded = ai_provider.generate_explanation.await_args
    assert recorded.args[0] == "The Earth is flat."
    assert recorded.args[2] == Verdict.CONTRADICTED


@pytest.mark.asyncio
async def test_correction_kept_for_contradicted_claims(service, ai_provider):
    """Test that a contradicted claim keeps its correction."""
    ai_provider.extract_claims.return_value = ["The Earth is flat."]
    ai_provider.reason_about_claim.return_value = make_outcome(verdict=Verdict.CONTRADICTED, confidence=0.98)
    ai_provider.generate_explanation.return_value = ExplanationOutcome(
        explanation="The Earth is not flat.",
        corrected_information="The Earth is an oblate spheroid.",
    )

    results = await service.verify_claims_in_text("The Earth is flat.")

    assert results[0].status == ClaimStatus.CONTRADICTED
    assert results[0].corrected_information == "The Earth is an oblate spheroid."


@pytest.mark.asyncio
async def test_correction_dropped_for_other_verdicts(service, ai_provider):
    """Test that only contradicted claims keep a correction by default."""
    ai_provider.extract_claims.return_value = ["Claim"]
    ai_provider.reason_about_claim.return_value = make_outcome(verdict=Verdict.NEUTRAL, confidence=0.9)
    ai_provider.generate_explanation.return_value = ExplanationOutcome(
        explanation="Unclear.", corrected_information="Something else."
    )

    results = await service.verify_claims_in_text("Claim")

    assert results[0].corrected_information is None


@pytest.mark.asyncio
async def test_synthesizer_correction_policy(ai_provider, search_provider):
    """Test that the synthesizer policy keeps corrections for any verdict."""
    service = build_service(ai_provider, search_provider, correction_policy=CorrectionPolicy.SYNTHESIZER)
    ai_provider.extract_claims.return_value = ["Claim"]
    ai_provider.reason_about_claim.return_value = make_outcome(verdict=Verdict.NEUTRAL, confidence=0.9)
    ai_provider.generate_explanation.return_value = ExplanationOutcome(
        explanation="Unclear.", corrected_information="Something else."
    )

    results = await service.verify_claims_in_text("Claim")

    assert results[0].corrected_information == "Something else."


@pytest.mark.asyncio
async def test_repeated_runs_differ_only_in_ids(ai_provider, search_provider):
    """Test that identical input yields identical content apart from ids."""
    stamps = iter([1700000000.0, 1700000123.0])
    service = build_service(ai_provider, search_provider, clock=lambda: next(stamps))
    ai_provider.reason_about_claim.return_value = make_outcome(confidence=0.5, sub_claims=["Sub-claim"])

    first = await service.verify_claims_in_text("The sky is blue. Paris is in France.")
    second = await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    assert [r.id for r in first] != [r.id for r in second]
    assert [r.model_dump(exclude={"id"}) for r in first] == [r.model_dump(exclude={"id"}) for r in second]


@pytest.mark.asyncio
async def test_cache_hit_short_circuits(ai_provider, search_provider):
    """Test that a cache hit is reused with a fresh id and context."""
    cached = ClaimVerificationResult(
        id="claim-1-0",
        claim_text="Paris is in France.",
        status=ClaimStatus.SUPPORTED,
        explanation="Cached explanation.",
        trust_analysis=make_trust(),
        original_text="Older text.",
    )
    cache = AsyncMock()
    cache.lookup.return_value = cached
    service = build_service(ai_provider, search_provider, cache=cache)
    ai_provider.extract_claims.return_value = ["Paris is in France."]

    results = await service.verify_claims_in_text("Paris is in France.")

    assert results[0].explanation == "Cached explanation."
    assert results[0].id == f"claim-{int(FIXED_EPOCH * 1000)}-0"
    assert results[0].original_text == "Paris is in France."
    ai_provider.reason_about_claim.assert_not_awaited()
    search_provider.search.assert_not_awaited()


@pytest.mark.asyncio
async def test_cache_failure_is_treated_as_miss(ai_provider, search_provider):
    """Test that a failing cache does not block verification."""
    cache = AsyncMock()
    cache.lookup.side_effect = RuntimeError("cache unavailable")
    service = build_service(ai_provider, search_provider, cache=cache)

    results = await service.verify_claims_in_text("The sky is blue. Paris is in France.")

    assert all(r.status == ClaimStatus.SUPPORTED for r in results)


@pytest.mark.asyncio
async def test_call_timeout_on_reasoning_is_claim_fatal(ai_provider, search_provider):
    """Test that a reasoning call exceeding its timeout fails the claim."""
    service = build_service(ai_provider, search_provider, call_timeout=0.05)
    ai_provider.extract_claims.return_value = ["Slow claim"]

    async def slow_reason(claim, max_iterations):
        await asyncio.sleep(1)
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = slow_reason

    results = await service.verify_claims_in_text("Slow claim")

    assert results[0].status == ClaimStatus.ERROR
    assert results[0].error_message


@pytest.mark.asyncio
async def test_batch_deadline_marks_unfinished_claims(ai_provider, search_provider):
    """Test that claims still running at the deadline become errors."""
    service = build_service(ai_provider, search_provider, call_timeout=None, batch_timeout=0.2)
    ai_provider.extract_claims.return_value = ["Fast claim", "Slow claim"]

    async def reason(claim, max_iterations):
        if claim == "Slow claim":
            await asyncio.sleep(5)
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = reason

    results = await service.verify_claims_in_text("Fast claim. Slow claim.")

    assert [r.claim_text for r in results] == ["Fast claim", "Slow claim"]
    assert results[0].status == ClaimStatus.SUPPORTED
    assert results[1].status == ClaimStatus.ERROR
    assert "did not finish within 0.2 seconds" in results[1].error_message


@pytest.mark.asyncio
async def test_concurrency_is_bounded(ai_provider, search_provider):
    """Test that no more claims than allowed run at once."""
    service = build_service(ai_provider, search_provider, max_concurrent_claims=2)
    ai_provider.extract_claims.return_value = [f"Claim {i}" for i in range(6)]
    in_flight = 0
    peak = 0

    async def reason(claim, max_iterations):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = reason

    results = await service.verify_claims_in_text("Six claims.")

    assert [r.claim_text for r in results] == [f"Claim {i}" for i in range(6)]
    assert peak <= 2


@pytest.mark.asyncio
async def test_results_keep_extraction_order(service, ai_provider):
    """Test that result order follows extraction order, not completion order."""
    ai_provider.extract_claims.return_value = ["First", "Second", "Third"]
    delays = {"First": 0.05, "Second": 0.0, "Third": 0.02}

    async def reason(claim, max_iterations):
        await asyncio.sleep(delays[claim])
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = reason

    outcome = await service.verify_text("First. Second. Third.")

    assert isinstance(outcome, PerClaimResults)
    assert [r.claim_text for r in outcome.results] == ["First", "Second", "Third"]


@pytest.mark.asyncio
async def test_cancelled_batch_stops_claim_tasks(ai_provider, search_provider):
    """Test that cancelling a deadline-bounded batch cancels every claim task."""
    service = build_service(ai_provider, search_provider, batch_timeout=10)
    started = asyncio.Event()
    cancelled = []

    async def reason(claim, max_iterations):
        started.set()
        try:
            await asyncio.sleep(2)
        except asyncio.CancelledError:
            cancelled.append(claim)
            raise
        return make_outcome()

    ai_provider.reason_about_claim.side_effect = reason
    outer = asyncio.create_task(service.verify_claims_in_text("The sky is blue. Paris is in France."))
    await started.wait()
    await asyncio.sleep(0.05)

    outer.cancel()
    with pytest.raises(asyncio.CancelledError):
        await outer

    assert sorted(cancelled) == ["Paris is in France.", "The sky is blue."]
    assert [t for t in asyncio.all_tasks() if t is not asyncio.current_task()] == []


@pytest.mark.asyncio
async def test_every_extracted_entry_gets_a_result(service, ai_provider):
    """Test that result count and ids follow the extractor output positions."""
    ai_provider.extract_claims.return_value = ["A.", "  ", "B."]

    results = await service.verify_claims_in_text("A. B.")

    stamp = int(FIXED_EPOCH * 1000)
    assert [r.id for r in results] == [f"claim-{stamp}-0", f"claim-{stamp}-1", f"claim-{stamp}-2"]
    assert [r.claim_text for r in results] == ["A.", "", "B."]
