"""Evidence accumulated while verifying a single claim.

The bundle is an ordered, append-only list of tagged entries. It is only
turned into text when handed to the explanation synthesizer.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .quality import QualityAssessment
from .reasoning import ReasoningOutcome
from .trust import TrustAnalysis

TOP_SOURCES_PER_SUB_CLAIM = 3


@dataclass(frozen=True)
class QualityEvidence:
    """Quality assessment of the main claim."""

    assessment: QualityAssessment

    def render(self) -> str:
        return (
            f"Claim quality: {self.assessment.summary()}.\n"
            f"Quality assessment: {self.assessment.overall_assessment}"
        )


@dataclass(frozen=True)
class ReasoningEvidence:
    """Primary reasoning about the main claim."""

    outcome: ReasoningOutcome

    def render(self) -> str:
        lines = [
            f"Initial verdict: {self.outcome.verdict.value}"
            + (f" (confidence {self.outcome.confidence:.2f})" if self.outcome.confidence is not None else ""),
            f"Reasoning: {self.outcome.reasoning}",
        ]
        if self.outcome.nuance:
            lines.append(f"Nuance: {self.outcome.nuance}")
        return "\n".join(lines)


@dataclass(frozen=True)
class SubClaimEvidence:
    """Independent verification of one sub-claim."""

    position: int
    sub_claim: str
    outcome: Optional[ReasoningOutcome] = None
    trust: Optional[TrustAnalysis] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def render(self) -> str:
        header = f"Sub-claim {self.position + 1}: {self.sub_claim}"
        if self.failed:
            return f"{header}\n  Error verifying this sub-claim: {self.error}"

        lines = [header]
        if self.outcome is not None:
            confidence = (
                f"{self.outcome.confidence:.2f}" if self.outcome.confidence is not None else "unknown"
            )
            lines.append(f"  Verdict: {self.outcome.verdict.value} (confidence {confidence})")
            lines.append(f"  Reasoning: {self.outcome.reasoning}")
        if self.trust is not None:
            lines.append(f"  Trust score: {self.trust.score:.2f}")
            lines.append(f"  Search query: {self.trust.search_query or 'n/a'}")
            top_sources = self.trust.evidence_sources[:TOP_SOURCES_PER_SUB_CLAIM]
            if top_sources:
                lines.append("  Top sources:")
                lines.extend(f"    - {source.title} ({source.url})" for source in top_sources)
            else:
                lines.append("  Top sources: none found")
        return "\n".join(lines)


@dataclass(frozen=True)
class TrustEvidence:
    """Trust analysis of the main claim."""

    trust: TrustAnalysis

    def render(self) -> str:
        lines = [
            f"Trust score: {self.trust.score:.2f}",
            f"Trust reasoning: {self.trust.reasoning}",
        ]
        if self.trust.search_query:
            lines.append(f"Search query: {self.trust.search_query}")
        for source in self.trust.evidence_sources:
            snippet = f": {source.summary}" if source.summary else ""
            lines.append(f"- {source.title} ({source.url}){snippet}")
        return "\n".join(lines)


EvidenceEntry = Union[QualityEvidence, ReasoningEvidence, SubClaimEvidence, TrustEvidence]


@dataclass
class EvidenceBundle:
    """Append-only transcript of everything learned about one claim."""

    claim: str
    entries: List[EvidenceEntry] = field(default_factory=list)

    def add(self, entry: EvidenceEntry) -> None:
        """Append an entry to the bundle."""
        self.entries.append(entry)

    def extend(self, entries: List[EvidenceEntry]) -> None:
        """Append several entries in order."""
        self.entries.extend(entries)

    def of_type(self, entry_type: type) -> List[EvidenceEntry]:
        """Entries of the given type, in insertion order."""
        return [entry for entry in self.entries if isinstance(entry, entry_type)]

    @property
    def sub_claims(self) -> List[SubClaimEvidence]:
        return self.of_type(SubClaimEvidence)

    def render(self) -> str:
        """Serialize the bundle into the narrative handed to the synthesizer."""
        sections = []
        sub_claims = self.sub_claims
        for entry in self.entries:
            if isinstance(entry, SubClaimEvidence) and entry is sub_claims[0]:
                sections.append("Sub-claim verification:")
            sections.append(entry.render())
        return "\n\n".join(sections)

    def fallback_explanation(self) -> str:
        """Concatenate the reasoning and trust text gathered so far."""
        parts = []
        for entry in self.entries:
            if isinstance(entry, ReasoningEvidence):
                parts.append(entry.outcome.reasoning)
            elif isinstance(entry, TrustEvidence):
                parts.append(f"Trust analysis: {entry.trust.reasoning}")
        return "\n\n".join(part for part in parts if part)
