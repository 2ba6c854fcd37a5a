"""Domain model for claim quality assessments."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Atomicity(str, Enum):
    """Whether the claim is a single indivisible statement."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Fluency(str, Enum):
    """Grammatical correctness and readability."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class Decontextualization(str, Enum):
    """Whether the claim stands on its own without surrounding text."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Faithfulness(str, Enum):
    """How accurately the claim represents the original text."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NA = "na"  # No original text to compare against


class Focus(str, Enum):
    """How specific the claim is."""

    SPECIFIC = "specific"
    NEUTRAL = "neutral"
    BROAD = "broad"


class Checkworthiness(str, Enum):
    """Whether the claim can be checked against evidence."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


FALLBACK_ASSESSMENT_TEXT = "Could not evaluate claim quality due to an LLM error."


class QualityAssessment(BaseModel):
    """Linguistic quality of a claim along six dimensions."""

    model_config = ConfigDict(frozen=True)

    atomicity: Atomicity
    fluency: Fluency
    decontextualization: Decontextualization
    faithfulness: Faithfulness
    focus: Focus
    checkworthiness: Checkworthiness
    overall_assessment: str = Field(..., description="Brief summary of the claim's suitability for fact-checking")

    @classmethod
    def fallback(cls) -> "QualityAssessment":
        """Assessment used when the evaluator fails."""
        return cls(
            atomicity=Atomicity.LOW,
            fluency=Fluency.POOR,
            decontextualization=Decontextualization.LOW,
            faithfulness=Faithfulness.NA,
            focus=Focus.BROAD,
            checkworthiness=Checkworthiness.LOW,
            overall_assessment=FALLBACK_ASSESSMENT_TEXT,
        )

    def summary(self) -> str:
        """One-line rendering used in evidence transcripts."""
        return (
            f"atomicity={self.atomicity.value}, fluency={self.fluency.value}, "
            f"decontextualization={self.decontextualization.value}, "
            f"faithfulness={self.faithfulness.value}, focus={self.focus.value}, "
            f"checkworthiness={self.checkworthiness.value}"
        )
