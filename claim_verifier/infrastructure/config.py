"""Process-wide configuration loaded from the environment."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

from ..domain.models.settings import CorrectionPolicy, PipelineSettings
from .ai.openai_adapter import OpenAIConfig
from .search.duckduckgo_adapter import DuckDuckGoConfig
from .search.wikipedia_adapter import WikipediaConfig

logger = logging.getLogger(__name__)


def _optional_float(name: str, default: Optional[float]) -> Optional[float]:
    """Read a float variable; empty or "none" disables it."""
    raw = os.getenv(name)
    if raw is None:
        return default
    if raw.strip().lower() in ("", "none", "off", "0"):
        return None
    return float(raw)


class VerifierSettings(BaseModel):
    """Configuration for the claim verifier and its collaborators."""

    ai_provider: str = "openai"
    search_provider: str = "duckduckgo"
    openai: OpenAIConfig = Field(default_factory=lambda: OpenAIConfig(api_key=""))
    duckduckgo: DuckDuckGoConfig = Field(default_factory=DuckDuckGoConfig)
    wikipedia: WikipediaConfig = Field(default_factory=WikipediaConfig)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    @classmethod
    def from_env(cls) -> "VerifierSettings":
        """Create configuration from environment variables."""
        api_key = os.getenv("OPENAI_API_KEY", "")
        if not api_key:
            logger.warning("⚠️ OPENAI_API_KEY not found in environment variables")
        else:
            logger.info(f"✅ OpenAI API key loaded: {len(api_key)} chars")

        openai_config = OpenAIConfig(
            api_key=api_key,
            model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.1")),
            timeout=float(os.getenv("OPENAI_TIMEOUT", "30")),
            base_url=os.getenv("OPENAI_BASE_URL") or None,
        )

        pipeline = PipelineSettings(
            sub_claim_confidence_threshold=float(os.getenv("SUB_CLAIM_CONFIDENCE_THRESHOLD", "0.85")),
            max_concurrent_claims=int(os.getenv("MAX_CONCURRENT_CLAIMS", "8")),
            call_timeout=_optional_float("CALL_TIMEOUT", 60.0),
            batch_timeout=_optional_float("BATCH_TIMEOUT", None),
            search_max_results=int(os.getenv("SEARCH_MAX_RESULTS", "5")),
            correction_policy=CorrectionPolicy(
                os.getenv("CORRECTION_POLICY", CorrectionPolicy.CONTRADICTED_ONLY.value)
            ),
        )

        search_provider = os.getenv("SEARCH_PROVIDER", "duckduckgo").lower()
        logger.info(
            f"🔧 Search provider: {search_provider}, "
            f"sub-claim threshold: {pipeline.sub_claim_confidence_threshold}, "
            f"max concurrent claims: {pipeline.max_concurrent_claims}"
        )

        wikipedia = WikipediaConfig(language=os.getenv("WIKIPEDIA_LANGUAGE", "en").strip().lower())

        return cls(
            search_provider=search_provider,
            openai=openai_config,
            wikipedia=wikipedia,
            pipeline=pipeline,
        )
