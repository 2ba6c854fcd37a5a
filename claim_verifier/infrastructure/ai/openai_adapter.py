"""OpenAI implementation of the AI provider interface."""

import json
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field, ValidationError

from ...domain.models.quality import QualityAssessment
from ...domain.models.reasoning import ReasoningOutcome, Verdict
from ...domain.models.trust import Source, SourceType, TrustAnalysis
from ...domain.ports.ai_provider import AIProvider, ExplanationOutcome
from ...domain.ports.search_provider import SearchResult
from . import prompts

logger = logging.getLogger(__name__)

SEARCH_TOOL_CALL_ID = "call_internet_search"
MAX_ANALYZED_SOURCES = 3


class OpenAIConfig(BaseModel):
    """Configuration for OpenAI adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Chat model to use")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=1500, description="Maximum tokens per response")
    timeout: float = Field(default=30.0, description="API timeout in seconds")
    base_url: Optional[str] = Field(default=None, description="Alternative API endpoint")


def _clamp(value: Any) -> Optional[float]:
    """Coerce a model-supplied score into [0, 1]."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return max(0.0, min(1.0, number))


def _as_verdict(value: Any) -> Verdict:
    try:
        return Verdict(str(value).strip().lower())
    except ValueError:
        logger.warning(f"⚠️ Unknown verdict from model: {value!r}, using neutral")
        return Verdict.NEUTRAL


class OpenAIAdapter(AIProvider):
    """OpenAI implementation of the AI provider interface."""

    def __init__(
        self,
        config: Optional[OpenAIConfig] = None,
        provider_name: str = "OpenAI",
    ):
        """Initialize the adapter."""
        self._config = config or OpenAIConfig(api_key="")
        self._name = provider_name
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the API client and verify access to the configured model."""
        try:
            if self._client is None:
                self._client = AsyncOpenAI(
                    api_key=self._config.api_key,
                    base_url=self._config.base_url,
                    timeout=self._config.timeout,
                )

            await self._client.models.retrieve(self._config.model)
            self._initialized = True
        except Exception as e:
            self._initialized = False
            if self._client:
                await self._client.close()
                self._client = None
            raise ConnectionError(f"Failed to initialize OpenAI provider: {e}")

    async def _complete_json(self, messages: List[Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        """Run a chat completion and parse its JSON content."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        response = await self._client.chat.completions.create(
            model=self._config.model,
            messages=messages,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
            response_format={"type": "json_object"},
            **kwargs,
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("Model returned an empty response")
        try:
            result = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Model returned invalid JSON: {e}")
        if not isinstance(result, dict):
            raise ValueError("Model response is not a JSON object")
        return result

    async def extract_claims(self, text: str) -> List[str]:
        """Extract verifiable claims from text."""
        result = await self._complete_json([
            {"role": "system", "content": prompts.EXTRACT_CLAIMS_PROMPT},
            {"role": "user", "content": f"Text: {text}"},
        ])
        claims = result.get("claims") or []
        return [str(claim).strip() for claim in claims if str(claim).strip()]

    async def evaluate_claim_quality(
        self,
        claim: str,
        original_text: Optional[str] = None,
    ) -> QualityAssessment:
        """Evaluate a claim along the six quality dimensions."""
        user_prompt = f'Claim: "{claim}"'
        if original_text:
            user_prompt += f'\nOriginal Text: "{original_text}"'

        result = await self._complete_json([
            {"role": "system", "content": prompts.EVALUATE_QUALITY_PROMPT},
            {"role": "user", "content": user_prompt},
        ])
        normalized = {
            key: value.strip().lower() if isinstance(value, str) and key != "overall_assessment" else value
            for key, value in result.items()
        }
        try:
            return QualityAssessment.model_validate(normalized)
        except ValidationError as e:
            raise ValueError(f"Invalid quality assessment from model: {e}")

    async def reason_about_claim(self, claim: str, max_iterations: int) -> ReasoningOutcome:
        """Reason about a claim and propose sub-claims when confidence is low."""
        result = await self._complete_json([
            {
                "role": "system",
                "content": prompts.REASON_ABOUT_CLAIM_PROMPT.format(max_iterations=max_iterations),
            },
            {"role": "user", "content": f"Claim: {claim}"},
        ])
        sub_claims = result.get("sub_claims") or []
        return ReasoningOutcome(
            verdict=_as_verdict(result.get("verdict")),
            reasoning=str(result.get("reasoning") or ""),
            confidence=_clamp(result.get("confidence")),
            nuance=result.get("nuance") or None,
            sub_claims=[str(sub_claim) for sub_claim in sub_claims if str(sub_claim).strip()],
        )

    async def generate_search_queries(self, claim: str) -> List[str]:
        """Generate search queries for a claim."""
        result = await self._complete_json([
            {"role": "system", "content": prompts.SEARCH_QUERIES_PROMPT},
            {"role": "user", "content": f"Claim: {claim}"},
        ])
        queries = result.get("queries") or []
        return [str(query).strip() for query in queries if str(query).strip()][:3]

    async def synthesize_trust(
        self,
        claim: str,
        query: str,
        search_results: List[SearchResult],
    ) -> TrustAnalysis:
        """Assess trustworthiness from search results handed over as a tool call."""
        messages = [
            {"role": "system", "content": prompts.TRUST_SYNTHESIS_PROMPT},
            {"role": "user", "content": f"Claim: {claim}"},
            {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": SEARCH_TOOL_CALL_ID,
                        "type": "function",
                        "function": {
                            "name": "internet_search",
                            "arguments": json.dumps({"query": query}),
                        },
                    }
                ],
            },
            {
                "role": "tool",
                "tool_call_id": SEARCH_TOOL_CALL_ID,
                "content": json.dumps({
                    "search_results": [
                        {"title": r.title, "link": r.link, "snippet": r.snippet}
                        for r in search_results
                    ]
                }),
            },
        ]
        result = await self._complete_json(
            messages,
            tools=[prompts.INTERNET_SEARCH_TOOL],
            tool_choice="none",
        )

        score = _clamp(result.get("trust_score"))
        if score is None:
            raise ValueError("Model did not return a trust score")

        return TrustAnalysis(
            score=score,
            reasoning=str(result.get("reasoning") or ""),
            search_query=query,
            sources=self._build_sources(result.get("analyzed_sources") or [], search_results),
        )

    def _build_sources(
        self,
        analyzed: List[Dict[str, Any]],
        search_results: List[SearchResult],
    ) -> List[Source]:
        """Convert the model's cited sources, falling back to the raw results."""
        by_link = {result.link: result for result in search_results}
        sources = []
        for item in analyzed[:MAX_ANALYZED_SOURCES]:
            if not isinstance(item, dict) or not item.get("link"):
                continue
            match = by_link.get(item["link"])
            sources.append(
                Source(
                    id=f"src-{len(sources) + 1}",
                    url=str(item["link"]),
                    title=str(item.get("title") or (match.title if match else item["link"])),
                    trust_score=_clamp(item.get("trust_score")),
                    summary=item.get("snippet") or (match.snippet if match else None),
                    source_type=match.result_type if match else SourceType.ARTICLE,
                )
            )

        if not sources:
            sources = [
                Source(
                    id=f"src-{position + 1}",
                    url=result.link,
                    title=result.title,
                    summary=result.snippet,
                    source_type=result.result_type,
                )
                for position, result in enumerate(search_results[:MAX_ANALYZED_SOURCES])
            ]
        return sources

    async def generate_explanation(
        self,
        claim: str,
        evidence: str,
        verdict: Verdict,
    ) -> ExplanationOutcome:
        """Generate a human-readable explanation for a verdict."""
        result = await self._complete_json([
            {"role": "system", "content": prompts.EXPLANATION_PROMPT},
            {
                "role": "user",
                "content": f"Claim: {claim}\nEvidence:\n{evidence}\nVerdict: {verdict.value}",
            },
        ])
        explanation = str(result.get("explanation") or "").strip()
        if not explanation:
            raise ValueError("Model returned an empty explanation")
        return ExplanationOutcome(
            explanation=explanation,
            corrected_information=result.get("corrected_information") or None,
        )

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "claim_extraction": True,
            "quality_evaluation": True,
            "claim_reasoning": True,
            "query_generation": True,
            "trust_synthesis": True,
            "explanation_generation": True,
        }
