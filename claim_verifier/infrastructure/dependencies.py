"""Dependency injection configuration for hexagonal architecture."""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.services.trust_analysis_service import TrustAnalysisService
from ..domain.services.verification_service import ClaimVerificationService
from .ai.factory import AIProviderFactory
from .cache.null_cache import NullVerificationCache
from .config import VerifierSettings
from .search.factory import SearchProviderFactory

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, settings: Optional[VerifierSettings] = None):
        """Initialize service container.

        Args:
            settings: Configuration; read from the environment when omitted
        """
        self.settings = settings or VerifierSettings.from_env()
        self.ai_factory = AIProviderFactory()
        self.search_factory = SearchProviderFactory()
        self._verification_service: Optional[ClaimVerificationService] = None
        self._lock = asyncio.Lock()
        logger.info("✅ Service container setup completed")

    def _search_provider_config(self) -> Dict[str, Any]:
        configs = {
            "duckduckgo": self.settings.duckduckgo,
            "wikipedia": self.settings.wikipedia,
        }
        config = configs.get(self.settings.search_provider)
        return {"config": config} if config is not None else {}

    async def _setup_verification_service(self) -> ClaimVerificationService:
        """Create providers and wire the verification service."""
        logger.info("🤖 Setting up AI provider...")
        ai_name = self.settings.ai_provider
        ai_provider = self.ai_factory.get_provider(ai_name)
        if ai_provider is None:
            logger.info("🔨 Creating new AI provider...")
            ai_provider = await self.ai_factory.create_provider(ai_name, config=self.settings.openai)
        logger.info("✅ AI provider ready")

        logger.info("📚 Setting up search provider...")
        search_name = self.settings.search_provider
        search_provider = self.search_factory.get_provider(search_name)
        if search_provider is None:
            logger.info("🔨 Creating new search provider...")
            search_provider = await self.search_factory.create_provider(
                search_name, **self._search_provider_config()
            )
        logger.info("✅ Search provider ready")

        pipeline = self.settings.pipeline
        trust_analyzer = TrustAnalysisService(
            ai_provider,
            search_provider,
            max_results=pipeline.search_max_results,
            call_timeout=pipeline.call_timeout,
        )
        return ClaimVerificationService(
            ai_provider,
            trust_analyzer,
            cache=NullVerificationCache(),
            settings=pipeline,
        )

    async def get_verification_service(self) -> ClaimVerificationService:
        """Get the verification service, creating it on first use."""
        async with self._lock:
            if self._verification_service is None:
                logger.info("🔧 Creating ClaimVerificationService with providers...")
                self._verification_service = await self._setup_verification_service()
                logger.info("✅ ClaimVerificationService created with providers")
        return self._verification_service

    @property
    def provider_status(self) -> Dict[str, Dict[str, bool]]:
        """Registered providers and whether each is active."""
        return {
            "ai_providers": self.ai_factory.available_providers,
            "search_providers": self.search_factory.available_providers,
        }

    async def shutdown(self) -> None:
        """Shut down all providers."""
        logger.info("🔄 Shutting down providers...")
        await self.ai_factory.shutdown()
        await self.search_factory.shutdown_all()
        self._verification_service = None


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


async def get_verification_service() -> ClaimVerificationService:
    """FastAPI dependency for the claim verification service."""
    return await get_service_container().get_verification_service()
