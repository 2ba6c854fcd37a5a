"""Factory for creating and managing AI providers."""

import logging
from typing import Any, Dict, Optional, Type

from ...domain.ports.ai_provider import AIProvider
from .openai_adapter import OpenAIAdapter, OpenAIConfig

logger = logging.getLogger(__name__)


class AIProviderFactory:
    """Creates AI providers by name and keeps one live instance per name."""

    def __init__(self):
        self._registry: Dict[str, Type[AIProvider]] = {"openai": OpenAIAdapter}
        self._live: Dict[str, AIProvider] = {}

    def register_provider(self, name: str, provider_class: Type[AIProvider]) -> None:
        """Register an AI provider class under a name."""
        self._registry[name] = provider_class

    async def create_provider(
        self,
        name: str,
        config: Optional[OpenAIConfig] = None,
        **kwargs: Any,
    ) -> AIProvider:
        """Return the live provider for a name, creating it on first use.

        Args:
            name: Registered provider name
            config: Adapter configuration, passed as ``config``
            **kwargs: Extra constructor arguments

        Returns:
            Initialized provider

        Raises:
            ValueError: If no provider is registered under the name
        """
        live = self._live.get(name)
        if live is not None:
            return live

        provider_class = self._registry.get(name)
        if provider_class is None:
            raise ValueError(f"Provider '{name}' not found, registered: {sorted(self._registry)}")

        if config is not None:
            kwargs["config"] = config
        provider = provider_class(**kwargs)

        logger.info(f"🤖 Initializing AI provider '{name}'")
        await provider.initialize()
        self._live[name] = provider
        return provider

    def get_provider(self, name: str) -> Optional[AIProvider]:
        return self._live.get(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Registered provider names mapped to whether one is live."""
        return {name: name in self._live for name in self._registry}

    async def shutdown(self) -> None:
        """Shut down every live provider."""
        while self._live:
            name, provider = self._live.popitem()
            try:
                await provider.shutdown()
            except Exception as e:
                logger.warning(f"⚠️ Error shutting down AI provider '{name}': {e}")
