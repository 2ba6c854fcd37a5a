"""Factory for creating and managing search providers."""

import logging
from typing import Any, Dict, Optional, Type

from ...domain.ports.search_provider import SearchProvider
from .duckduckgo_adapter import DuckDuckGoSearchAdapter
from .wikipedia_adapter import WikipediaSearchAdapter

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PROVIDERS: Dict[str, Type[SearchProvider]] = {
    "duckduckgo": DuckDuckGoSearchAdapter,
    "wikipedia": WikipediaSearchAdapter,
}


class SearchProviderFactory:
    """Registry of evidence search backends.

    DuckDuckGo and Wikipedia are registered by default. A provider that
    fails to initialize is never kept, so the next request retries it.
    """

    def __init__(self):
        self._registry: Dict[str, Type[SearchProvider]] = dict(DEFAULT_SEARCH_PROVIDERS)
        self._active: Dict[str, SearchProvider] = {}

    def register_provider(self, name: str, provider_class: Type[SearchProvider]) -> None:
        """Register a search provider class.

        Raises:
            ValueError: If the name is already taken
        """
        if name in self._registry:
            raise ValueError(f"Provider {name} already registered")
        self._registry[name] = provider_class

    async def create_provider(self, name: str, **config: Any) -> SearchProvider:
        """Create, initialize and activate a search provider.

        Args:
            name: Registered provider name
            **config: Constructor arguments, usually ``config=<adapter config>``

        Returns:
            Initialized provider

        Raises:
            ValueError: If the provider is not registered
            RuntimeError: If initialization fails
        """
        if name not in self._registry:
            raise ValueError(f"Provider {name} not registered")

        provider = self._registry[name](**config)
        logger.info(f"📚 Initializing search provider '{name}'")
        try:
            await provider.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize provider {name}: {e}") from e

        self._active[name] = provider
        return provider

    def get_provider(self, name: str) -> Optional[SearchProvider]:
        return self._active.get(name)

    async def shutdown_provider(self, name: str) -> None:
        """Shut down one active provider, if present."""
        provider = self._active.pop(name, None)
        if provider is not None:
            await provider.shutdown()

    async def shutdown_all(self) -> None:
        for name in list(self._active):
            await self.shutdown_provider(name)

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Registered provider names mapped to whether one is active."""
        return {name: name in self._active for name in self._registry}
