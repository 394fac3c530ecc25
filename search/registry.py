"""
Provider registry: creates providers keyed on (provider name, mode).
"""

from typing import Dict, List, Tuple, Type

from models.enums import ProviderMode

from .client import SearchProvider
from .serper import SerperMapsProvider, SerperSearchProvider

ProviderKey = Tuple[str, str]


class ProviderRegistry:
    """Registry for all available provider classes."""

    def __init__(self):
        self._providers: Dict[ProviderKey, Type[SearchProvider]] = {}

    def register(self, name: str, mode: str, provider_cls: Type[SearchProvider]):
        """
        Register a provider class.

        Args:
            name: Provider name, e.g. "serper"
            mode: "search" or "maps"
            provider_cls: SearchProvider subclass
        """
        self._providers[(name.lower(), ProviderMode(mode).value)] = provider_cls

    def create(self, name: str, mode: str, api_key: str, **kwargs) -> SearchProvider:
        """
        Instantiate the provider registered for (name, mode).

        Raises:
            ValueError: if nothing is registered under that key
        """
        key = (name.lower(), str(getattr(mode, "value", mode)).lower())
        provider_cls = self._providers.get(key)
        if provider_cls is None:
            raise ValueError(
                f"Provider '{key[0]}-{key[1]}' not found. "
                f"Available providers: {', '.join(self.available())}"
            )
        return provider_cls(api_key=api_key, **kwargs)

    def available(self) -> List[str]:
        """Registered keys as 'name-mode' strings."""
        return [f"{name}-{mode}" for name, mode in self._providers]

    def provider_options(self) -> List[Dict[str, str]]:
        """Distinct provider names with a short description."""
        names = sorted({name for name, _ in self._providers})
        return [
            {"value": name, "label": PROVIDER_LABELS.get(name, name)}
            for name in names
        ]

    def mode_options(self, name: str) -> List[str]:
        """Modes registered for a provider name."""
        return [mode for provider, mode in self._providers if provider == name.lower()]


PROVIDER_LABELS: Dict[str, str] = {
    "serper": "Serper.dev - Google Search and Maps API",
}


def _default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register("serper", "search", SerperSearchProvider)
    registry.register("serper", "maps", SerperMapsProvider)
    return registry


# Global registry instance
_registry = _default_registry()


def get_registry() -> ProviderRegistry:
    """Get the global provider registry."""
    return _registry


def create_provider(name: str, mode: str, api_key: str, **kwargs) -> SearchProvider:
    """Create a provider from the global registry."""
    return _registry.create(name, mode, api_key, **kwargs)
