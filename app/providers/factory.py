"""
Provider factory for instantiating model providers.
"""

from app.providers.base import AnalysisProvider
from app.providers.gemini import GeminiProvider
from app.providers.mock import MockAnalysisProvider


class ProviderFactory:
    """
    Factory for creating provider instances.

    Usage:
        provider = ProviderFactory.get_provider("gemini", api_key="...")
        provider = ProviderFactory.get_provider("mock")
    """

    _providers = {
        "gemini": GeminiProvider,
        "mock": MockAnalysisProvider,
    }

    @classmethod
    def get_provider(cls, source: str = "gemini", **kwargs) -> AnalysisProvider:
        """
        Get a model provider by source name.

        Args:
            source: Provider identifier ("gemini", "mock", etc.)
            **kwargs: Provider-specific config (api_key, model, latency_ms, etc.)

        Returns:
            AnalysisProvider instance

        Raises:
            ValueError: If source is unknown
        """
        if source not in cls._providers:
            raise ValueError(
                f"Unknown model provider: {source}. "
                f"Available: {list(cls._providers.keys())}"
            )

        provider_class = cls._providers[source]
        return provider_class(**kwargs)

    @classmethod
    def register_provider(cls, name: str, provider_class: type):
        """Register a new provider type."""
        cls._providers[name] = provider_class

    @classmethod
    def available_providers(cls) -> list:
        """List available provider names."""
        return list(cls._providers.keys())
