"""
Model providers for contract analysis.

This module abstracts the generative model behind a common interface.
Providers can be swapped without changing consumer code.

Example:
    from app.providers import ProviderFactory

    # Canned replies for development
    provider = ProviderFactory.get_provider("mock")
    reply = await provider.generate(request)

    # Live model
    provider = ProviderFactory.get_provider("gemini", api_key="xxx")
"""

from app.providers.base import AnalysisProvider, ModelReply
from app.providers.gemini import GeminiProvider
from app.providers.mock import MockAnalysisProvider, SAMPLE_ANALYSIS
from app.providers.factory import ProviderFactory

__all__ = [
    # Base classes
    "AnalysisProvider",
    "ModelReply",
    # Implementations
    "GeminiProvider",
    "MockAnalysisProvider",
    "SAMPLE_ANALYSIS",
    # Factory
    "ProviderFactory",
]
