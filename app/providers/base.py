"""
Provider interface for the generative model call.
Abstract base class defines the contract for all model providers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from app.audit.builder import AnalysisRequest


@dataclass
class ModelReply:
    """
    Normalized model reply.

    Attributes:
        text: JSON body returned by the model (None if empty)
        grounding_chunks: Citation chunks from a search-grounded call,
            each shaped like {"web": {"uri": ..., "title": ...}}
    """
    text: Optional[str]
    grounding_chunks: List[Dict[str, Any]] = field(default_factory=list)


class AnalysisProvider(ABC):
    """
    Abstract base class for model providers.

    One call per analysis. Providers propagate transport errors
    unmodified; retry decisions belong to the caller's CallPolicy.
    """

    @abstractmethod
    async def generate(self, request: AnalysisRequest) -> ModelReply:
        """
        Send one analysis request to the model.

        Args:
            request: Built analysis request

        Returns:
            ModelReply with the raw JSON body and grounding chunks
        """
        pass

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Provider identifier (e.g., 'mock', 'gemini')."""
        pass

    def ensure_configured(self) -> None:
        """Raise ConfigurationError if the provider cannot make calls."""
        return None

    def is_transient(self, error: BaseException) -> bool:
        """Whether an error from generate() is worth retrying."""
        return False
