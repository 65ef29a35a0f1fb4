"""
Mock provider implementation for development and testing.
Returns a canned analysis with simulated latency.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

from app.providers.base import AnalysisProvider, ModelReply

SAMPLE_ANALYSIS: Dict[str, Any] = {
    "summary": (
        "This agreement renews every year unless you cancel in time, "
        "and the company can share your data with partners."
    ),
    "overallRiskScore": 62,
    "verdict": "High Risk",
    "specificRisks": {
        "human": "Company may change rules without asking you.",
        "financial": "Automatic yearly charges are hard to stop.",
        "cyber": "Your data can be shared with partners.",
        "mental": "No significant risk",
    },
    "clauses": [
        {
            "originalText": (
                "This Agreement shall automatically renew for successive one-year "
                "terms unless terminated with ninety (90) days written notice."
            ),
            "simplifiedExplanation": (
                "You will be charged again each year unless you cancel three months early."
            ),
            "severity": "HIGH",
            "category": "Money",
            "recommendation": "Ask to change the notice period to 30 days.",
        },
        {
            "originalText": (
                "We may disclose personal information to our affiliates and "
                "marketing partners."
            ),
            "simplifiedExplanation": "Other companies can receive your personal details.",
            "severity": "MEDIUM",
            "category": "Privacy",
            "recommendation": "Ask for an opt-out from data sharing.",
        },
    ],
}


class MockAnalysisProvider(AnalysisProvider):
    """
    Mock model provider.

    Returns reply_text (SAMPLE_ANALYSIS by default) and, for search
    requests, the given grounding chunks. Records every request it sees.
    """

    def __init__(
        self,
        reply_text: Optional[str] = None,
        grounding_chunks: Optional[List[Dict[str, Any]]] = None,
        latency_ms: int = 0,
        error: Optional[BaseException] = None,
    ):
        self.reply_text = json.dumps(SAMPLE_ANALYSIS) if reply_text is None else reply_text
        self.grounding_chunks = grounding_chunks or []
        self.latency_ms = latency_ms
        self.error = error
        self.requests = []

    @property
    def source_name(self) -> str:
        return "mock"

    async def generate(self, request) -> ModelReply:
        """Return the canned reply."""
        self.requests.append(request)

        # Simulate network latency
        if self.latency_ms:
            await asyncio.sleep(self.latency_ms / 1000)

        if self.error is not None:
            raise self.error

        chunks = self.grounding_chunks if request.use_search else []
        return ModelReply(text=self.reply_text, grounding_chunks=list(chunks))
