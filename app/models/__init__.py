"""
Domain models for contract audits.

All models are Pydantic models serialized with camelCase keys, which is
the shape stored in history and returned by the API. Validation rejects
rather than coerces: a reply that does not match is an error, not a
partially filled result.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class InputMode(str, Enum):
    """Kind of input submitted for analysis."""
    TEXT = "text"
    URL = "url"
    FILE = "file"


class RiskSeverity(str, Enum):
    """Severity of a flagged clause."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Verdict(str, Enum):
    """Closed set of human-readable verdicts."""
    SAFE = "Safe"
    LOW_RISK = "Low Risk"
    CAUTION = "Caution"
    HIGH_RISK = "High Risk"
    CRITICAL = "Critical"


# =============================================================================
# Models
# =============================================================================


class CamelModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_dict(self) -> dict:
        """JSON-compatible dict with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RiskClause(CamelModel):
    """One flagged passage of the document."""
    original_text: str
    simplified_explanation: str
    severity: RiskSeverity
    category: str
    recommendation: str


class SpecificRisks(CamelModel):
    """Short risk notes per impact area."""
    human: str
    financial: str
    cyber: str
    mental: str


class AnalysisInput(CamelModel):
    """
    What was analyzed.

    For file uploads value is the filename; the payload is never stored.
    """
    mode: InputMode
    value: str
    mime_type: Optional[str] = None


class AnalysisResult(CamelModel):
    """One completed audit."""
    id: Optional[str] = None
    timestamp: Optional[int] = Field(default=None, description="Epoch milliseconds")
    summary: str
    overall_risk_score: int = Field(..., ge=0, le=100, strict=True)
    verdict: Verdict
    specific_risks: Optional[SpecificRisks] = None
    clauses: List[RiskClause]
    sources: Optional[List[str]] = None
    input: Optional[AnalysisInput] = None


__all__ = [
    "InputMode",
    "RiskSeverity",
    "Verdict",
    "CamelModel",
    "RiskClause",
    "SpecificRisks",
    "AnalysisInput",
    "AnalysisResult",
]
