"""
Response schema declared to the model.

Uses the OpenAPI subset accepted by Gemini's structured output
(upper-case type names). The same contract is enforced again on the
reply by app.models.AnalysisResult.
"""

from app.models import RiskSeverity

SEVERITY_VALUES = [s.value for s in RiskSeverity]

SPECIFIC_RISK_FIELDS = ("human", "financial", "cyber", "mental")
CLAUSE_FIELDS = (
    "originalText",
    "simplifiedExplanation",
    "severity",
    "category",
    "recommendation",
)
RESULT_FIELDS = ("summary", "overallRiskScore", "verdict", "clauses", "specificRisks")

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING", "description": "A concise, simple executive summary."},
        "overallRiskScore": {
            "type": "INTEGER",
            "description": "A score from 0 (safe) to 100 (dangerous).",
        },
        "verdict": {"type": "STRING", "description": "One of the allowed verdict phrases."},
        "specificRisks": {
            "type": "OBJECT",
            "properties": {
                "human": {"type": "STRING", "description": "Simple summary of rights risks."},
                "financial": {"type": "STRING", "description": "Simple summary of money risks."},
                "cyber": {"type": "STRING", "description": "Simple summary of data risks."},
                "mental": {"type": "STRING", "description": "Simple summary of stress risks."},
            },
            "required": list(SPECIFIC_RISK_FIELDS),
        },
        "clauses": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "originalText": {
                        "type": "STRING",
                        "description": "The exact text of the clause.",
                    },
                    "simplifiedExplanation": {
                        "type": "STRING",
                        "description": "Simple explanation of the risk.",
                    },
                    "severity": {"type": "STRING", "enum": SEVERITY_VALUES},
                    "category": {
                        "type": "STRING",
                        "description": "e.g., Money, Privacy, Termination",
                    },
                    "recommendation": {"type": "STRING", "description": "Simple advice."},
                },
                "required": list(CLAUSE_FIELDS),
            },
        },
    },
    "required": list(RESULT_FIELDS),
}
