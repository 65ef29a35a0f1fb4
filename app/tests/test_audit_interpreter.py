# app/tests/test_audit_interpreter.py
"""Tests for turning model replies into analysis results."""
import copy
import json

import pytest

from app.audit.builder import build_request
from app.audit.interpreter import (
    EmptyResponseError,
    ParseError,
    extract_sources,
    interpret_reply,
)
from app.models import InputMode, RiskSeverity, Verdict
from app.providers.base import ModelReply
from app.providers.mock import SAMPLE_ANALYSIS


def _reply(body=None, chunks=None) -> ModelReply:
    payload = SAMPLE_ANALYSIS if body is None else body
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return ModelReply(text=text, grounding_chunks=chunks or [])


def _sample(**overrides) -> dict:
    body = copy.deepcopy(SAMPLE_ANALYSIS)
    body.update(overrides)
    return body


class TestEmptyReplies:

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_body_raises(self, text):
        request = build_request("contract", "text")
        with pytest.raises(EmptyResponseError, match="No response from AI."):
            interpret_reply(ModelReply(text=text), request)


class TestValidReplies:

    def test_well_formed_reply(self):
        request = build_request("Auto-renewal clause", "text")
        result = interpret_reply(_reply(), request)

        assert result.overall_risk_score == 62
        assert result.verdict == Verdict.HIGH_RISK
        assert len(result.clauses) == 2
        assert result.clauses[0].severity == RiskSeverity.HIGH
        assert result.specific_risks.mental == "No significant risk"

    def test_input_attached(self):
        request = build_request("Auto-renewal clause", "text")
        result = interpret_reply(_reply(), request)

        assert result.input.mode == InputMode.TEXT
        assert result.input.value == "Auto-renewal clause"

    def test_id_and_timestamp_left_for_caller(self):
        result = interpret_reply(_reply(), build_request("x", "text"))
        assert result.id is None
        assert result.timestamp is None

    def test_zero_clauses_allowed(self):
        body = _sample(clauses=[], overallRiskScore=3, verdict="Safe")
        result = interpret_reply(_reply(body), build_request("x", "text"))

        assert result.clauses == []
        assert result.verdict == Verdict.SAFE

    def test_specific_risks_optional(self):
        body = _sample()
        del body["specificRisks"]
        result = interpret_reply(_reply(body), build_request("x", "text"))

        assert result.specific_risks is None

    def test_code_fenced_json_accepted(self):
        text = "```json\n" + json.dumps(SAMPLE_ANALYSIS) + "\n```"
        result = interpret_reply(_reply(text), build_request("x", "text"))
        assert result.overall_risk_score == 62

    def test_file_input_value_is_filename(self):
        request = build_request(
            "JVBERi0xLjQ=", "file", mime_type="application/pdf", file_name="lease.pdf"
        )
        result = interpret_reply(_reply(), request)

        assert result.input.mode == InputMode.FILE
        assert result.input.value == "lease.pdf"
        assert result.input.mime_type == "application/pdf"
        assert "JVBERi0xLjQ=" not in json.dumps(result.to_dict())

    def test_serializes_with_camel_case_keys(self):
        data = interpret_reply(_reply(), build_request("x", "text")).to_dict()

        assert data["overallRiskScore"] == 62
        assert data["specificRisks"]["human"]
        assert data["clauses"][0]["originalText"]
        assert data["input"] == {"mode": "text", "value": "x"}
        assert "sources" not in data


class TestRejectedReplies:

    def test_malformed_json(self):
        with pytest.raises(ParseError):
            interpret_reply(_reply("{not json"), build_request("x", "text"))

    def test_missing_required_field(self):
        body = _sample()
        del body["summary"]
        with pytest.raises(ParseError, match="summary"):
            interpret_reply(_reply(body), build_request("x", "text"))

    def test_unknown_verdict(self):
        with pytest.raises(ParseError):
            interpret_reply(_reply(_sample(verdict="Moderate")), build_request("x", "text"))

    def test_unknown_severity(self):
        body = _sample()
        body["clauses"][0]["severity"] = "SEVERE"
        with pytest.raises(ParseError):
            interpret_reply(_reply(body), build_request("x", "text"))

    @pytest.mark.parametrize("score", [-1, 101, "62", 62.5])
    def test_out_of_range_or_wrong_type_score(self, score):
        with pytest.raises(ParseError):
            interpret_reply(
                _reply(_sample(overallRiskScore=score)), build_request("x", "text")
            )

    def test_boundary_scores_accepted(self):
        for score in (0, 100):
            result = interpret_reply(
                _reply(_sample(overallRiskScore=score)), build_request("x", "text")
            )
            assert result.overall_risk_score == score


class TestSources:

    def test_url_mode_collects_deduplicated_sources(self):
        chunks = [
            {"web": {"uri": "https://a.com", "title": "A"}},
            {"web": {"uri": "https://b.com"}},
            {"web": {"uri": "https://a.com"}},
        ]
        request = build_request("example.com", "url")
        result = interpret_reply(_reply(chunks=chunks), request)

        assert result.sources == ["https://a.com", "https://b.com"]
        assert result.input.mode == InputMode.URL
        assert result.input.value == "example.com"

    def test_url_mode_without_chunks_has_no_sources(self):
        result = interpret_reply(_reply(), build_request("example.com", "url"))
        assert result.sources is None

    def test_non_search_call_ignores_chunks(self):
        chunks = [{"web": {"uri": "https://a.com"}}]
        result = interpret_reply(_reply(chunks=chunks), build_request("x", "text"))
        assert result.sources is None

    def test_model_supplied_sources_replaced(self):
        body = _sample(sources=["https://invented.example"])
        result = interpret_reply(_reply(body), build_request("x", "text"))
        assert result.sources is None

    def test_extract_skips_chunks_without_uri(self):
        chunks = [{"web": {"title": "no uri"}}, {"retrievedContext": {}}, {"web": {"uri": "https://c.com"}}]
        assert extract_sources(chunks) == ["https://c.com"]

    def test_extract_empty(self):
        assert extract_sources([]) is None
        assert extract_sources(None) is None
