# app/tests/test_audit_builder.py
"""Tests for the analysis request builder and response schema."""
import pytest

from app.audit.builder import DEFAULT_FILE_NAME, build_request, strip_data_uri
from app.audit.prompts import COMMON_INSTRUCTION, NO_RISK_PHRASE
from app.audit.schema import CLAUSE_FIELDS, RESPONSE_SCHEMA, SEVERITY_VALUES
from app.models import InputMode, Verdict


class TestCommonInstruction:
    """The instruction block shared by every mode."""

    def test_lists_every_verdict(self):
        for verdict in Verdict:
            assert f'"{verdict.value}"' in COMMON_INSTRUCTION

    def test_mentions_score_range_and_categories(self):
        assert "0-100" in COMMON_INSTRUCTION
        for category in ("Human Centric", "Financial", "Cyber", "Mental"):
            assert category in COMMON_INSTRUCTION

    def test_fallback_phrase_and_word_cap(self):
        assert f'"{NO_RISK_PHRASE}"' in COMMON_INSTRUCTION
        assert "under 15 words" in COMMON_INSTRUCTION


class TestTextMode:

    def test_single_text_part_with_contract(self):
        request = build_request("The tenant pays all repairs.", "text")

        assert len(request.parts) == 1
        assert COMMON_INSTRUCTION in request.parts[0].text
        assert '"The tenant pays all repairs."' in request.parts[0].text
        assert request.use_search is False

    def test_input_records_content_verbatim(self):
        request = build_request("  Clause 1. {braces} kept  ", InputMode.TEXT)
        assert request.input.mode == InputMode.TEXT
        assert request.input.value == "  Clause 1. {braces} kept  "
        assert "{braces}" in request.parts[0].text

    def test_empty_content_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            build_request("   ", "text")

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            build_request("text", "fax")


class TestUrlMode:

    def test_enables_search(self):
        request = build_request("example.com", "url")
        assert request.use_search is True

    def test_prompt_asks_for_terms_of_service(self):
        text = build_request("Acme Corp", "url").parts[0].text
        assert 'URL or Company Name: "Acme Corp"' in text
        assert "Terms of Service" in text
        assert "Privacy Policy" in text

    def test_input_records_target(self):
        request = build_request(" https://example.com/tos ", "url")
        assert request.input.value == "https://example.com/tos"
        assert request.input.mime_type is None


class TestFileMode:

    def test_strips_data_uri_prefix(self):
        request = build_request(
            "data:application/pdf;base64,JVBERi0xLjQ=",
            "file",
            mime_type="application/pdf",
            file_name="lease.pdf",
        )

        assert len(request.parts) == 2
        assert request.parts[0].text == COMMON_INSTRUCTION
        inline = request.parts[1]
        assert inline.is_inline_data
        assert inline.data == "JVBERi0xLjQ="
        assert inline.mime_type == "application/pdf"

    def test_invalid_base64_rejected(self):
        with pytest.raises(ValueError, match="not valid base64"):
            build_request("not base64!!", "file", mime_type="application/pdf")

    def test_bare_base64_passes_through(self):
        assert strip_data_uri("JVBERi0xLjQ=") == "JVBERi0xLjQ="

    def test_input_holds_filename_not_payload(self):
        request = build_request(
            "JVBERi0xLjQ=", "file", mime_type="application/pdf", file_name="lease.pdf"
        )
        assert request.input.value == "lease.pdf"
        assert request.input.mime_type == "application/pdf"
        assert request.use_search is False

    def test_default_filename(self):
        request = build_request("JVBERi0xLjQ=", "file", mime_type="application/pdf")
        assert request.input.value == DEFAULT_FILE_NAME

    def test_without_mime_type_sent_as_text(self):
        request = build_request("plain words", "file", file_name="notes")
        assert len(request.parts) == 1
        assert '"plain words"' in request.parts[0].text
        assert request.input.value == "notes"


class TestResponseSchema:

    def test_declared_on_request(self):
        assert build_request("x", "text").response_schema is RESPONSE_SCHEMA

    def test_top_level_required_fields(self):
        assert set(RESPONSE_SCHEMA["required"]) == {
            "summary",
            "overallRiskScore",
            "verdict",
            "specificRisks",
            "clauses",
        }
        assert RESPONSE_SCHEMA["properties"]["overallRiskScore"]["type"] == "INTEGER"

    def test_specific_risks_require_four_categories(self):
        specific = RESPONSE_SCHEMA["properties"]["specificRisks"]
        assert specific["required"] == ["human", "financial", "cyber", "mental"]

    def test_clause_schema(self):
        item = RESPONSE_SCHEMA["properties"]["clauses"]["items"]
        assert item["required"] == list(CLAUSE_FIELDS)
        assert item["properties"]["severity"]["enum"] == ["LOW", "MEDIUM", "HIGH", "CRITICAL"]
        assert SEVERITY_VALUES == ["LOW", "MEDIUM", "HIGH", "CRITICAL"]
