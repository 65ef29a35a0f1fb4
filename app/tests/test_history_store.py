# app/tests/test_history_store.py
"""
Tests for the bounded analysis history.

Covers:
- Newest-first ordering and the 20 item bound
- id / timestamp assignment
- Degradation on corrupt data and full storage
"""
from __future__ import annotations

import json

import pytest

from app.history_store import MAX_HISTORY_ITEMS, HistoryStore
from app.models import AnalysisInput, AnalysisResult, InputMode, RiskClause, Verdict
from storage import HISTORY_KEY, MemoryStore


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def history(store):
    return HistoryStore(store)


def make_result(**overrides) -> AnalysisResult:
    """Helper to create a result without id/timestamp."""
    data = {
        "summary": "Standard terms with one auto-renewal clause.",
        "overall_risk_score": 35,
        "verdict": Verdict.CAUTION,
        "clauses": [
            RiskClause(
                original_text="This agreement renews automatically.",
                simplified_explanation="You keep paying unless you cancel.",
                severity="MEDIUM",
                category="Money",
                recommendation="Ask for a renewal reminder.",
            )
        ],
        "input": AnalysisInput(mode=InputMode.TEXT, value="contract body"),
    }
    data.update(overrides)
    return AnalysisResult(**data)


# =============================================================================
# Tests
# =============================================================================


class TestHistoryStore:
    """Tests for HistoryStore."""

    def test_empty_when_nothing_stored(self, history):
        assert history.get_history() == []
        assert history.count() == 0

    def test_save_assigns_id_and_timestamp(self, history):
        saved = history.save_to_history(make_result())
        assert len(saved) == 1
        assert saved[0].id
        assert saved[0].timestamp > 0

    def test_save_keeps_existing_id_and_timestamp(self, history):
        saved = history.save_to_history(make_result(id="fixed", timestamp=1234))
        assert saved[0].id == "fixed"
        assert saved[0].timestamp == 1234

    def test_round_trip_equal_except_id_timestamp(self, history):
        result = make_result()
        history.save_to_history(result)

        stored = history.get_history()[0]
        assert stored.model_copy(update={"id": None, "timestamp": None}) == result

    def test_newest_first(self, history):
        history.save_to_history(make_result(summary="first"))
        history.save_to_history(make_result(summary="second"))

        summaries = [item.summary for item in history.get_history()]
        assert summaries == ["second", "first"]

    def test_bounded_to_most_recent_twenty(self, history):
        for i in range(MAX_HISTORY_ITEMS + 7):
            history.save_to_history(make_result(summary=f"Result {i}"))

        items = history.get_history()
        assert len(items) == MAX_HISTORY_ITEMS
        expected = [f"Result {i}" for i in range(MAX_HISTORY_ITEMS + 6, 6, -1)]
        assert [item.summary for item in items] == expected

    def test_persisted_list_never_exceeds_bound(self, history, store):
        for i in range(MAX_HISTORY_ITEMS + 3):
            history.save_to_history(make_result(summary=f"Result {i}"))
        assert len(json.loads(store.get(HISTORY_KEY))) == MAX_HISTORY_ITEMS

    def test_custom_bound(self, store):
        history = HistoryStore(store, max_items=3)
        for i in range(5):
            history.save_to_history(make_result(summary=f"Result {i}"))
        assert [item.summary for item in history.get_history()] == [
            "Result 4",
            "Result 3",
            "Result 2",
        ]

    def test_stored_with_camel_case_keys(self, history, store):
        history.save_to_history(make_result())
        raw = json.loads(store.get(HISTORY_KEY))[0]
        assert raw["overallRiskScore"] == 35
        assert raw["clauses"][0]["originalText"].startswith("This agreement")

    def test_get_by_id(self, history):
        saved = history.save_to_history(make_result(id="abc"))
        assert history.get("abc") == saved[0]
        assert history.get("missing") is None

    def test_clear_history(self, history):
        history.save_to_history(make_result())
        history.clear_history()
        assert history.get_history() == []


class TestHistoryDegradation:
    """Storage problems degrade to empty state."""

    def test_corrupt_json_reads_empty(self, history, store):
        store.set(HISTORY_KEY, "[{oops")
        assert history.get_history() == []

    def test_non_list_reads_empty(self, history, store):
        store.set(HISTORY_KEY, json.dumps({"not": "a list"}))
        assert history.get_history() == []

    def test_invalid_entries_skipped(self, history, store):
        good = make_result(id="good", timestamp=1).to_dict()
        store.set(HISTORY_KEY, json.dumps([{"summary": "no score"}, good]))

        items = history.get_history()
        assert [item.id for item in items] == ["good"]

    def test_quota_exceeded_returns_empty_list(self):
        history = HistoryStore(MemoryStore(quota_bytes=50))
        assert history.save_to_history(make_result()) == []
        assert history.get_history() == []
