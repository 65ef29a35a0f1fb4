# app/history_store.py
"""
Bounded history of completed analyses.

Items are kept newest first in a single JSON list under HISTORY_KEY.
The store is a best-effort cache: unreadable data reads as an empty
history and failed writes are logged, never raised.
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional
from uuid import uuid4

from pydantic import ValidationError as SchemaError

from app.models import AnalysisResult
from storage import HISTORY_KEY, KeyValueStore, StorageError, read_json, write_json

_logger = logging.getLogger(__name__)

MAX_HISTORY_ITEMS = 20


class HistoryStore:
    """
    History of analysis results backed by a key-value store.

    Entries are never edited in place; saving prepends and evicts the
    oldest entries beyond max_items.
    """

    def __init__(self, store: KeyValueStore, max_items: int = MAX_HISTORY_ITEMS):
        """
        Initialize history store.

        Args:
            store: Backing key-value store
            max_items: Maximum items to keep (oldest evicted when exceeded)
        """
        self._store = store
        self._max_items = max_items

    @property
    def max_items(self) -> int:
        return self._max_items

    def get_history(self) -> List[AnalysisResult]:
        """
        Get history items in reverse chronological order.

        Returns an empty list if nothing is stored or the value is corrupt.
        Entries that no longer validate are skipped.
        """
        raw = read_json(self._store, HISTORY_KEY, [])
        if not isinstance(raw, list):
            _logger.warning("Ignoring malformed history value")
            return []

        items = []
        for entry in raw:
            try:
                items.append(AnalysisResult.model_validate(entry))
            except SchemaError as e:
                _logger.warning(f"Skipping malformed history entry: {e.error_count()} errors")
        return items

    def save_to_history(self, result: AnalysisResult) -> List[AnalysisResult]:
        """
        Add a result to the front of the history.

        Args:
            result: Completed analysis; id and timestamp are filled if missing

        Returns:
            The updated history, or an empty list if it could not be saved
        """
        item = result.model_copy(
            update={
                "id": result.id or str(uuid4()),
                "timestamp": result.timestamp or int(time.time() * 1000),
            }
        )

        updated = [item] + self.get_history()
        updated = updated[: self._max_items]

        try:
            write_json(self._store, HISTORY_KEY, [entry.to_dict() for entry in updated])
        except StorageError as e:
            _logger.error(f"Failed to save history: {e}")
            return []

        return updated

    def get(self, item_id: str) -> Optional[AnalysisResult]:
        """
        Get a specific history item by ID.

        Returns:
            AnalysisResult or None if not found
        """
        for item in self.get_history():
            if item.id == item_id:
                return item
        return None

    def clear_history(self) -> None:
        """Remove all history items."""
        self._store.remove(HISTORY_KEY)

    def count(self) -> int:
        """Get number of items in store."""
        return len(self.get_history())
