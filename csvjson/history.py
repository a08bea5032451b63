"""
Conversion history.

Ordered log of HistoryEntry. Insertion order is display order; entries are
appended, renamed in place or removed, never reordered. Every mutation writes
the whole sequence back to storage.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import DuplicateEntryError
from .models import HistoryEntry
from .rules import JSON_INDENT
from .storage import Storage

logger = logging.getLogger(__name__)

_entries_adapter = TypeAdapter(List[HistoryEntry])


def _compact(records) -> str:
    return json.dumps(records, separators=(",", ":"), ensure_ascii=False)


class HistoryStore:
    def __init__(self, storage: Storage):
        self.storage = storage
        self._entries: List[HistoryEntry] = []

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def load(self) -> List[HistoryEntry]:
        """
        Read the history from storage.

        Missing storage gives an empty history. So does unparseable storage:
        the error is logged and the next mutation overwrites it.
        """
        try:
            raw = self.storage.read()
        except UnicodeDecodeError as e:
            logger.warning("history storage is not valid UTF-8, starting empty: %s", e)
            raw = None

        if not raw:
            self._entries = []
            return self.entries

        try:
            self._entries = _entries_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning("history storage unreadable, starting empty: %s", e.errors()[:1])
            self._entries = []

        logger.info("loaded %d history entries", len(self._entries))
        return self.entries

    def _persist(self) -> None:
        self.storage.write(_compact([e.dump() for e in self._entries]))

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def append(self, entry: HistoryEntry) -> None:
        if self.get(entry.id) is not None:
            raise DuplicateEntryError(entry.id)
        self._entries.append(entry)
        self._persist()

    def rename(self, entry_id: str, new_name: str) -> None:
        self._entries = [
            e.model_copy(update={"name": new_name}) if e.id == entry_id else e
            for e in self._entries
        ]
        self._persist()

    def remove(self, entry_id: str) -> None:
        self._entries = [e for e in self._entries if e.id != entry_id]
        self._persist()

    def search(self, term: str) -> List[HistoryEntry]:
        needle = term.lower()
        return [
            e for e in self._entries
            if needle in e.name.lower()
            or needle in e.csv.lower()
            or needle in _compact(e.records).lower()
        ]

    def export_text(self) -> str:
        return json.dumps([e.dump() for e in self._entries], indent=JSON_INDENT, ensure_ascii=False)
