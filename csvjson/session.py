from __future__ import annotations

import logging
from typing import List, Optional

from .convert import convert, to_json_text
from .errors import EntryNotFoundError, InvalidInputError
from .history import HistoryStore
from .models import ConvertResponse, HistoryEntry
from .storage import Clipboard

logger = logging.getLogger(__name__)


class ConverterSession:
    """
    State behind the converter page: the history, the search box, the last
    output and whether the invalid-input warning is showing.
    """

    def __init__(self, store: HistoryStore, clipboard: Clipboard, skip_blank_lines: bool = False):
        self.store = store
        self.clipboard = clipboard
        self.skip_blank_lines = skip_blank_lines
        self.search_term = ""
        self.json_text = ""
        self.input_error = False

    def convert(self, csv_text: str) -> ConvertResponse:
        try:
            result = convert(csv_text, skip_blank_lines=self.skip_blank_lines)
        except InvalidInputError:
            self.input_error = True
            raise

        self.json_text = to_json_text(result.records)
        entry = HistoryEntry(csv=csv_text, json=result.records)
        self.store.append(entry)
        self.input_error = False

        self.clipboard.write(self.json_text)
        logger.info("history entry %s created", entry.id)

        return ConvertResponse(
            records=result.records,
            json_text=self.json_text,
            warnings=result.warnings,
            entry=entry,
        )

    def dismiss_error(self) -> None:
        self.input_error = False

    def visible_history(self, term: Optional[str] = None) -> List[HistoryEntry]:
        return self.store.search(self.search_term if term is None else term)

    def _require(self, entry_id: str) -> HistoryEntry:
        entry = self.store.get(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def get(self, entry_id: str) -> HistoryEntry:
        return self._require(entry_id)

    def rename(self, entry_id: str, name: str) -> None:
        self.store.rename(entry_id, name)

    def delete(self, entry_id: str) -> None:
        self.store.remove(entry_id)

    def copy_csv(self, entry_id: str) -> str:
        text = self._require(entry_id).csv
        self.clipboard.write(text)
        return text

    def copy_json(self, entry_id: str) -> str:
        text = to_json_text(self._require(entry_id).records)
        self.clipboard.write(text)
        return text
