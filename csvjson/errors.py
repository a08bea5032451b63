from __future__ import annotations


class CsvJsonError(Exception):
    pass


class InvalidInputError(CsvJsonError):
    """Input failed the minimal structural check (header line plus one data row)."""


class DuplicateEntryError(CsvJsonError):
    def __init__(self, entry_id: str):
        super().__init__(f"History already holds an entry with id {entry_id!r}")
        self.entry_id = entry_id


class EntryNotFoundError(CsvJsonError):
    def __init__(self, entry_id: str):
        super().__init__(f"No history entry with id {entry_id!r}")
        self.entry_id = entry_id
