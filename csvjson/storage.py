"""
Durable storage and clipboard capabilities.

The history store and session receive these instead of touching files or a
system clipboard directly.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from .rules import HISTORY_STORAGE_KEY

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def read(self) -> Optional[str]:
        ...

    def write(self, text: str) -> None:
        ...


class Clipboard(Protocol):
    def write(self, text: str) -> None:
        ...


class FileStorage:
    """One JSON document on disk holding the whole history."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # atomic replace
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        logger.debug("wrote %d bytes to %s", len(text), self.path)


class MemoryStorage:
    """Key/value storage kept in a dict, addressed through one key."""

    def __init__(self, initial: Optional[str] = None, key: str = HISTORY_STORAGE_KEY):
        self.key = key
        self.values: Dict[str, str] = {}
        self.writes = 0
        if initial is not None:
            self.values[key] = initial

    def read(self) -> Optional[str]:
        return self.values.get(self.key)

    def write(self, text: str) -> None:
        self.values[self.key] = text
        self.writes += 1


class MemoryClipboard:
    def __init__(self):
        self.text: Optional[str] = None

    def write(self, text: str) -> None:
        self.text = text
