from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_LOG_LEVEL = "INFO"


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _log_level(value: str) -> str:
    level = value.strip().upper()
    # getLevelName maps known names to ints and anything else to a string
    if isinstance(logging.getLevelName(level), int):
        return level
    return DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class Settings:
    history_path: str = "csvjson_history.json"
    log_level: str = DEFAULT_LOG_LEVEL
    skip_blank_lines: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            history_path=os.getenv("CSVJSON_HISTORY_PATH", cls.history_path),
            log_level=_log_level(os.getenv("CSVJSON_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
            skip_blank_lines=_flag(os.getenv("CSVJSON_SKIP_BLANK_LINES", "")),
        )
