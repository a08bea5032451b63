"""
Uploaded CSV bytes -> text the converter accepts.

Rules:
- Detect encoding best-effort via charset-normalizer.
- If decode fails, fall back to UTF-8, then to replacement characters.
- A UTF-8 BOM is dropped.
- Newlines are normalized to LF (the converter splits on LF only).
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)


def decode_csv_bytes(raw: bytes) -> tuple[str, Dict[str, Any]]:
    detected = None

    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        decode_used = "utf-8"
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
        decode_fallback = True

    if decode_fallback:
        logger.warning("upload decoded with fallback %s (detected %s)", decode_used, detected)

    newlines = {
        "crlf": text.count("\r\n"),
        "cr": text.count("\r") - text.count("\r\n"),
    }
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    report = {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
        "newlines_normalized": newlines["crlf"] + newlines["cr"],
    }
    return text, report
