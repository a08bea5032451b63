"""
CSV text -> list of flat records.

Rules:
- Lines are split on LF only; cells on a bare comma (see rules.py).
- Headers come from the first raw line (the first non-empty one when blank
  lines are skipped): lowercased, spaces -> underscores.
- Short rows leave trailing keys absent, long rows lose their extra cells.
- Duplicate headers overwrite earlier values in each record; a duplicate
  past the end of a short row removes the key.
- None of the above raises; each one is reported as a warning instead.

Only a missing header or data row raises InvalidInputError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import List

from .errors import InvalidInputError
from .models import ConversionWarning, Record
from .rules import DELIMITER, INVALID_INPUT_MESSAGE, JSON_INDENT, LINE_SEPARATOR

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    records: List[Record] = field(default_factory=list)
    warnings: List[ConversionWarning] = field(default_factory=list)


def normalize_header(header: str) -> str:
    return header.lower().replace(" ", "_")


def _header_warnings(headers: List[str], row: int) -> List[ConversionWarning]:
    warnings = []
    seen = set()
    for position, header in enumerate(headers):
        if header in seen:
            warnings.append(ConversionWarning(
                row=row,
                column=header,
                issue="duplicate_header",
                value=str(position + 1),
                action="later_column_overwrites",
            ))
        seen.add(header)
    return warnings


def _build_record(headers: List[str], values: List[str]) -> Record:
    record: Record = {}
    for j, header in enumerate(headers):
        if j < len(values):
            record[header] = values[j]
        else:
            # a valueless duplicate clears the earlier value
            record.pop(header, None)
    return record


def convert(raw_text: str, skip_blank_lines: bool = False) -> ConversionResult:
    """
    Convert CSV text to records.

    By default rows are read from the raw line list by absolute index, bounded
    by the count of non-empty lines. A blank line before the end therefore
    yields a near-empty record and pushes the last data line(s) out of range.
    Pass skip_blank_lines=True to iterate the non-empty lines instead; the
    header then comes from the first non-empty line.
    """
    lines = raw_text.split(LINE_SEPARATOR)
    non_empty = [(i, line) for i, line in enumerate(lines) if line.strip() != ""]

    # A split always yields at least one token, so the header line itself is
    # never rejected; only the line count is checked.
    if len(non_empty) < 2:
        raise InvalidInputError(INVALID_INPUT_MESSAGE)

    header_index = non_empty[0][0] if skip_blank_lines else 0
    headers = [normalize_header(h) for h in lines[header_index].split(DELIMITER)]
    warnings = _header_warnings(headers, header_index + 1)

    if skip_blank_lines:
        rows = non_empty[1:]
    else:
        rows = [(i, lines[i]) for i in range(1, len(non_empty))]
        reached = {i for i, _ in rows}
        for i, line in non_empty[1:]:
            if i not in reached:
                warnings.append(ConversionWarning(
                    row=i + 1,
                    issue="row_not_reached",
                    value=line,
                    action="dropped",
                ))

    records: List[Record] = []
    for i, line in rows:
        values = line.split(DELIMITER)

        if line.strip() == "":
            warnings.append(ConversionWarning(
                row=i + 1,
                issue="blank_row",
                action="converted_as_empty",
            ))
        elif len(values) < len(headers):
            warnings.append(ConversionWarning(
                row=i + 1,
                issue="row_too_short",
                value=str(len(values)),
                action=f"missing_{len(headers) - len(values)}_keys",
            ))
        elif len(values) > len(headers):
            warnings.append(ConversionWarning(
                row=i + 1,
                issue="row_too_long",
                value=str(len(values)),
                action=f"truncated_to_{len(headers)}",
            ))

        records.append(_build_record(headers, values))

    for w in warnings:
        logger.warning("csv row %s: %s (%s)", w.row, w.issue, w.action)
    logger.info("converted %d rows with %d headers", len(records), len(headers))

    return ConversionResult(records=records, warnings=warnings)


def to_json_text(records: List[Record]) -> str:
    return json.dumps(records, indent=JSON_INDENT, ensure_ascii=False)
