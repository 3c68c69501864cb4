"""
service_reports/parsers/row_parser.py

Turns raw CSV or JSON text into loosely-typed rows keyed by header name.

The CSV dialect is deliberately minimal: comma separated, no quoting and no
escaping. A value that contains a comma shifts every later cell of its row
one column to the right.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

from service_reports.domain.service_record import SourceFormat, SourceFormatValue
from service_reports.errors import MalformedJsonError

RawRow = Mapping[str, Any]

_LINE_BREAK = re.compile(r"\r?\n")


def parse_csv(text: str) -> list[dict[str, str]]:
    """
    Parse comma-separated text whose first non-blank line is the header row.

    Blank lines are dropped anywhere; cells and header names are trimmed;
    a row shorter than the header gets empty strings for the missing cells.
    """

    cleaned = text.lstrip("\ufeff").strip()
    if not cleaned:
        return []

    header_line, *body_lines = _LINE_BREAK.split(cleaned)
    headers = [header.strip() for header in header_line.split(",")]

    rows: list[dict[str, str]] = []
    for line in body_lines:
        line = line.strip()
        if not line:
            continue
        cells = [cell.strip() for cell in line.split(",")]
        rows.append(
            {
                header: cells[index] if index < len(cells) else ""
                for index, header in enumerate(headers)
            }
        )
    return rows


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_json(text: str) -> list[Any]:
    """
    Parse a JSON document; anything other than a top-level array yields no rows.

    An empty or whitespace-only document also yields no rows.
    """

    cleaned = text.lstrip("\ufeff")
    if not cleaned.strip():
        return []
    try:
        parsed = json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedJsonError() from exc
    return parsed if isinstance(parsed, list) else []


def parse_rows(source_format: SourceFormatValue, text: str) -> list[Any]:
    if source_format == SourceFormat.CSV:
        return parse_csv(text)
    if source_format == SourceFormat.JSON:
        return parse_json(text)
    raise ValueError(f"Unsupported source format: {source_format!r}.")
