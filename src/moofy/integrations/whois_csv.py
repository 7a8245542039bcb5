"""Parsing for the CSV "whois" directories that guild moderators publish.

The first row holds the column names; every following non-blank row is one
person. Rows are kept exactly as long as the CSV makes them, so a short row
just lacks its trailing cells.
"""

from __future__ import annotations

import csv
import io
import re
from typing import Iterable, Optional

__all__ = [
    "parse_whois_csv",
    "find_user_id",
    "whois_fields",
]

_USER_ID = re.compile(r"\d+")

# Discord embed limits
MAX_FIELDS = 25
MAX_FIELD_NAME = 256
MAX_FIELD_VALUE = 1024


def parse_whois_csv(text: str) -> tuple[list[str], list[list[str]]]:
    """Split CSV *text* into ``(headers, rows)``.

    Raises ``ValueError`` if the document is malformed or has no header row.
    """

    text = text.lstrip("\ufeff")
    try:
        records = list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        raise ValueError(f"That doesn't look like a CSV file ({exc}).") from exc

    records = [row for row in records if any(cell.strip() for cell in row)]
    if not records:
        raise ValueError("The CSV file is empty.")

    headers = [cell.strip() for cell in records[0]]
    rows = [[cell.strip() for cell in row] for row in records[1:]]
    return headers, rows


def find_user_id(text: str) -> Optional[str]:
    """Return the first run of digits in *text* (a raw id or a ``<@id>`` mention)."""

    match = _USER_ID.search(text)
    return match.group(0) if match else None


def whois_fields(headers: Iterable[str], row: list[str]) -> list[tuple[str, str]]:
    """Pair headers with the row's non-empty cells for an embed.

    Columns whose header starts with an underscore are private and skipped.
    """

    fields: list[tuple[str, str]] = []
    for index, header in enumerate(headers):
        if index >= len(row) or header.startswith("_"):
            continue
        value = row[index]
        if not value:
            continue
        name = header or f"Column {index + 1}"
        fields.append((name[:MAX_FIELD_NAME], value[:MAX_FIELD_VALUE]))
        if len(fields) == MAX_FIELDS:
            break
    return fields
