"""Lenient CSV -> list[dict] for MOI exports."""
from __future__ import annotations

import csv
import io
import logging
from typing import Dict, List

from realprice.core.errors import ParseError

LOGGER = logging.getLogger(__name__)


def read_csv_rows(text: str) -> List[Dict[str, str]]:
    """
    First line is the header.
    - short rows: missing fields become ""
    - long rows: surplus fields are dropped
    - blank lines are skipped
    Raises ParseError when the csv module gives up.
    """
    if not text or not text.strip():
        return []

    reader = csv.reader(io.StringIO(text, newline=""))
    rows: List[Dict[str, str]] = []
    try:
        header = next(reader, None)
        if not header:
            return []
        header = [h.strip() for h in header]

        for fields in reader:
            if not fields or all(not f.strip() for f in fields):
                continue
            rows.append({
                name: (fields[i] if i < len(fields) else "")
                for i, name in enumerate(header)
                if name
            })
    except csv.Error as exc:
        raise ParseError(f"line {reader.line_num}: {exc}") from exc

    return rows


def parse_csv_rows(text: str) -> List[Dict[str, str]]:
    """Same as read_csv_rows, but a broken payload degrades to [] (logged)."""
    try:
        return read_csv_rows(text)
    except ParseError as exc:
        LOGGER.error("CSV parse error: %s", exc)
        return []


__all__ = ["read_csv_rows", "parse_csv_rows"]
