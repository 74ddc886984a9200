"""
Keyword Planner export decoding.

Responsibilities:
- encoding detection (UTF-16LE first, UTF-8 fallback)
- delimiter detection on the header line
- preamble stripping + tabular parsing
- row -> KeywordRecord conversion
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .errors import DecodeFailure, EmptyResult, MissingColumn
from .models import KeywordRecord
from .records import normalize_row
from .rules import (
    CANDIDATE_ENCODINGS,
    DELIMITERS,
    ENCODING_SNIFF_BYTES,
    HEADER_LINE_INDEX,
    KEYWORD_COLUMN,
    PREAMBLE_LINES,
)

logger = logging.getLogger(__name__)

RawRow = Dict[str, Optional[str]]


def _best_guess(raw: bytes) -> Optional[str]:
    match = from_bytes(raw[:ENCODING_SNIFF_BYTES]).best()
    return match.encoding if match is not None else None


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _delimiter_counts(text: str) -> Dict[str, int]:
    lines = text.split("\n")
    header_line = lines[HEADER_LINE_INDEX] if len(lines) > HEADER_LINE_INDEX else ""
    logger.debug("Header line candidate: %r", header_line[:100])
    return {delim: header_line.count(delim) for delim in DELIMITERS}


def _pick_delimiter(counts: Dict[str, int]) -> Optional[str]:
    # max() keeps the first of equal counts, so tab wins ties
    delimiter = max(DELIMITERS, key=lambda delim: counts[delim])
    return delimiter if counts[delimiter] > 0 else None


def detect_encoding(raw: bytes) -> Tuple[str, str, Dict[str, Any]]:
    """
    Decode export bytes and pick the field delimiter.

    Each candidate encoding is tried in order; the first one whose header line
    (line index 2) contains a tab or a comma wins. Returns (text, delimiter, report).
    """
    attempts: List[Dict[str, Any]] = []
    last_error: Optional[Exception] = None

    for encoding in CANDIDATE_ENCODINGS:
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            logger.warning("Decoding as %s failed: %s", encoding, exc)
            attempts.append({"encoding": encoding, "error": str(exc)})
            last_error = exc
            continue

        text = _normalize_newlines(text.lstrip("\ufeff"))
        counts = _delimiter_counts(text)
        attempts.append({"encoding": encoding, "tabs": counts["\t"], "commas": counts[","]})

        delimiter = _pick_delimiter(counts)
        if delimiter is None:
            logger.warning("No delimiters on header line when decoded as %s", encoding)
            last_error = None
            continue

        logger.info(
            "Decoded export as %s, delimiter %s",
            encoding,
            "TAB" if delimiter == "\t" else "COMMA",
        )
        report = {
            "encoding": encoding,
            "delimiter": delimiter,
            "tabs": counts["\t"],
            "commas": counts[","],
            "attempts": attempts,
            "detected": _best_guess(raw),
        }
        return text, delimiter, report

    detected = _best_guess(raw)
    failure = DecodeFailure(
        f"Could not read file: no tab or comma delimited header found "
        f"(tried {', '.join(CANDIDATE_ENCODINGS)}; best guess {detected or 'unknown'})",
        detected=detected,
    )
    if last_error is not None:
        raise failure from last_error
    raise failure


def read_rows(text: str, delimiter: str) -> Tuple[List[RawRow], int]:
    """
    Parse decoded text into header-keyed rows.

    The first PREAMBLE_LINES lines are discarded. Returns (rows, skipped),
    where skipped counts rows dropped for a blank or repeated-header keyword.
    """
    body = "\n".join(text.split("\n")[PREAMBLE_LINES:])
    reader = csv.reader(io.StringIO(body, newline=""), delimiter=delimiter)

    headers = [name.strip() for name in next(reader, [])]
    logger.debug("Headers detected: %s", headers)
    if KEYWORD_COLUMN not in headers:
        raise MissingColumn(KEYWORD_COLUMN, headers)

    rows: List[RawRow] = []
    skipped = 0
    for cells in reader:
        if not any(cell.strip() for cell in cells):
            continue

        row: RawRow = {name: None for name in headers}
        # zip() drops extra cells on long rows
        row.update(zip(headers, cells))

        keyword = (row.get(KEYWORD_COLUMN) or "").strip()
        if not keyword or keyword == KEYWORD_COLUMN:
            skipped += 1
            continue
        rows.append(row)

    if skipped:
        logger.warning("Skipped %d rows without a usable keyword", skipped)
    return rows, skipped


def parse_keyword_export(raw: bytes) -> Tuple[List[KeywordRecord], Dict[str, Any]]:
    """bytes -> KeywordRecords. Raises DecodeFailure, MissingColumn or EmptyResult."""
    text, delimiter, report = detect_encoding(raw)
    rows, skipped = read_rows(text, delimiter)

    records = [normalize_row(row) for row in rows]
    for i, record in enumerate(records[:3]):
        logger.debug("Parsed keyword %d: %s", i, record)

    if not records:
        raise EmptyResult(
            "No valid keywords found in CSV. "
            "The file may not be in the correct Google Ads format."
        )

    logger.info("Parsed %d keywords (%d rows skipped)", len(records), skipped)
    report["rows"] = len(records)
    report["skipped_rows"] = skipped
    return records, report
