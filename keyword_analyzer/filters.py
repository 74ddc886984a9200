from __future__ import annotations

from typing import Iterable, List

from .models import FilterConfig, KeywordRecord
from .rules import OPEN_ENDED_LENGTH


def matches_length(record: KeywordRecord, keyword_length: str) -> bool:
    if keyword_length == "any":
        return True
    target = int(keyword_length)
    if target >= OPEN_ENDED_LENGTH:
        return record.word_count >= target
    return record.word_count == target


def apply_filters(records: Iterable[KeywordRecord], filters: FilterConfig) -> List[KeywordRecord]:
    """
    Keep records passing every active filter (AND semantics).

    - must_include: case-insensitive substring match on the keyword text
    - exclude: comma-separated terms; any substring hit drops the record
    - keyword_length: exact word count, or "6" for six words or more
    """
    include = filters.include_term()
    excludes = filters.exclude_terms()
    length = filters.keyword_length

    kept: List[KeywordRecord] = []
    for record in records:
        if not matches_length(record, length):
            continue
        text = record.text.lower()
        if include and include not in text:
            continue
        if any(term in text for term in excludes):
            continue
        kept.append(record)
    return kept
