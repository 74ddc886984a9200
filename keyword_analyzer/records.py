"""
Row -> KeywordRecord conversion.

Never raises: malformed numbers fall back to 0, missing bids to None.
"""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional

from .models import KeywordRecord
from .rules import (
    BID_HIGH_COLUMN,
    BID_LOW_COLUMN,
    COMPETITION_COLUMN,
    COMPETITION_INDEX_COLUMN,
    CURRENCY_COLUMN,
    DEFAULT_CURRENCY,
    IN_ACCOUNT_COLUMN,
    IN_ACCOUNT_MARKERS,
    KEYWORD_COLUMN,
    SEARCHES_COLUMN,
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: Optional[str], default: int = 0) -> int:
    """Parse the leading integer of `value` ("1.5K" -> 1, "n/a" -> default)."""
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    return int(match.group(1))


def parse_searches(value: Optional[str]) -> int:
    if not value:
        return 0
    return max(parse_int(str(value).replace(",", "")), 0)


def parse_bid(value: Optional[str]) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    try:
        bid = float(str(value).replace(",", "").strip())
    except ValueError:
        return None
    if not math.isfinite(bid) or bid < 0:
        return None
    return bid


def normalize_row(row: Mapping[str, Optional[str]]) -> KeywordRecord:
    competition_index = parse_int(row.get(COMPETITION_INDEX_COLUMN))
    currency = (row.get(CURRENCY_COLUMN) or "").strip()

    return KeywordRecord(
        text=(row.get(KEYWORD_COLUMN) or "").strip(),
        searches=parse_searches(row.get(SEARCHES_COLUMN)),
        in_account=row.get(IN_ACCOUNT_COLUMN) in IN_ACCOUNT_MARKERS,
        competition=(row.get(COMPETITION_COLUMN) or "").strip().lower(),
        competition_index=min(max(competition_index, 0), 100),
        currency=currency or DEFAULT_CURRENCY,
        top_bid_low=parse_bid(row.get(BID_LOW_COLUMN)),
        top_bid_high=parse_bid(row.get(BID_HIGH_COLUMN)),
    )
