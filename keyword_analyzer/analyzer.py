"""
Keyword analysis: filtering, scoring, ranking and summary statistics.

Every figure shown downstream (API response and markdown report) is derived
here. Only in_account_count, total_keywords and currency look at the full
collection; everything else is computed from the working set, i.e. records
not yet in the account that pass the active filters.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .filters import apply_filters
from .models import AnalysisResult, CompetitionBreakdown, FilterConfig, KeywordRecord
from .rules import (
    BID_AVERAGE_MIN_SEARCHES,
    DEFAULT_CURRENCY,
    DIFFICULT_LIMIT,
    DIFFICULT_MIN_SEARCHES,
    HIGH_VOLUME_LIMIT,
    HIGH_VOLUME_MIN_SEARCHES,
    LONG_TAIL_LIMIT,
    LONG_TAIL_MIN_SEARCHES,
    LONG_TAIL_MIN_WORDS,
    QUICK_WIN_MIN_SEARCHES,
    QUICK_WINS_LIMIT,
    TOP_KEYWORDS_LIMIT,
)
from .scoring import score_keyword

logger = logging.getLogger(__name__)


def _top_by_searches(
    records: Sequence[KeywordRecord],
    predicate: Callable[[KeywordRecord], bool],
    limit: int,
) -> List[KeywordRecord]:
    picked = [r for r in records if predicate(r)]
    return sorted(picked, key=lambda r: r.searches, reverse=True)[:limit]


def competition_breakdown(records: Sequence[KeywordRecord]) -> CompetitionBreakdown:
    counts = {"low": 0, "medium": 0, "high": 0, "unknown": 0}
    for record in records:
        counts[record.competition_level] += 1
    return CompetitionBreakdown(**counts)


def average_low_competition_bid(records: Sequence[KeywordRecord]) -> float:
    """Mean bid midpoint over low-competition records with a full bid estimate; 0 if none."""
    midpoints = [
        (r.top_bid_low + r.top_bid_high) / 2
        for r in records
        if r.competition == "low"
        and r.searches >= BID_AVERAGE_MIN_SEARCHES
        and r.has_bid_estimate
    ]
    if not midpoints:
        return 0.0
    return sum(midpoints) / len(midpoints)


def analyze_keywords(
    keywords: Sequence[KeywordRecord],
    filters: Optional[FilterConfig] = None,
) -> AnalysisResult:
    filters = filters or FilterConfig()

    in_account_count = sum(1 for k in keywords if k.in_account)
    new_keywords = [k for k in keywords if not k.in_account]
    working = [k.with_score(score_keyword(k)) for k in apply_filters(new_keywords, filters)]

    # sorted() is stable: equal scores keep their file order
    top_keywords = sorted(working, key=lambda k: k.score, reverse=True)[:TOP_KEYWORDS_LIMIT]

    difficult = _top_by_searches(
        working,
        lambda k: k.competition == "high" and k.searches >= DIFFICULT_MIN_SEARCHES,
        DIFFICULT_LIMIT,
    )
    quick_wins = _top_by_searches(
        working,
        lambda k: k.competition == "low" and k.searches >= QUICK_WIN_MIN_SEARCHES,
        QUICK_WINS_LIMIT,
    )
    high_volume = _top_by_searches(
        working,
        lambda k: k.searches >= HIGH_VOLUME_MIN_SEARCHES,
        HIGH_VOLUME_LIMIT,
    )
    long_tail = _top_by_searches(
        working,
        lambda k: (
            k.word_count >= LONG_TAIL_MIN_WORDS
            and k.searches >= LONG_TAIL_MIN_SEARCHES
            and k.competition == "low"
        ),
        LONG_TAIL_LIMIT,
    )

    result = AnalysisResult(
        total_keywords=len(keywords),
        in_account_count=in_account_count,
        new_opportunities=len(working),
        top_keywords=top_keywords,
        quick_wins=quick_wins,
        difficult_keywords=difficult,
        high_volume=high_volume,
        long_tail=long_tail,
        competition_breakdown=competition_breakdown(working),
        avg_low_bid=average_low_competition_bid(working),
        currency=(keywords[0].currency if keywords else "") or DEFAULT_CURRENCY,
        filters=filters,
    )
    logger.info(
        "Analysed %d keywords: %d in account, %d opportunities after filters",
        result.total_keywords,
        result.in_account_count,
        result.new_opportunities,
    )
    return result
