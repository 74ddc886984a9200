"""
Markdown report rendering for an AnalysisResult.

Output depends only on its inputs (pass `generated_on` for a fixed date).
"""

from __future__ import annotations

from datetime import date
from pathlib import PurePath
from typing import List, Optional

from .models import AnalysisResult, FilterConfig, KeywordRecord
from .rules import (
    BUDGET_CLICKS_PER_DAY,
    COMPETITION_POINTS,
    MAX_SCORE,
    MIN_SCORE,
    VOLUME_FLOOR_POINTS,
    VOLUME_POINTS,
)

TITLE = "Google Ads Keyword Analysis Report"
RULE = "---\n\n"


def _searches(value: int) -> str:
    return f"{value:,}"


def _money(value: float) -> str:
    return f"{value:.2f}"


def _cell(text: str) -> str:
    return text.replace("|", "\\|")


def _competition_label(record: KeywordRecord) -> str:
    return record.competition_level.capitalize()


def _bid_range(record: KeywordRecord, sep: str = " - ") -> Optional[str]:
    if not record.has_bid_estimate:
        return None
    return f"{record.currency} {_money(record.top_bid_low)}{sep}{_money(record.top_bid_high)}"


def _filter_summary(filters: FilterConfig) -> List[str]:
    if not filters.is_active():
        return []
    parts = []
    if filters.must_include.strip():
        parts.append(f'must include "{filters.must_include.strip()}"')
    if filters.exclude_terms():
        parts.append(f'excluding "{filters.exclude.strip()}"')
    if filters.keyword_length == "6":
        parts.append("6+ words")
    elif filters.keyword_length != "any":
        plural = "" if filters.keyword_length == "1" else "s"
        parts.append(f"{filters.keyword_length} word{plural}")
    return parts


def _header(analysis: AnalysisResult, file_name: str, generated_on: date) -> str:
    md = f"# {TITLE}\n\n"
    md += f"**Generated:** {generated_on.isoformat()}\n\n"
    md += f"**Source File:** {file_name}\n\n"
    md += f"**Total Keywords Analyzed:** {analysis.total_keywords}\n\n"
    active = _filter_summary(analysis.filters)
    if active:
        md += f"**Filters Applied:** {'; '.join(active)}\n\n"
    return md + RULE


def _executive_summary(analysis: AnalysisResult) -> str:
    breakdown = analysis.competition_breakdown
    md = "## 📊 Executive Summary\n\n"
    md += f"- **Keywords in Account:** {analysis.in_account_count}\n"
    md += f"- **New Opportunities:** {analysis.new_opportunities}\n"
    md += f"- **Low Competition Keywords:** {breakdown.low}\n"
    md += f"- **Medium Competition Keywords:** {breakdown.medium}\n"
    md += f"- **High Competition Keywords:** {breakdown.high}\n\n"
    return md


def _top_recommendations(analysis: AnalysisResult) -> str:
    md = RULE + "## 🎯 Top Recommendations\n\n"
    md += "*Keywords not currently in your account, ranked by potential value*\n\n"

    if not analysis.top_keywords:
        return md + "No keywords match current criteria.\n\n"

    for i, k in enumerate(analysis.top_keywords, start=1):
        md += f"### {i}. {k.text}\n\n"
        md += "| Metric | Value |\n"
        md += "|--------|-------|\n"
        md += f"| Monthly Searches | {_searches(k.searches)} |\n"
        md += f"| Competition | {_competition_label(k)} |\n"
        md += f"| Competition Index | {k.competition_index}/100 |\n"
        bids = _bid_range(k)
        if bids is not None:
            md += f"| Est. CPC Range | {bids} |\n"
        md += f"| Opportunity Score | {k.score}/{MAX_SCORE} |\n\n"
        md += RULE
    return md


def _quick_wins(analysis: AnalysisResult) -> str:
    if not analysis.quick_wins:
        return ""
    md = "## 🚀 Quick Wins (Low Competition, High Volume)\n\n"
    md += "| Keyword | Searches/mo | Competition Index | Est. CPC |\n"
    md += "|---------|-------------|-------------------|----------|\n"
    for k in analysis.quick_wins:
        cpc = _bid_range(k, sep="-") or "N/A"
        md += f"| {_cell(k.text)} | {_searches(k.searches)} | {k.competition_index} | {cpc} |\n"
    return md + "\n"


def _high_volume(analysis: AnalysisResult) -> str:
    if not analysis.high_volume:
        return ""
    md = RULE + "## 📈 High Volume Keywords (5000+ searches/mo)\n\n"
    md += "| Keyword | Searches/mo | Competition | Score |\n"
    md += "|---------|-------------|-------------|-------|\n"
    for k in analysis.high_volume:
        md += (
            f"| {_cell(k.text)} | {_searches(k.searches)} | "
            f"{_competition_label(k)} | {k.score}/{MAX_SCORE} |\n"
        )
    return md + "\n"


def _long_tail(analysis: AnalysisResult) -> str:
    if not analysis.long_tail:
        return ""
    md = RULE + "## 🎣 Long-Tail Keywords (3+ words, Low Competition)\n\n"
    md += "*These typically have higher conversion rates*\n\n"
    md += "| Keyword | Searches/mo | Competition Index |\n"
    md += "|---------|-------------|-------------------|\n"
    for k in analysis.long_tail:
        md += f"| {_cell(k.text)} | {_searches(k.searches)} | {k.competition_index} |\n"
    return md + "\n"


def _competition_breakdown(analysis: AnalysisResult) -> str:
    total = analysis.new_opportunities
    if total == 0:
        return ""
    breakdown = analysis.competition_breakdown
    rows = [("Low", breakdown.low), ("Medium", breakdown.medium), ("High", breakdown.high)]
    if breakdown.unknown:
        rows.append(("Unknown", breakdown.unknown))

    md = RULE + "## 📊 Competition Breakdown\n\n"
    md += "### New Keywords (Not in Account)\n\n"
    md += "| Competition Level | Count | Percentage |\n"
    md += "|-------------------|-------|------------|\n"
    for label, count in rows:
        md += f"| {label} | {count} | {count / total * 100:.1f}% |\n"
    return md + "\n"


def _strategy(analysis: AnalysisResult) -> str:
    actions = []
    if analysis.quick_wins:
        actions.append(
            "**Start with Low Competition Winners**: Add the "
            f"{len(analysis.quick_wins)} low-competition, high-volume keywords first"
        )
    if analysis.long_tail:
        actions.append(
            "**Target Long-Tail Keywords**: The "
            f"{len(analysis.long_tail)} long-tail keywords typically convert better"
        )
    actions.append(
        "**Monitor Competition**: "
        f"{analysis.competition_breakdown.high} high-competition keywords may require higher budgets"
    )
    actions.append(
        "**Test and Iterate**: Start with top 10-20 keywords and expand based on performance"
    )

    md = RULE + "## 💡 Strategy Recommendations\n\n"
    md += "### Immediate Actions\n\n"
    for i, action in enumerate(actions, start=1):
        md += f"{i}. {action}\n"
    md += "\n"

    if analysis.avg_low_bid > 0:
        daily = analysis.avg_low_bid * BUDGET_CLICKS_PER_DAY
        md += "### Budget Allocation\n\n"
        md += (
            "- Average CPC for low competition keywords: "
            f"{analysis.currency} {_money(analysis.avg_low_bid)}\n"
        )
        md += (
            f"- Recommended starting daily budget: {analysis.currency} {_money(daily)} "
            f"({BUDGET_CLICKS_PER_DAY} clicks/day)\n\n"
        )
    return md


def _methodology() -> str:
    md = RULE + "## 📝 Scoring Methodology\n\n"
    md += f"Keywords are scored {MIN_SCORE}-{MAX_SCORE} based on:\n\n"
    md += "**Search Volume:**\n"
    upper = None
    for threshold, points in VOLUME_POINTS:
        if upper is None:
            md += f"- {threshold}+ searches: {points} points\n"
        else:
            md += f"- {threshold}-{upper - 1} searches: {points} points\n"
        upper = threshold
    md += f"- <{upper} searches: {VOLUME_FLOOR_POINTS} point\n\n"
    md += "**Competition (lower is better):**\n"
    for level, points in COMPETITION_POINTS.items():
        unit = "point" if points == 1 else "points"
        md += f"- {level.capitalize()} competition: {points} {unit}\n"
    md += "- Unknown competition: 0 points\n\n"
    return md


def generate_markdown_report(
    analysis: AnalysisResult,
    file_name: str,
    generated_on: Optional[date] = None,
) -> str:
    generated_on = generated_on or date.today()
    return "".join(
        [
            _header(analysis, file_name, generated_on),
            _executive_summary(analysis),
            _top_recommendations(analysis),
            _quick_wins(analysis),
            _high_volume(analysis),
            _long_tail(analysis),
            _competition_breakdown(analysis),
            _strategy(analysis),
            _methodology(),
            RULE,
            "*Report generated by Google Ads Keyword Analyzer*\n",
        ]
    )


def report_filename(source_name: str, on: Optional[date] = None) -> str:
    """`plumbing.csv` -> `plumbing-analysis-2024-05-01.md`"""
    on = on or date.today()
    base = PurePath(source_name or "keywords").name
    if base.lower().endswith(".csv"):
        base = base[: -len(".csv")]
    return f"{base or 'keywords'}-analysis-{on.isoformat()}.md"
