from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import (
    COMPETITION_LEVELS,
    DEFAULT_CURRENCY,
    KEYWORD_LENGTH_CHOICES,
)


class KeywordRecord(BaseModel):
    text: str
    searches: int = Field(default=0, ge=0)
    in_account: bool = False
    competition: str = Field(default="", examples=["low"])
    competition_index: int = Field(default=0, ge=0, le=100)
    currency: str = DEFAULT_CURRENCY
    # None means the export carried no estimate for that end of the range.
    top_bid_low: Optional[float] = Field(default=None, ge=0)
    top_bid_high: Optional[float] = Field(default=None, ge=0)
    score: Optional[int] = None

    @property
    def competition_level(self) -> str:
        if self.competition in COMPETITION_LEVELS:
            return self.competition
        return "unknown"

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def has_bid_estimate(self) -> bool:
        """Both ends of the bid range are present and non-zero."""
        return bool(self.top_bid_low) and bool(self.top_bid_high)

    def with_score(self, score: int) -> "KeywordRecord":
        return self.model_copy(update={"score": score})


class FilterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    must_include: str = ""
    exclude: str = Field(default="", examples=["diy, cheap"])
    keyword_length: str = Field(default="any", examples=["any", "3", "6"])

    @field_validator("must_include", "exclude", mode="before")
    @classmethod
    def _blank_if_none(cls, value):
        return "" if value is None else value

    @field_validator("keyword_length", mode="before")
    @classmethod
    def _check_length(cls, value):
        value = "" if value is None else str(value).strip()
        if value == "":
            return "any"
        if value not in KEYWORD_LENGTH_CHOICES:
            raise ValueError(f"keyword_length must be one of {', '.join(KEYWORD_LENGTH_CHOICES)}")
        return value

    def include_term(self) -> str:
        return self.must_include.strip().lower()

    def exclude_terms(self) -> List[str]:
        terms = (term.strip() for term in self.exclude.lower().split(","))
        return [term for term in terms if term]

    def is_active(self) -> bool:
        return bool(self.include_term() or self.exclude_terms() or self.keyword_length != "any")


class CompetitionBreakdown(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0
    unknown: int = 0


class AnalysisResult(BaseModel):
    total_keywords: int
    in_account_count: int
    new_opportunities: int
    top_keywords: List[KeywordRecord] = Field(default_factory=list)
    quick_wins: List[KeywordRecord] = Field(default_factory=list)
    difficult_keywords: List[KeywordRecord] = Field(default_factory=list)
    high_volume: List[KeywordRecord] = Field(default_factory=list)
    long_tail: List[KeywordRecord] = Field(default_factory=list)
    competition_breakdown: CompetitionBreakdown = Field(default_factory=CompetitionBreakdown)
    avg_low_bid: float = 0.0
    currency: str = DEFAULT_CURRENCY
    filters: FilterConfig = Field(default_factory=FilterConfig)


class SourceInfo(BaseModel):
    filename: Optional[str] = None
    encoding: str = Field(examples=["utf-16-le"])
    detected_encoding: Optional[str] = Field(default=None, examples=["utf_16"])
    delimiter: str = Field(examples=["\t"])
    rows: int = 0
    skipped_rows: int = 0


class AnalyzeResponse(BaseModel):
    source: SourceInfo
    analysis: AnalysisResult


class HealthResponse(BaseModel):
    ok: bool = True
