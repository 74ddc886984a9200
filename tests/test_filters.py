import pytest
from pydantic import ValidationError

from keyword_analyzer.filters import apply_filters
from keyword_analyzer.models import FilterConfig, KeywordRecord


def kw(text, **kwargs):
    return KeywordRecord(text=text, **kwargs)


def test_must_include_is_case_insensitive():
    texts = [
        "Emergency Plumber",
        "plumber near me",
        "blocked drain",
        "PLUMBERS sydney",
        "hot water system",
        "gas fitter",
        "cheap plumber",
        "roof repair",
        "electrician",
        "bathroom renovation",
    ]
    records = [kw(t) for t in texts]
    result = apply_filters(records, FilterConfig(must_include="plumber", exclude="", keyword_length="any"))

    assert len(result) == 4
    assert all("plumber" in r.text.lower() for r in result)


def test_must_include_is_trimmed():
    result = apply_filters([kw("plumber"), kw("drain")], FilterConfig(must_include="  PLUMB "))
    assert [r.text for r in result] == ["plumber"]


def test_exclude_any_term():
    records = [kw("cheap plumber"), kw("diy plumbing"), kw("emergency plumber"), kw("plumber")]
    result = apply_filters(records, FilterConfig(exclude="Cheap, ,diy,"))
    assert [r.text for r in result] == ["emergency plumber", "plumber"]


def test_six_means_six_or_more():
    texts = ["a b", "a b c d e", "a b c d e f", "a b c d e f g", "a b c d e f g h i j"]
    result = apply_filters([kw(t) for t in texts], FilterConfig(keyword_length="6"))
    assert [r.word_count for r in result] == [6, 7, 10]


def test_exact_length():
    texts = ["plumber", "emergency  plumber", " plumber near me ", "plumber sydney"]
    result = apply_filters([kw(t) for t in texts], FilterConfig(keyword_length="2"))
    assert [r.text for r in result] == ["emergency  plumber", "plumber sydney"]


def test_filters_combine():
    records = [kw("cheap plumber sydney"), kw("emergency plumber sydney"), kw("plumber sydney")]
    config = FilterConfig(must_include="plumber", exclude="cheap", keyword_length="3")
    assert [r.text for r in apply_filters(records, config)] == ["emergency plumber sydney"]


def test_no_filters_returns_new_list():
    records = [kw("a"), kw("b")]
    result = apply_filters(records, FilterConfig())
    assert result == records
    assert result is not records


def test_filter_config_defaults_and_validation():
    config = FilterConfig(must_include=None, exclude=None, keyword_length=None)
    assert config == FilterConfig()
    assert config.keyword_length == "any"
    assert not config.is_active()
    assert FilterConfig(keyword_length=3).keyword_length == "3"

    with pytest.raises(ValidationError):
        FilterConfig(keyword_length="7")


def test_filter_config_is_frozen():
    config = FilterConfig(must_include="plumber")
    with pytest.raises(ValidationError):
        config.must_include = "drain"
