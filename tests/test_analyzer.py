from keyword_analyzer.analyzer import analyze_keywords, average_low_competition_bid, competition_breakdown
from keyword_analyzer.models import CompetitionBreakdown, FilterConfig, KeywordRecord


def kw(text, searches=0, competition="low", **kwargs):
    return KeywordRecord(text=text, searches=searches, competition=competition, **kwargs)


def sample_keywords():
    return [
        kw("plumber", 22000, "high", in_account=True, currency="NZD"),
        kw("emergency plumber sydney", 1200, "low", top_bid_low=3.0, top_bid_high=7.0),
        kw("blocked drain plumber near me", 150, "low", top_bid_low=1.0, top_bid_high=2.0),
        kw("hot water", 9000, "medium"),
        kw("gas fitter", 1500, "high"),
        kw("plumbing supplies", 40, "", top_bid_low=0.5, top_bid_high=0.9),
        kw("cheap plumber", 800, "low", top_bid_low=0.0, top_bid_high=4.5),
        kw("leaking tap repair cost", 5, "low", top_bid_low=9.0, top_bid_high=9.0),
    ]


def test_counts_add_up_without_filters():
    keywords = sample_keywords()
    result = analyze_keywords(keywords)

    assert result.total_keywords == 8
    assert result.in_account_count == 1
    assert result.in_account_count + result.new_opportunities == result.total_keywords
    breakdown = result.competition_breakdown
    assert breakdown.low + breakdown.medium + breakdown.high + breakdown.unknown == result.new_opportunities


def test_in_account_count_and_currency_ignore_filters():
    result = analyze_keywords(sample_keywords(), FilterConfig(must_include="drain"))

    assert result.in_account_count == 1
    assert result.currency == "NZD"
    assert result.new_opportunities == 1
    assert result.total_keywords == 8


def test_top_keywords_exclude_in_account_and_are_scored():
    result = analyze_keywords(sample_keywords())

    assert all(not k.in_account for k in result.top_keywords)
    assert all(k.score is not None for k in result.top_keywords)
    assert result.top_keywords[0].text == "emergency plumber sydney"
    assert result.top_keywords[0].score == 8


def test_top_keywords_limit_and_stable_order():
    keywords = [kw(f"keyword {i}", 1000, "low") for i in range(30)]
    result = analyze_keywords(keywords)

    assert len(result.top_keywords) == 25
    assert [k.text for k in result.top_keywords] == [f"keyword {i}" for i in range(25)]


def test_equal_scores_keep_file_order():
    keywords = [kw("b", 10, "low"), kw("a", 1000, "low"), kw("c", 10, "low"), kw("d", 20, "low")]
    result = analyze_keywords(keywords)
    assert [k.text for k in result.top_keywords] == ["a", "b", "c", "d"]


def test_buckets():
    result = analyze_keywords(sample_keywords())

    assert [k.text for k in result.quick_wins] == ["emergency plumber sydney", "cheap plumber"]
    assert [k.text for k in result.difficult_keywords] == ["gas fitter"]
    assert [k.text for k in result.high_volume] == ["hot water"]
    assert [k.text for k in result.long_tail] == ["emergency plumber sydney", "blocked drain plumber near me"]
    assert result.high_volume[0].score == 7


def test_bucket_limits():
    keywords = [kw(f"big low volume keyword {i}", 6000 + i, "low") for i in range(20)]
    keywords += [kw(f"big {i}", 2000 + i, "high") for i in range(8)]
    result = analyze_keywords(keywords)

    assert len(result.quick_wins) == 10
    assert len(result.high_volume) == 15
    assert len(result.long_tail) == 15
    assert len(result.difficult_keywords) == 5
    assert result.quick_wins[0].searches == 6019
    assert result.difficult_keywords[0].searches == 2007


def test_competition_breakdown_buckets_unknown_labels():
    breakdown = competition_breakdown(
        [kw("a", competition="low"), kw("b", competition="very high"), kw("c", competition="")]
    )
    assert breakdown == CompetitionBreakdown(low=1, medium=0, high=0, unknown=2)


def test_average_bid_needs_both_bids_and_ten_searches():
    # only the two low-competition records with a full estimate and >= 10 searches count
    result = analyze_keywords(sample_keywords())
    assert result.avg_low_bid == (5.0 + 1.5) / 2


def test_zero_low_bid_is_no_estimate():
    record = kw("cheap plumber", 800, "low", top_bid_low=0.0, top_bid_high=4.5)
    assert average_low_competition_bid([record]) == 0.0


def test_empty_working_set():
    result = analyze_keywords(sample_keywords(), FilterConfig(must_include="zzz"))

    assert result.avg_low_bid == 0
    assert result.competition_breakdown == CompetitionBreakdown(low=0, medium=0, high=0, unknown=0)
    assert result.top_keywords == []
    assert result.quick_wins == []
    assert result.new_opportunities == 0


def test_empty_collection():
    result = analyze_keywords([])
    assert result.total_keywords == 0
    assert result.currency == "AUD"
    assert result.avg_low_bid == 0.0


def test_filters_are_echoed():
    result = analyze_keywords(sample_keywords(), None)
    assert result.filters == FilterConfig(must_include="", exclude="", keyword_length="any")

    config = FilterConfig(exclude="cheap", keyword_length="2")
    assert analyze_keywords(sample_keywords(), config).filters == config


def test_analysis_is_repeatable_and_does_not_mutate_input():
    keywords = sample_keywords()
    config = FilterConfig(exclude="cheap")

    first = analyze_keywords(keywords, config)
    second = analyze_keywords(keywords, config)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()
    assert all(k.score is None for k in keywords)
