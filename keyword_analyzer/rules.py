"""
Deterministic parsing and analysis rules.

Google Ads Keyword Planner exports are the only supported input; the
constants below describe that format and the thresholds used to rank it.
"""

# Candidate encodings, tried in order. Keyword Planner exports default to UTF-16LE.
CANDIDATE_ENCODINGS = ("utf-16-le", "utf-8-sig")
DELIMITERS = ("\t", ",")  # tab wins ties
ENCODING_SNIFF_BYTES = 64 * 1024  # prefix handed to charset-normalizer for the best-guess label

PREAMBLE_LINES = 2  # report title + date range
HEADER_LINE_INDEX = PREAMBLE_LINES

KEYWORD_COLUMN = "Keyword"
SEARCHES_COLUMN = "Avg. monthly searches"
IN_ACCOUNT_COLUMN = "In account?"
COMPETITION_COLUMN = "Competition"
COMPETITION_INDEX_COLUMN = "Competition (indexed value)"
CURRENCY_COLUMN = "Currency"
BID_LOW_COLUMN = "Top of page bid (low range)"
BID_HIGH_COLUMN = "Top of page bid (high range)"

IN_ACCOUNT_MARKERS = ("Y", "Yes")
DEFAULT_CURRENCY = "AUD"
COMPETITION_LEVELS = ("low", "medium", "high")

KEYWORD_LENGTH_CHOICES = ("any", "1", "2", "3", "4", "5", "6")
OPEN_ENDED_LENGTH = 6  # "6" means six words or more

# Scoring: (minimum searches, points), highest threshold first.
VOLUME_POINTS = ((1000, 5), (500, 4), (100, 3), (50, 2))
VOLUME_FLOOR_POINTS = 1
COMPETITION_POINTS = {"low": 3, "medium": 2, "high": 1}
MIN_SCORE = VOLUME_FLOOR_POINTS
MAX_SCORE = VOLUME_POINTS[0][1] + max(COMPETITION_POINTS.values())

TOP_KEYWORDS_LIMIT = 25
QUICK_WIN_MIN_SEARCHES = 500
QUICK_WINS_LIMIT = 10
DIFFICULT_MIN_SEARCHES = 1000
DIFFICULT_LIMIT = 5
HIGH_VOLUME_MIN_SEARCHES = 5000
HIGH_VOLUME_LIMIT = 15
LONG_TAIL_MIN_WORDS = 3
LONG_TAIL_MIN_SEARCHES = 100
LONG_TAIL_LIMIT = 15
BID_AVERAGE_MIN_SEARCHES = 10

BUDGET_CLICKS_PER_DAY = 50
