from __future__ import annotations

from .models import KeywordRecord
from .rules import COMPETITION_POINTS, VOLUME_FLOOR_POINTS, VOLUME_POINTS


def volume_points(searches: int) -> int:
    for threshold, points in VOLUME_POINTS:
        if searches >= threshold:
            return points
    return VOLUME_FLOOR_POINTS


def competition_points(competition: str) -> int:
    # lower competition scores higher; unknown labels score nothing
    return COMPETITION_POINTS.get(competition, 0)


def score_keyword(record: KeywordRecord) -> int:
    return volume_points(record.searches) + competition_points(record.competition)
