"""
Lead scoring

A lead's score is the sum of five independent point tables (budget, days until the
event, guest count, acquisition source, engagement), clamped to 0-100. Absent inputs
contribute nothing, so an empty lead scores 0.
"""

import re
from datetime import date, datetime
from typing import Optional, Union

MAX_SCORE = 100
HOT_LEAD_THRESHOLD = 70
MEDIUM_LEAD_THRESHOLD = 40

# (minimum, points), checked top-down
BUDGET_TIERS = [
    (500000, 30),
    (300000, 25),
    (150000, 20),
    (75000, 15),
    (30000, 10),
]
BUDGET_FLOOR_POINTS = 5

# (maximum days out, points), checked top-down
DATE_TIERS = [
    (30, 20),
    (60, 18),
    (90, 15),
    (180, 12),
    (365, 8),
]
DATE_FAR_POINTS = 5

GUEST_TIERS = [
    (500, 15),
    (300, 12),
    (150, 10),
    (75, 7),
    (30, 5),
]
GUEST_FLOOR_POINTS = 3

SOURCE_POINTS = {
    "referral": 15,
    "website": 12,
    "instagram": 10,
    "facebook": 8,
    "google": 10,
    "email": 7,
    "phone": 12,
    "walkin": 13,
    "other": 5,
}
UNKNOWN_SOURCE_POINTS = 5

ENGAGED_POINTS = 20
NOT_ENGAGED_POINTS = 10

SCORE_COLORS = {
    "high": "text-green-600 bg-green-50",
    "medium": "text-yellow-600 bg-yellow-50",
    "low": "text-red-600 bg-red-50",
}

LAKH = 100000

DateInput = Union[date, datetime, str, None]


def budget_points(budget: Optional[float]) -> int:
    if not budget:
        return 0
    for minimum, points in BUDGET_TIERS:
        if budget >= minimum:
            return points
    return BUDGET_FLOOR_POINTS


def _as_date(value: DateInput) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def date_points(event_date: DateInput, today: Optional[date] = None) -> int:
    target = _as_date(event_date)
    if target is None:
        return 0

    days_until = (target - (today or date.today())).days
    if days_until < 0:
        return 0
    for maximum, points in DATE_TIERS:
        if days_until <= maximum:
            return points
    return DATE_FAR_POINTS


def guest_points(guest_count: Optional[int]) -> int:
    if not guest_count:
        return 0
    for minimum, points in GUEST_TIERS:
        if guest_count >= minimum:
            return points
    return GUEST_FLOOR_POINTS


def source_points(source: Optional[str]) -> int:
    if not source:
        return 0
    return SOURCE_POINTS.get(source.strip().lower(), UNKNOWN_SOURCE_POINTS)


def engagement_points(has_engaged: Optional[bool]) -> int:
    if has_engaged is None:
        return 0
    return ENGAGED_POINTS if has_engaged else NOT_ENGAGED_POINTS


def calculate_lead_score(
    budget: Optional[float] = None,
    event_date: DateInput = None,
    guest_count: Optional[int] = None,
    source: Optional[str] = None,
    has_engaged: Optional[bool] = None,
    today: Optional[date] = None,
) -> int:
    """
    Score a lead from 0 to 100.

    Args:
        budget: Budget in currency units
        event_date: date, datetime or ISO-8601 string; past dates score 0
        guest_count: Expected number of guests
        source: Acquisition channel, case-insensitive; unknown channels score 5
        has_engaged: True once the lead has responded, False if not yet, None if unknown
        today: Reference date for the proximity tier (defaults to the current date)
    """
    score = (
        budget_points(budget)
        + date_points(event_date, today)
        + guest_points(guest_count)
        + source_points(source)
        + engagement_points(has_engaged)
    )
    return max(0, min(MAX_SCORE, score))


def get_score_category(score: int) -> str:
    if score >= HOT_LEAD_THRESHOLD:
        return "high"
    if score >= MEDIUM_LEAD_THRESHOLD:
        return "medium"
    return "low"


def get_score_color(score: int) -> str:
    return SCORE_COLORS[get_score_category(score)]


def is_hot_lead(score: int) -> bool:
    return score >= HOT_LEAD_THRESHOLD


def parse_budget_range(budget_range: Optional[str]) -> int:
    """'5-10 lakhs' -> 500000. Uses the first number in the text, read as lakhs."""
    if not budget_range:
        return 0
    match = re.search(r"\d+", budget_range)
    if not match:
        return 0
    return int(match.group()) * LAKH
