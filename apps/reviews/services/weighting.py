"""
Time-decay weighting for contractor ratings.

A review counts fully on the day it is written and loses influence
linearly over half a year. Old reviews never drop to zero: they keep
a floor weight of 1/180 so that a contractor with only old reviews
still has a score.
"""

import math
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

DECAY_WINDOW_DAYS = 180
SECONDS_PER_DAY = 24 * 60 * 60

_ONE_DECIMAL = Decimal('0.1')


def review_weight(age_in_days: float) -> float:
    """Weight in (0, 1] for a review that is ``age_in_days`` old."""
    return max(1, DECAY_WINDOW_DAYS - age_in_days) / DECAY_WINDOW_DAYS


def age_in_days(created_at: datetime, now: datetime) -> float:
    """Fractional days between ``created_at`` and ``now``, never negative."""
    seconds = (now - created_at).total_seconds()
    return max(0.0, seconds / SECONDS_PER_DAY)


def round_rating(value: float) -> float:
    """
    Round a rating to one decimal place, half up.

    The value is first cut to 10 decimals so float tails such as
    ``4.249999999999999`` do not decide the rounding direction.
    """
    trimmed = Decimal(repr(round(value, 10)))
    return float(trimmed.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def weighted_average_rating(reviews: Iterable[Tuple[int, float]]) -> float:
    """
    Time-decayed average of ``(rating, age_in_days)`` pairs.

    Returns 0 for an empty input. The sums are computed with
    ``math.fsum`` so the result does not depend on input order.

    Example:
        >>> weighted_average_rating([(5, 0), (3, 0)])
        4.0
    """
    products = []
    weights = []
    for rating, age in reviews:
        weight = review_weight(age)
        products.append(rating * weight)
        weights.append(weight)

    if not weights:
        return 0

    return round_rating(math.fsum(products) / math.fsum(weights))
