"""Multi-criteria rating: quality, timeliness, communication and value."""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional, Union

from .types import CriteriaRatings
from .weighting import round_rating


# Must sum to 1.0. Timeliness and value carry the same weight.
MULTI_CRITERIA_WEIGHTS = {
    'quality': 0.30,
    'timeliness': 0.25,
    'communication': 0.20,
    'value': 0.25,
}


def calculate_weighted_rating(
    criteria: Union[CriteriaRatings, Mapping],
    weights: Mapping[str, float] = MULTI_CRITERIA_WEIGHTS,
) -> Optional[float]:
    """
    Combine the present sub-ratings into a single score.

    Weights of missing criteria are dropped and the remaining ones are
    rescaled to sum to 1, so a review rating only communication gets its
    communication score back unchanged.

    Args:
        criteria: CriteriaRatings, or a mapping keyed by criterion name
            (``quality``) or model field name (``quality_rating``)
        weights: Weight per criterion name

    Returns:
        Score rounded to 1 decimal, or None when no criterion is present

    Example:
        >>> calculate_weighted_rating({'quality': 5, 'value': 3})
        4.1
    """
    if not isinstance(criteria, CriteriaRatings):
        criteria = CriteriaRatings.from_mapping(criteria)

    present = criteria.present()
    if not present:
        return None

    total_weight = math.fsum(weights[name] for name, _ in present)
    score = math.fsum(rating * (weights[name] / total_weight) for name, rating in present)
    return round_rating(score)


def overall_rating_from_criteria(
    criteria: Union[CriteriaRatings, Mapping],
    fallback: int,
) -> int:
    """
    Overall star rating to store for a review.

    When sub-ratings are given, the weighted score rounded half up wins
    over the star rating the reviewer picked; otherwise ``fallback`` is kept.
    """
    weighted = calculate_weighted_rating(criteria)
    if weighted is None:
        return fallback
    return int(Decimal(str(weighted)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
