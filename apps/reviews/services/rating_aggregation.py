"""Contractor reputation score, recomputed whenever a review changes."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from django.utils import timezone

from .repository import ReviewRepository
from .types import ReviewSnapshot
from .visibility import owner_view
from .weighting import age_in_days, weighted_average_rating

logger = logging.getLogger(__name__)


def calculate_contractor_rating(
    reviews: Iterable[ReviewSnapshot],
    *,
    now: Optional[datetime] = None,
) -> float:
    """
    Time-decayed average rating over a contractor's non-deleted reviews.

    Hidden reviews still count: moderation hides the text, not the score.

    Args:
        reviews: Reviews of one contractor
        now: Reference time for review ages, defaults to timezone.now()

    Returns:
        Rating rounded to 1 decimal, 0 when there are no reviews
    """
    now = now or timezone.now()
    return weighted_average_rating(
        (review.rating, age_in_days(review.created_at, now))
        for review in owner_view(reviews)
    )


def get_contractor_rating(
    contractor_id,
    *,
    repository: ReviewRepository,
    now: Optional[datetime] = None,
) -> float:
    """
    Fetch a contractor's reviews and compute their live reputation score.

    Intended to run after every review create, update or delete. Storing
    the result is left to the caller.
    """
    reviews = repository.fetch_reviews_for_contractor(contractor_id)
    rating = calculate_contractor_rating(reviews, now=now)
    logger.debug("Recomputed rating for contractor %s: %s", contractor_id, rating)
    return rating
