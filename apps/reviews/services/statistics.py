"""Statistics service - Review summaries, contractor stats, staff overview and monthly rollups."""

import logging
import math
from collections import defaultdict
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence

from django.utils import timezone

from .repository import ReviewRepository
from .types import CRITERIA, ReviewSnapshot
from .visibility import hidden_reviews, owner_view, public_view
from .weighting import round_rating

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_WINDOW = 12


def _mean(values: Sequence[int]) -> Optional[float]:
    if not values:
        return None
    return round_rating(math.fsum(values) / len(values))


def summarize_reviews(reviews: Sequence[ReviewSnapshot]) -> dict:
    """
    Aggregate statistics over an already filtered set of reviews.

    The caller decides visibility; every review passed in is counted.

    Args:
        reviews: Reviews to summarize

    Returns:
        Dictionary with:
        - total_reviews: int
        - average_rating: float - Simple mean, 1 decimal, 0 when empty
        - rating_distribution: dict - Count for each rating (1-5)
        - average_quality_rating, average_timeliness_rating,
          average_communication_rating, average_value_rating:
          mean over reviews that supplied the criterion, None if none did

    Example:
        >>> summary = summarize_reviews(reviews)
        >>> summary['rating_distribution']
        {1: 0, 2: 1, 3: 0, 4: 0, 5: 1}
    """
    rating_distribution = {rating: 0 for rating in range(1, 6)}
    criterion_values = {name: [] for name in CRITERIA}

    for review in reviews:
        rating_distribution[review.rating] = rating_distribution.get(review.rating, 0) + 1
        for name, value in review.criteria.present():
            criterion_values[name].append(value)

    summary = {
        'total_reviews': len(reviews),
        'average_rating': _mean([review.rating for review in reviews]) or 0,
        'rating_distribution': rating_distribution,
    }
    for name in CRITERIA:
        summary[f'average_{name}_rating'] = _mean(criterion_values[name])
    return summary


def response_rate(reviews: Iterable[ReviewSnapshot]) -> int:
    """Percentage (0-100) of non-deleted reviews that carry a response."""
    visible = owner_view(reviews)
    if not visible:
        return 0
    answered = sum(1 for review in visible if review.response is not None)
    percentage = Decimal(answered * 100) / Decimal(len(visible))
    return int(percentage.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def review_overview(
    reviews: Sequence[ReviewSnapshot],
    *,
    now: Optional[datetime] = None,
) -> dict:
    """
    Platform-wide moderation figures over every review row.

    Args:
        reviews: All reviews, hidden and soft-deleted ones included
        now: Reference time for the current month, defaults to timezone.now()

    Returns:
        Dictionary with:
        - total_reviews: int - Every row, deleted ones included
        - public_reviews, hidden_reviews, deleted_reviews: int
        - average_rating: float - Simple mean over non-deleted rows, 0 when none
        - rating_distribution: dict - Count for each rating (1-5), non-deleted rows
        - reviews_with_responses: int - Non-deleted rows with a response
        - response_rate: float - reviews_with_responses / total_reviews as a
          percentage with 1 decimal
        - reviews_this_month: int - Rows created since the 1st of the month
    """
    now = now or timezone.now()
    start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    visible = owner_view(reviews)
    rating_distribution = {rating: 0 for rating in range(1, 6)}
    for review in visible:
        rating_distribution[review.rating] = rating_distribution.get(review.rating, 0) + 1

    total = len(reviews)
    answered = sum(1 for review in visible if review.response is not None)

    return {
        'total_reviews': total,
        'public_reviews': len(public_view(reviews)),
        'hidden_reviews': len(hidden_reviews(reviews)),
        'deleted_reviews': sum(1 for review in reviews if review.is_deleted is True),
        'average_rating': _mean([review.rating for review in visible]) or 0,
        'rating_distribution': rating_distribution,
        'reviews_with_responses': answered,
        'response_rate': round_rating(answered * 100 / total) if total else 0,
        'reviews_this_month': sum(1 for review in reviews if review.created_at >= start_of_month),
    }


def get_review_overview(
    *,
    repository: ReviewRepository,
    now: Optional[datetime] = None,
) -> dict:
    """Moderation overview across all contractors, for staff."""
    reviews = repository.fetch_all_reviews()
    overview = review_overview(reviews, now=now)
    logger.debug(
        "Review overview: %d reviews, %d deleted",
        overview['total_reviews'], overview['deleted_reviews'],
    )
    return overview


def get_contractor_summary(contractor_id, *, repository: ReviewRepository) -> dict:
    """
    Public review summary for a contractor's profile page.

    Only reviews visible to the public are counted.

    Raises:
        Whatever the repository raises, unchanged
    """
    reviews = public_view(repository.fetch_reviews_for_contractor(contractor_id))
    summary = summarize_reviews(reviews)
    logger.debug(
        "Summary for contractor %s: %d reviews, average %s",
        contractor_id, summary['total_reviews'], summary['average_rating'],
    )
    return summary


def get_contractor_stats(contractor_id, *, repository: ReviewRepository) -> dict:
    """
    Dashboard figures for the contractor themselves.

    Counts every non-deleted review, hidden ones included. The average is
    the simple mean over those reviews; the time-decayed score is served
    by get_contractor_rating.

    Returns:
        Dictionary with total_reviews, average_rating, response_rate
    """
    reviews = owner_view(repository.fetch_reviews_for_contractor(contractor_id))
    return {
        'total_reviews': len(reviews),
        'average_rating': _mean([review.rating for review in reviews]) or 0,
        'response_rate': response_rate(reviews),
    }


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def monthly_rollup(
    reviews: Iterable[ReviewSnapshot],
    *,
    months: int = DEFAULT_MONTHLY_WINDOW,
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Bucket reviews into calendar months over a trailing window.

    The window starts on the first day of the month ``months`` months
    before ``now`` and ends with the current month, so the result always
    has ``months + 1`` entries, oldest first. Months without reviews are
    reported with zero counts.

    Args:
        reviews: Reviews of one contractor (deleted ones are skipped)
        months: Number of full months before the current one
        now: Reference time, defaults to timezone.now()

    Returns:
        List of {month: 'YYYY-MM', total_reviews, average_rating}

    Raises:
        ValueError: If months is negative
    """
    if months < 0:
        raise ValueError("months must be zero or positive")

    now = now or timezone.now()
    start_year, start_month = _shift_month(now.year, now.month, -months)
    start = now.replace(
        year=start_year, month=start_month, day=1,
        hour=0, minute=0, second=0, microsecond=0,
    )

    buckets = defaultdict(list)
    for review in owner_view(reviews):
        created_at = review.created_at
        if created_at.tzinfo is not None and now.tzinfo is not None:
            created_at = created_at.astimezone(now.tzinfo)
        if created_at >= start:
            buckets[created_at.strftime('%Y-%m')].append(review.rating)

    rollup = []
    for offset in range(months + 1):
        year, month = _shift_month(start_year, start_month, offset)
        key = f'{year:04d}-{month:02d}'
        ratings = buckets.get(key, [])
        rollup.append({
            'month': key,
            'total_reviews': len(ratings),
            'average_rating': _mean(ratings) or 0,
        })
    return rollup


def get_monthly_stats(
    contractor_id,
    months: int = DEFAULT_MONTHLY_WINDOW,
    *,
    repository: ReviewRepository,
    now: Optional[datetime] = None,
) -> List[dict]:
    """Monthly review counts and averages for a contractor's dashboard."""
    reviews = repository.fetch_reviews_for_contractor(contractor_id)
    return monthly_rollup(reviews, months=months, now=now)
