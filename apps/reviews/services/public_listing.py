"""
Review listings for contractor profile pages and for reviewers.

Builds on the pure aggregation helpers:

1. Visibility (public, or the contractor's own view)
2. Optional rating and date range filters
3. Sorting and pagination
4. "Most helpful" marking and reviewer name masking

Masking and marking only happen here, so the aggregation helpers stay
usable for score recomputation outside of listings.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .repository import ReviewRepository
from .types import ReviewSnapshot
from .visibility import owner_view, public_view

logger = logging.getLogger(__name__)

SORT_FIELDS = ('created_at', 'rating', 'helpful_count')
SORT_ORDERS = ('asc', 'desc')

MOST_HELPFUL_THRESHOLD = 3
MOST_HELPFUL_LIMIT = 3


@dataclass(frozen=True)
class ListingQuery:
    rating: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    page: int = 1
    limit: int = 10
    sort_by: str = 'created_at'
    sort_order: str = 'desc'


def _on_or_after(created_at: datetime, bound) -> bool:
    if isinstance(bound, datetime):
        return created_at >= bound
    return created_at.date() >= bound


def _on_or_before(created_at: datetime, bound) -> bool:
    if isinstance(bound, datetime):
        return created_at <= bound
    return created_at.date() <= bound


def apply_filters(reviews: Iterable[ReviewSnapshot], query: ListingQuery) -> List[ReviewSnapshot]:
    """Keep reviews matching the exact rating and inclusive date range."""
    result = []
    for review in reviews:
        if query.rating is not None and review.rating != query.rating:
            continue
        if query.from_date is not None and not _on_or_after(review.created_at, query.from_date):
            continue
        if query.to_date is not None and not _on_or_before(review.created_at, query.to_date):
            continue
        result.append(review)
    return result


def sort_reviews(
    reviews: Iterable[ReviewSnapshot],
    sort_by: str = 'created_at',
    sort_order: str = 'desc',
) -> List[ReviewSnapshot]:
    """Stable sort; reviews with equal keys keep their input order."""
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Cannot sort reviews by '{sort_by}'")
    if sort_order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order '{sort_order}'")
    return sorted(
        reviews,
        key=lambda review: getattr(review, sort_by),
        reverse=sort_order == 'desc',
    )


def paginate(reviews: Sequence, page: int, limit: int) -> Tuple[list, dict]:
    """
    Slice one page out of ``reviews``.

    Returns:
        (page_items, meta) where meta holds total, page, limit, total_pages

    Raises:
        ValueError: If page or limit is below 1
    """
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be at least 1")

    total = len(reviews)
    offset = (page - 1) * limit
    meta = {
        'total': total,
        'page': page,
        'limit': limit,
        'total_pages': math.ceil(total / limit),
    }
    return list(reviews[offset:offset + limit]), meta


def most_helpful_ids(reviews: Iterable[ReviewSnapshot]) -> Set:
    """
    Ids of the top public reviews by helpful votes.

    Only public reviews with at least MOST_HELPFUL_THRESHOLD votes qualify;
    at most MOST_HELPFUL_LIMIT are picked, ties going to the newer review.
    """
    candidates = [
        review for review in public_view(reviews)
        if review.helpful_count >= MOST_HELPFUL_THRESHOLD
    ]
    candidates.sort(key=lambda review: (review.helpful_count, review.created_at), reverse=True)
    return {review.id for review in candidates[:MOST_HELPFUL_LIMIT]}


def anonymize_name(name: Optional[str]) -> str:
    """
    Mask a reviewer's name for public display.

    Example:
        >>> anonymize_name('Nguyen Van An')
        'Nguyen V. A.'
        >>> anonymize_name('Minh')
        'M***'
    """
    parts = (name or '').split()
    if not parts:
        return 'Anonymous'
    if len(parts) == 1:
        return f'{parts[0][0]}***'
    initials = ' '.join(f'{part[0]}.' for part in parts[1:])
    return f'{parts[0]} {initials}'


def to_public_review(review: ReviewSnapshot, *, most_helpful: bool = False) -> dict:
    """Payload for one review; carries no reviewer id and no raw name."""
    criteria = review.criteria
    return {
        'id': review.id,
        'project_id': review.project_id,
        'reviewer_name': anonymize_name(review.reviewer_name),
        'rating': review.rating,
        'quality_rating': criteria.quality,
        'timeliness_rating': criteria.timeliness,
        'communication_rating': criteria.communication,
        'value_rating': criteria.value,
        'comment': review.comment,
        'images': list(review.images),
        'helpful_count': review.helpful_count,
        'is_most_helpful': most_helpful,
        'response': review.response,
        'responded_at': review.responded_at,
        'created_at': review.created_at,
    }


def _build_listing(visible: List[ReviewSnapshot], all_reviews, query: ListingQuery, owner: bool) -> dict:
    filtered = apply_filters(visible, query)
    ordered = sort_reviews(filtered, query.sort_by, query.sort_order)
    page_items, meta = paginate(ordered, query.page, query.limit)

    helpful = most_helpful_ids(all_reviews)
    data = []
    for review in page_items:
        item = to_public_review(review, most_helpful=review.id in helpful)
        if owner:
            item['is_public'] = review.is_public is True
        data.append(item)
    return {'data': data, 'meta': meta}


def list_public_reviews(
    contractor_id,
    query: Optional[ListingQuery] = None,
    *,
    repository: ReviewRepository,
) -> dict:
    """
    Public, paginated review listing of a contractor.

    Args:
        contractor_id: Contractor whose reviews are listed
        query: Filters, sorting and pagination (defaults to newest first)
        repository: Review source

    Returns:
        {'data': [public review dicts], 'meta': {total, page, limit, total_pages}}
    """
    query = query or ListingQuery()
    reviews = repository.fetch_reviews_for_contractor(contractor_id)
    listing = _build_listing(public_view(reviews), reviews, query, owner=False)
    logger.debug(
        "Public listing for contractor %s: page %d, %d of %d reviews",
        contractor_id, query.page, len(listing['data']), listing['meta']['total'],
    )
    return listing


def list_contractor_reviews(
    contractor_id,
    query: Optional[ListingQuery] = None,
    *,
    repository: ReviewRepository,
) -> dict:
    """Same listing as seen by the contractor: hidden reviews included and flagged."""
    query = query or ListingQuery()
    reviews = repository.fetch_reviews_for_contractor(contractor_id)
    return _build_listing(owner_view(reviews), reviews, query, owner=True)


def to_written_review(review: ReviewSnapshot) -> dict:
    """Payload for a review seen by the homeowner who wrote it."""
    criteria = review.criteria
    return {
        'id': review.id,
        'project_id': review.project_id,
        'contractor_id': review.contractor_id,
        'rating': review.rating,
        'quality_rating': criteria.quality,
        'timeliness_rating': criteria.timeliness,
        'communication_rating': criteria.communication,
        'value_rating': criteria.value,
        'comment': review.comment,
        'images': list(review.images),
        'helpful_count': review.helpful_count,
        'is_public': review.is_public is True,
        'response': review.response,
        'responded_at': review.responded_at,
        'created_at': review.created_at,
    }


def list_reviewer_reviews(
    reviewer_id,
    query: Optional[ListingQuery] = None,
    *,
    repository: ReviewRepository,
) -> dict:
    """
    Reviews a homeowner wrote, across all contractors.

    Deleted reviews are left out; hidden ones stay, flagged by ``is_public``.

    Returns:
        {'data': [written review dicts], 'meta': {total, page, limit, total_pages}}
    """
    query = query or ListingQuery()
    reviews = owner_view(repository.fetch_reviews_by_reviewer(reviewer_id))
    ordered = sort_reviews(apply_filters(reviews, query), query.sort_by, query.sort_order)
    page_items, meta = paginate(ordered, query.page, query.limit)
    return {'data': [to_written_review(review) for review in page_items], 'meta': meta}
