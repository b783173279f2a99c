"""
Review storage seam.

The rating engine only ever reads reviews through a ``ReviewRepository``.
Implementations must return hidden and soft-deleted rows as well: the
engine, not the storage layer, decides what each audience may see.
"""

import logging
from datetime import datetime
from typing import List, Optional, Protocol

from django.contrib.auth import get_user_model

from ..models import Review
from .exceptions import ContractorNotFoundError
from .types import CriteriaRatings, ReviewFilters, ReviewSnapshot

logger = logging.getLogger(__name__)


class ReviewRepository(Protocol):
    def fetch_reviews_for_contractor(
        self,
        contractor_id,
        filters: Optional[ReviewFilters] = None,
    ) -> List[ReviewSnapshot]:
        ...

    def fetch_reviews_by_reviewer(
        self,
        reviewer_id,
        filters: Optional[ReviewFilters] = None,
    ) -> List[ReviewSnapshot]:
        ...

    def fetch_all_reviews(self) -> List[ReviewSnapshot]:
        ...


def snapshot_from_model(review: Review) -> ReviewSnapshot:
    """Copy a Review row into an immutable ReviewSnapshot."""
    return ReviewSnapshot(
        id=review.id,
        contractor_id=review.contractor_id,
        project_id=review.project_id,
        reviewer_id=review.reviewer_id,
        reviewer_name=review.reviewer.get_display_name(),
        rating=review.rating,
        criteria=CriteriaRatings(
            quality=review.quality_rating,
            timeliness=review.timeliness_rating,
            communication=review.communication_rating,
            value=review.value_rating,
        ),
        comment=review.comment,
        images=tuple(review.images or ()),
        is_public=review.is_public,
        is_deleted=review.is_deleted,
        helpful_count=review.helpful_count,
        response=review.response,
        responded_at=review.responded_at,
        created_at=review.created_at,
    )


class DjangoReviewRepository:
    """ORM-backed repository over the ``Review`` model."""

    def _queryset(self):
        return Review.objects.select_related('reviewer')

    def _narrow(self, queryset, filters: Optional[ReviewFilters]):
        if filters is None:
            return queryset
        if filters.rating is not None:
            queryset = queryset.filter(rating=filters.rating)
        if filters.from_date is not None:
            lookup = 'created_at__gte' if isinstance(filters.from_date, datetime) else 'created_at__date__gte'
            queryset = queryset.filter(**{lookup: filters.from_date})
        if filters.to_date is not None:
            lookup = 'created_at__lte' if isinstance(filters.to_date, datetime) else 'created_at__date__lte'
            queryset = queryset.filter(**{lookup: filters.to_date})
        return queryset

    def _snapshots(self, queryset) -> List[ReviewSnapshot]:
        return [snapshot_from_model(review) for review in queryset.order_by('-created_at')]

    def fetch_reviews_for_contractor(
        self,
        contractor_id,
        filters: Optional[ReviewFilters] = None,
    ) -> List[ReviewSnapshot]:
        """
        Load every review of a contractor, hidden and deleted ones included.

        Args:
            contractor_id: Contractor UUID
            filters: Optional rating / date range narrowing

        Returns:
            List of ReviewSnapshot, newest first

        Raises:
            ContractorNotFoundError: If no user has this id
        """
        User = get_user_model()
        if not User.objects.filter(id=contractor_id).exists():
            raise ContractorNotFoundError(f"Contractor {contractor_id} not found")

        queryset = self._narrow(self._queryset().filter(contractor_id=contractor_id), filters)
        snapshots = self._snapshots(queryset)
        logger.debug("Fetched %d reviews for contractor %s", len(snapshots), contractor_id)
        return snapshots

    def fetch_reviews_by_reviewer(
        self,
        reviewer_id,
        filters: Optional[ReviewFilters] = None,
    ) -> List[ReviewSnapshot]:
        """Load every review a user wrote, newest first, deleted ones included."""
        queryset = self._narrow(self._queryset().filter(reviewer_id=reviewer_id), filters)
        snapshots = self._snapshots(queryset)
        logger.debug("Fetched %d reviews written by %s", len(snapshots), reviewer_id)
        return snapshots

    def fetch_all_reviews(self) -> List[ReviewSnapshot]:
        return self._snapshots(self._queryset())
