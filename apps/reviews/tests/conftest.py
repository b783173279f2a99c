import pytest
from datetime import datetime, timedelta, timezone as dt_timezone
from uuid import uuid4
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.reviews.models import Review
from apps.reviews.services.types import CriteriaRatings, ReviewSnapshot


NOW = datetime(2026, 10, 18, 12, 0, tzinfo=dt_timezone.utc)


class InMemoryReviewRepository:
    """Repository over a fixed list of snapshots."""

    def __init__(self, reviews=()):
        self.reviews = list(reviews)
        self.calls = []

    def fetch_reviews_for_contractor(self, contractor_id, filters=None):
        self.calls.append((contractor_id, filters))
        return [review for review in self.reviews if review.contractor_id == contractor_id]

    def fetch_reviews_by_reviewer(self, reviewer_id, filters=None):
        self.calls.append((reviewer_id, filters))
        return [review for review in self.reviews if review.reviewer_id == reviewer_id]

    def fetch_all_reviews(self):
        return list(self.reviews)


# =============================================================================
# Pure engine fixtures
# =============================================================================

@pytest.fixture
def now():
    """Fixed reference time for age calculations."""
    return NOW


@pytest.fixture
def contractor_id():
    return uuid4()


@pytest.fixture
def make_snapshot(contractor_id):
    """Factory for ReviewSnapshot values, aged relative to NOW."""
    def _make(
        rating=5,
        age_days=0,
        is_public=True,
        is_deleted=False,
        criteria=None,
        contractor=None,
        **kwargs
    ):
        return ReviewSnapshot(
            id=kwargs.pop('id', uuid4()),
            contractor_id=contractor or contractor_id,
            reviewer_id=kwargs.pop('reviewer_id', uuid4()),
            reviewer_name=kwargs.pop('reviewer_name', 'Tran Thi Mai'),
            project_id=kwargs.pop('project_id', uuid4()),
            rating=rating,
            criteria=criteria or CriteriaRatings(),
            is_public=is_public,
            is_deleted=is_deleted,
            created_at=kwargs.pop('created_at', NOW - timedelta(days=age_days)),
            **kwargs
        )
    return _make


@pytest.fixture
def scenario_reviews(make_snapshot):
    """Recent 5-star, old 2-star, and a hidden recent 1-star review."""
    return [
        make_snapshot(rating=5, age_days=10),
        make_snapshot(rating=2, age_days=300),
        make_snapshot(rating=1, age_days=5, is_public=False),
    ]


@pytest.fixture
def repository(scenario_reviews):
    return InMemoryReviewRepository(scenario_reviews)


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def contractor(db):
    """Create and return a contractor."""
    return User.objects.create_user(
        email='contractor@example.com',
        password='TestPass123!',
        display_name='Le Van Hung',
        role=UserRole.CONTRACTOR,
        company_name='Hung Renovations',
    )


@pytest.fixture
def homeowner(db):
    """Create and return a homeowner who writes reviews."""
    return User.objects.create_user(
        email='homeowner@example.com',
        password='TestPass123!',
        display_name='Nguyen Van An',
    )


@pytest.fixture
def contractor_client(api_client, contractor):
    """Return API client authenticated as the contractor."""
    refresh = RefreshToken.for_user(contractor)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def homeowner_client(api_client, homeowner):
    """Return API client authenticated as the homeowner."""
    refresh = RefreshToken.for_user(homeowner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def create_review(db, contractor, homeowner):
    """Factory for Review rows with a controllable creation time."""
    def _create(age_days=0, created_at=None, **fields):
        fields.setdefault('contractor', contractor)
        fields.setdefault('reviewer', homeowner)
        fields.setdefault('project_id', uuid4())
        fields.setdefault('rating', 5)
        review = Review.objects.create(**fields)
        # created_at is auto_now_add, so backdate with an update
        created_at = created_at or datetime.now(dt_timezone.utc) - timedelta(days=age_days)
        Review.objects.filter(id=review.id).update(created_at=created_at)
        review.refresh_from_db()
        return review
    return _create
