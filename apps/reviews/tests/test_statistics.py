"""
Tests for summaries, contractor stats, the staff overview and the monthly rollup.

All tests run against an in-memory repository, no database needed.
"""

import pytest
from datetime import datetime, timezone as dt_timezone

from apps.reviews.services.statistics import (
    get_contractor_stats,
    get_contractor_summary,
    get_monthly_stats,
    get_review_overview,
    monthly_rollup,
    response_rate,
    review_overview,
    summarize_reviews,
)
from apps.reviews.services.types import CriteriaRatings
from .conftest import InMemoryReviewRepository


# ============================================================================
# SUMMARY TESTS
# ============================================================================

class TestSummarizeReviews:
    """Test aggregate statistics over a review set."""

    def test_empty_set(self):
        """Empty input gives zero counts and null criterion averages."""
        summary = summarize_reviews([])

        assert summary == {
            'total_reviews': 0,
            'average_rating': 0,
            'rating_distribution': {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
            'average_quality_rating': None,
            'average_timeliness_rating': None,
            'average_communication_rating': None,
            'average_value_rating': None,
        }

    def test_simple_average_and_distribution(self, make_snapshot):
        reviews = [
            make_snapshot(rating=5, age_days=1),
            make_snapshot(rating=4, age_days=400),
            make_snapshot(rating=4, age_days=3),
        ]

        summary = summarize_reviews(reviews)

        assert summary['total_reviews'] == 3
        assert summary['average_rating'] == 4.3
        assert summary['rating_distribution'] == {1: 0, 2: 0, 3: 0, 4: 2, 5: 1}

    def test_criteria_averaged_over_supplying_reviews_only(self, make_snapshot):
        reviews = [
            make_snapshot(criteria=CriteriaRatings(quality=5, timeliness=3)),
            make_snapshot(criteria=CriteriaRatings(quality=4)),
            make_snapshot(),
        ]

        summary = summarize_reviews(reviews)

        assert summary['average_quality_rating'] == 4.5
        assert summary['average_timeliness_rating'] == 3
        assert summary['average_communication_rating'] is None
        assert summary['average_value_rating'] is None

    def test_contractor_summary_uses_public_reviews(self, repository, contractor_id):
        """Hidden 1-star review is left out: (5 + 2) / 2."""
        summary = get_contractor_summary(contractor_id, repository=repository)

        assert summary['total_reviews'] == 2
        assert summary['average_rating'] == 3.5
        assert summary['rating_distribution'][1] == 0

    def test_contractor_summary_skips_deleted(self, make_snapshot, contractor_id):
        repository = InMemoryReviewRepository([
            make_snapshot(rating=1, is_deleted=True),
            make_snapshot(rating=4),
        ])

        summary = get_contractor_summary(contractor_id, repository=repository)

        assert summary['total_reviews'] == 1
        assert summary['average_rating'] == 4

    def test_repository_errors_propagate(self, contractor_id):
        class FailingRepository:
            def fetch_reviews_for_contractor(self, contractor_id, filters=None):
                raise ConnectionError("review store unavailable")

        with pytest.raises(ConnectionError):
            get_contractor_summary(contractor_id, repository=FailingRepository())


# ============================================================================
# CONTRACTOR STATS TESTS
# ============================================================================

class TestContractorStats:
    """Test the contractor dashboard figures."""

    def test_response_rate_empty(self):
        assert response_rate([]) == 0

    def test_response_rate_rounds_to_integer(self, make_snapshot):
        reviews = [
            make_snapshot(response='Thank you!'),
            make_snapshot(),
            make_snapshot(),
        ]

        assert response_rate(reviews) == 33

    def test_response_rate_half_up(self, make_snapshot):
        reviews = [make_snapshot(response='Thanks')] + [make_snapshot() for _ in range(7)]

        # 1 / 8 = 12.5%
        assert response_rate(reviews) == 13

    def test_response_rate_ignores_deleted_reviews(self, make_snapshot):
        reviews = [
            make_snapshot(response='Thanks'),
            make_snapshot(),
            make_snapshot(response='Sorry', is_deleted=True),
            make_snapshot(response='Noted', is_public=False),
        ]

        assert response_rate(reviews) == 67

    def test_empty_response_counts_as_answered(self, make_snapshot):
        """Only a missing response means unanswered."""
        reviews = [make_snapshot(response=''), make_snapshot()]

        assert response_rate(reviews) == 50

    def test_stats_include_hidden_reviews(self, repository, contractor_id):
        """Simple mean over 5, 2 and the hidden 1: 8 / 3."""
        stats = get_contractor_stats(contractor_id, repository=repository)

        assert stats == {'total_reviews': 3, 'average_rating': 2.7, 'response_rate': 0}

    def test_stats_average_ignores_review_age(self, make_snapshot, contractor_id):
        repository = InMemoryReviewRepository([
            make_snapshot(rating=5, age_days=1),
            make_snapshot(rating=1, age_days=900),
            make_snapshot(rating=1, age_days=3, is_deleted=True),
        ])

        stats = get_contractor_stats(contractor_id, repository=repository)

        assert stats['average_rating'] == 3

    def test_stats_for_contractor_without_reviews(self, contractor_id):
        stats = get_contractor_stats(contractor_id, repository=InMemoryReviewRepository())

        assert stats == {'total_reviews': 0, 'average_rating': 0, 'response_rate': 0}


# ============================================================================
# STAFF OVERVIEW TESTS
# ============================================================================

def _at(day, month=10, hour=12, minute=0):
    return datetime(2026, month, day, hour, minute, tzinfo=dt_timezone.utc)


class TestReviewOverview:
    """Test the platform-wide moderation figures."""

    @pytest.fixture
    def mixed_reviews(self, make_snapshot):
        return [
            make_snapshot(rating=5, created_at=_at(2), response='Thanks'),
            make_snapshot(rating=4, created_at=_at(20, month=9), is_public=False, response=''),
            make_snapshot(rating=1, created_at=_at(10), is_deleted=True, response='Sorry'),
            make_snapshot(rating=3, created_at=_at(1, hour=0)),
            make_snapshot(rating=2, created_at=_at(30, month=9, hour=23, minute=59)),
        ]

    def test_empty(self, now):
        assert review_overview([], now=now) == {
            'total_reviews': 0,
            'public_reviews': 0,
            'hidden_reviews': 0,
            'deleted_reviews': 0,
            'average_rating': 0,
            'rating_distribution': {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
            'reviews_with_responses': 0,
            'response_rate': 0,
            'reviews_this_month': 0,
        }

    def test_visibility_counts(self, mixed_reviews, now):
        overview = review_overview(mixed_reviews, now=now)

        assert overview['total_reviews'] == 5
        assert overview['public_reviews'] == 3
        assert overview['hidden_reviews'] == 1
        assert overview['deleted_reviews'] == 1

    def test_deleted_reviews_left_out_of_average_and_distribution(self, mixed_reviews, now):
        """The deleted 1-star review does not drag the average down."""
        overview = review_overview(mixed_reviews, now=now)

        assert overview['average_rating'] == 3.5
        assert overview['rating_distribution'] == {1: 0, 2: 1, 3: 1, 4: 1, 5: 1}

    def test_responses_counted_on_non_deleted_over_all_rows(self, mixed_reviews, now):
        overview = review_overview(mixed_reviews, now=now)

        assert overview['reviews_with_responses'] == 2
        assert overview['response_rate'] == 40.0

    def test_response_rate_has_one_decimal(self, make_snapshot, now):
        reviews = [make_snapshot(response='Thanks'), make_snapshot(), make_snapshot()]

        assert review_overview(reviews, now=now)['response_rate'] == 33.3

    def test_reviews_this_month_from_first_day(self, mixed_reviews, now):
        """Counts October 1st 00:00 onwards, deleted reviews included."""
        assert review_overview(mixed_reviews, now=now)['reviews_this_month'] == 3

    def test_get_review_overview_reads_every_contractor(self, make_snapshot, now):
        repository = InMemoryReviewRepository([
            make_snapshot(rating=5),
            make_snapshot(rating=3, contractor='someone-else'),
        ])

        overview = get_review_overview(repository=repository, now=now)

        assert overview['total_reviews'] == 2
        assert overview['average_rating'] == 4


# ============================================================================
# MONTHLY ROLLUP TESTS
# ============================================================================

class TestMonthlyRollup:
    """Test calendar-month bucketing with gap filling."""

    def test_empty_window_has_months_plus_one_entries(self, now):
        rollup = monthly_rollup([], months=3, now=now)

        assert rollup == [
            {'month': '2026-07', 'total_reviews': 0, 'average_rating': 0},
            {'month': '2026-08', 'total_reviews': 0, 'average_rating': 0},
            {'month': '2026-09', 'total_reviews': 0, 'average_rating': 0},
            {'month': '2026-10', 'total_reviews': 0, 'average_rating': 0},
        ]

    def test_default_window_is_twelve_months(self, now):
        rollup = monthly_rollup([], now=now)

        assert len(rollup) == 13
        assert rollup[0]['month'] == '2025-10'
        assert rollup[-1]['month'] == '2026-10'

    def test_zero_months_is_current_month_only(self, now):
        assert [entry['month'] for entry in monthly_rollup([], months=0, now=now)] == ['2026-10']

    def test_negative_months_rejected(self, now):
        with pytest.raises(ValueError):
            monthly_rollup([], months=-1, now=now)

    def test_window_crosses_year_boundary(self):
        january = datetime(2027, 1, 15, tzinfo=dt_timezone.utc)

        months = [entry['month'] for entry in monthly_rollup([], months=2, now=january)]

        assert months == ['2026-11', '2026-12', '2027-01']

    def test_reviews_bucketed_by_month(self, make_snapshot, now):
        reviews = [
            make_snapshot(rating=5, created_at=datetime(2026, 10, 2, tzinfo=dt_timezone.utc)),
            make_snapshot(rating=4, created_at=datetime(2026, 10, 17, tzinfo=dt_timezone.utc)),
            make_snapshot(rating=2, created_at=datetime(2026, 8, 31, 23, 59, tzinfo=dt_timezone.utc)),
        ]

        rollup = monthly_rollup(reviews, months=3, now=now)

        assert rollup == [
            {'month': '2026-07', 'total_reviews': 0, 'average_rating': 0},
            {'month': '2026-08', 'total_reviews': 1, 'average_rating': 2},
            {'month': '2026-09', 'total_reviews': 0, 'average_rating': 0},
            {'month': '2026-10', 'total_reviews': 2, 'average_rating': 4.5},
        ]

    def test_window_start_is_first_day_of_month(self, make_snapshot, now):
        """July 1st is inside a 3-month window ending in October, June 30th is not."""
        reviews = [
            make_snapshot(rating=3, created_at=datetime(2026, 7, 1, tzinfo=dt_timezone.utc)),
            make_snapshot(rating=1, created_at=datetime(2026, 6, 30, 23, 59, tzinfo=dt_timezone.utc)),
        ]

        rollup = monthly_rollup(reviews, months=3, now=now)

        assert rollup[0] == {'month': '2026-07', 'total_reviews': 1, 'average_rating': 3}
        assert sum(entry['total_reviews'] for entry in rollup) == 1

    def test_deleted_reviews_skipped_hidden_counted(self, make_snapshot, now):
        reviews = [
            make_snapshot(rating=5, age_days=1, is_deleted=True),
            make_snapshot(rating=3, age_days=1, is_public=False),
        ]

        rollup = monthly_rollup(reviews, months=1, now=now)

        assert rollup[-1] == {'month': '2026-10', 'total_reviews': 1, 'average_rating': 3}

    def test_get_monthly_stats_fetches_from_repository(self, contractor_id, now):
        repository = InMemoryReviewRepository()

        stats = get_monthly_stats(contractor_id, 3, repository=repository, now=now)

        assert len(stats) == 4
        assert repository.calls == [(contractor_id, None)]
