"""
Reviews services - Rating and aggregation engine.

This package contains the read-side operations for contractor reviews:
- Time-decayed reputation score
- Multi-criteria rating
- Public / contractor visibility
- Summaries, stats, monthly rollups and the staff overview
- Public, contractor and reviewer listings

Everything works on ReviewSnapshot values supplied by a ReviewRepository;
only DjangoReviewRepository touches the database.
"""

# Value types
from .types import (
    CriteriaRatings,
    ReviewFilters,
    ReviewSnapshot,
)

# Storage seam
from .repository import (
    ReviewRepository,
    DjangoReviewRepository,
)

# Scoring
from .weighting import (
    review_weight,
    age_in_days,
    round_rating,
    weighted_average_rating,
)
from .multi_criteria import (
    MULTI_CRITERIA_WEIGHTS,
    calculate_weighted_rating,
    overall_rating_from_criteria,
)
from .rating_aggregation import (
    calculate_contractor_rating,
    get_contractor_rating,
)

# Visibility
from .visibility import (
    is_publicly_visible,
    is_visible_to_owner,
    public_view,
    owner_view,
    hidden_reviews,
)

# Statistics
from .statistics import (
    summarize_reviews,
    response_rate,
    get_contractor_summary,
    get_contractor_stats,
    monthly_rollup,
    get_monthly_stats,
    review_overview,
    get_review_overview,
)

# Listings
from .public_listing import (
    ListingQuery,
    anonymize_name,
    most_helpful_ids,
    list_public_reviews,
    list_contractor_reviews,
    list_reviewer_reviews,
)

# Domain Exceptions
from .exceptions import (
    ReviewsServiceError,
    ContractorNotFoundError,
)

__all__ = [
    # Value types
    'CriteriaRatings',
    'ReviewFilters',
    'ReviewSnapshot',
    # Storage
    'ReviewRepository',
    'DjangoReviewRepository',
    # Scoring
    'review_weight',
    'age_in_days',
    'round_rating',
    'weighted_average_rating',
    'MULTI_CRITERIA_WEIGHTS',
    'calculate_weighted_rating',
    'overall_rating_from_criteria',
    'calculate_contractor_rating',
    'get_contractor_rating',
    # Visibility
    'is_publicly_visible',
    'is_visible_to_owner',
    'public_view',
    'owner_view',
    'hidden_reviews',
    # Statistics
    'summarize_reviews',
    'response_rate',
    'get_contractor_summary',
    'get_contractor_stats',
    'monthly_rollup',
    'get_monthly_stats',
    'review_overview',
    'get_review_overview',
    # Listings
    'ListingQuery',
    'anonymize_name',
    'most_helpful_ids',
    'list_public_reviews',
    'list_contractor_reviews',
    'list_reviewer_reviews',
    # Exceptions
    'ReviewsServiceError',
    'ContractorNotFoundError',
]
