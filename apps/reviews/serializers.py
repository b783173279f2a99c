from django.conf import settings
from rest_framework import serializers

from .services.public_listing import SORT_FIELDS, SORT_ORDERS


REVIEWS_SETTINGS = settings.REVIEWS


# =============================================================================
# Query parameter serializers
# =============================================================================

class ReviewListQuerySerializer(serializers.Serializer):
    """Query parameters of the review listings."""

    rating = serializers.IntegerField(required=False, min_value=1, max_value=5)
    from_date = serializers.DateField(required=False)
    to_date = serializers.DateField(required=False)
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    limit = serializers.IntegerField(
        required=False,
        default=REVIEWS_SETTINGS['DEFAULT_PAGE_SIZE'],
        min_value=1,
        max_value=REVIEWS_SETTINGS['MAX_PAGE_SIZE'],
    )
    sort_by = serializers.ChoiceField(choices=SORT_FIELDS, required=False, default='created_at')
    sort_order = serializers.ChoiceField(choices=SORT_ORDERS, required=False, default='desc')

    def validate(self, attrs):
        from_date = attrs.get('from_date')
        to_date = attrs.get('to_date')
        if from_date and to_date and from_date > to_date:
            raise serializers.ValidationError("from_date must not be after to_date")
        return attrs


class MonthlyStatsQuerySerializer(serializers.Serializer):
    months = serializers.IntegerField(
        required=False,
        default=REVIEWS_SETTINGS['DEFAULT_MONTHLY_WINDOW'],
        min_value=1,
        max_value=REVIEWS_SETTINGS['MAX_MONTHLY_WINDOW'],
    )


# =============================================================================
# Response serializers
# =============================================================================

class PublicReviewSerializer(serializers.Serializer):
    """Review as shown on a contractor's public profile."""

    id = serializers.UUIDField()
    project_id = serializers.UUIDField()
    reviewer_name = serializers.CharField(help_text="Masked reviewer name")
    rating = serializers.IntegerField()
    quality_rating = serializers.IntegerField(allow_null=True)
    timeliness_rating = serializers.IntegerField(allow_null=True)
    communication_rating = serializers.IntegerField(allow_null=True)
    value_rating = serializers.IntegerField(allow_null=True)
    comment = serializers.CharField(allow_null=True)
    images = serializers.ListField()
    helpful_count = serializers.IntegerField()
    is_most_helpful = serializers.BooleanField()
    response = serializers.CharField(allow_null=True)
    responded_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class ContractorReviewSerializer(PublicReviewSerializer):
    """Review as seen by the reviewed contractor."""

    is_public = serializers.BooleanField()


class WrittenReviewSerializer(serializers.Serializer):
    """Review as seen by the homeowner who wrote it."""

    id = serializers.UUIDField()
    project_id = serializers.UUIDField()
    contractor_id = serializers.UUIDField()
    rating = serializers.IntegerField()
    quality_rating = serializers.IntegerField(allow_null=True)
    timeliness_rating = serializers.IntegerField(allow_null=True)
    communication_rating = serializers.IntegerField(allow_null=True)
    value_rating = serializers.IntegerField(allow_null=True)
    comment = serializers.CharField(allow_null=True)
    images = serializers.ListField()
    helpful_count = serializers.IntegerField()
    is_public = serializers.BooleanField()
    response = serializers.CharField(allow_null=True)
    responded_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class ListingMetaSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    total_pages = serializers.IntegerField()


class PublicReviewListSerializer(serializers.Serializer):
    data = PublicReviewSerializer(many=True)
    meta = ListingMetaSerializer()


class ContractorReviewListSerializer(serializers.Serializer):
    data = ContractorReviewSerializer(many=True)
    meta = ListingMetaSerializer()


class WrittenReviewListSerializer(serializers.Serializer):
    data = WrittenReviewSerializer(many=True)
    meta = ListingMetaSerializer()


class ReviewSummarySerializer(serializers.Serializer):
    """Summary of a contractor's public reviews."""

    total_reviews = serializers.IntegerField()
    average_rating = serializers.FloatField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField())
    average_quality_rating = serializers.FloatField(allow_null=True)
    average_timeliness_rating = serializers.FloatField(allow_null=True)
    average_communication_rating = serializers.FloatField(allow_null=True)
    average_value_rating = serializers.FloatField(allow_null=True)


class ContractorStatsSerializer(serializers.Serializer):
    total_reviews = serializers.IntegerField()
    average_rating = serializers.FloatField()
    response_rate = serializers.IntegerField(help_text="Percentage of reviews answered (0-100)")


class MonthlyStatSerializer(serializers.Serializer):
    month = serializers.CharField(help_text="YYYY-MM")
    total_reviews = serializers.IntegerField()
    average_rating = serializers.FloatField()


class ContractorRatingSerializer(serializers.Serializer):
    contractor_id = serializers.UUIDField()
    rating = serializers.FloatField(help_text="Time-decayed average rating")


class ReviewOverviewSerializer(serializers.Serializer):
    """Moderation figures across every contractor."""

    total_reviews = serializers.IntegerField()
    public_reviews = serializers.IntegerField()
    hidden_reviews = serializers.IntegerField()
    deleted_reviews = serializers.IntegerField()
    average_rating = serializers.FloatField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField())
    reviews_with_responses = serializers.IntegerField()
    response_rate = serializers.FloatField(help_text="Percentage of all reviews answered, 1 decimal")
    reviews_this_month = serializers.IntegerField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
