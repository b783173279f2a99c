from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .permissions import IsContractor
from .serializers import (
    ReviewListQuerySerializer,
    MonthlyStatsQuerySerializer,
    PublicReviewListSerializer,
    ContractorReviewListSerializer,
    WrittenReviewListSerializer,
    ReviewSummarySerializer,
    ContractorStatsSerializer,
    MonthlyStatSerializer,
    ContractorRatingSerializer,
    ReviewOverviewSerializer,
    ErrorResponseSerializer,
)
from .services import (
    DjangoReviewRepository,
    ListingQuery,
    ContractorNotFoundError,
    list_public_reviews,
    list_contractor_reviews,
    list_reviewer_reviews,
    get_contractor_summary,
    get_contractor_stats,
    get_contractor_rating,
    get_monthly_stats,
    get_review_overview,
)


review_repository = DjangoReviewRepository()

LISTING_PARAMETERS = [
    OpenApiParameter('rating', OpenApiTypes.INT, description='Only reviews with this rating (1-5)'),
    OpenApiParameter('from_date', OpenApiTypes.DATE, description='Created on or after this date'),
    OpenApiParameter('to_date', OpenApiTypes.DATE, description='Created on or before this date'),
    OpenApiParameter('page', OpenApiTypes.INT, description='Page number', default=1),
    OpenApiParameter('limit', OpenApiTypes.INT, description='Page size'),
    OpenApiParameter('sort_by', OpenApiTypes.STR, enum=['created_at', 'rating', 'helpful_count'], default='created_at'),
    OpenApiParameter('sort_order', OpenApiTypes.STR, enum=['asc', 'desc'], default='desc'),
]


def _not_found(error):
    return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)


@extend_schema(
    parameters=LISTING_PARAMETERS,
    responses={
        200: PublicReviewListSerializer,
        400: OpenApiTypes.OBJECT,
        404: ErrorResponseSerializer,
    },
    description="Public reviews of a contractor. Reviewer names are masked.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def contractor_reviews(request, contractor_id):
    """Public review listing for a contractor profile."""
    params = ReviewListQuerySerializer(data=request.query_params)
    params.is_valid(raise_exception=True)

    try:
        listing = list_public_reviews(
            contractor_id,
            ListingQuery(**params.validated_data),
            repository=review_repository,
        )
    except ContractorNotFoundError as e:
        return _not_found(e)

    return Response(PublicReviewListSerializer(listing).data)


@extend_schema(
    responses={200: ReviewSummarySerializer, 404: ErrorResponseSerializer},
    description="Rating summary over a contractor's public reviews.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def contractor_summary(request, contractor_id):
    """Get review summary for a contractor using service layer."""
    try:
        summary = get_contractor_summary(contractor_id, repository=review_repository)
    except ContractorNotFoundError as e:
        return _not_found(e)

    return Response(ReviewSummarySerializer(summary).data)


@extend_schema(
    responses={200: ContractorRatingSerializer, 404: ErrorResponseSerializer},
    description="Time-decayed reputation score of a contractor.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def contractor_rating(request, contractor_id):
    """Get a contractor's live reputation score."""
    try:
        rating = get_contractor_rating(contractor_id, repository=review_repository)
    except ContractorNotFoundError as e:
        return _not_found(e)

    serializer = ContractorRatingSerializer({'contractor_id': contractor_id, 'rating': rating})
    return Response(serializer.data)


@extend_schema(
    parameters=LISTING_PARAMETERS,
    responses={200: ContractorReviewListSerializer, 400: OpenApiTypes.OBJECT},
    description="All reviews the authenticated contractor received, including hidden ones.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsContractor])
def my_reviews(request):
    """Review listing for the contractor's own dashboard."""
    params = ReviewListQuerySerializer(data=request.query_params)
    params.is_valid(raise_exception=True)

    listing = list_contractor_reviews(
        request.user.id,
        ListingQuery(**params.validated_data),
        repository=review_repository,
    )
    return Response(ContractorReviewListSerializer(listing).data)


@extend_schema(
    responses={200: ContractorStatsSerializer},
    description="Review count, reputation score and response rate of the authenticated contractor.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsContractor])
def my_stats(request):
    """Get dashboard statistics for the authenticated contractor."""
    stats = get_contractor_stats(request.user.id, repository=review_repository)
    return Response(ContractorStatsSerializer(stats).data)


@extend_schema(
    parameters=[
        OpenApiParameter('months', OpenApiTypes.INT, description='Number of months before the current one', default=12),
    ],
    responses={200: MonthlyStatSerializer(many=True), 400: OpenApiTypes.OBJECT},
    description="Reviews received per calendar month, oldest first, empty months included.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsContractor])
def my_monthly_stats(request):
    """Get monthly review statistics for the authenticated contractor."""
    params = MonthlyStatsQuerySerializer(data=request.query_params)
    params.is_valid(raise_exception=True)

    stats = get_monthly_stats(
        request.user.id,
        params.validated_data['months'],
        repository=review_repository,
    )
    return Response(MonthlyStatSerializer(stats, many=True).data)


@extend_schema(
    parameters=LISTING_PARAMETERS,
    responses={200: WrittenReviewListSerializer, 400: OpenApiTypes.OBJECT},
    description="Reviews the authenticated user wrote. Deleted reviews are left out.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_written_reviews(request):
    """Review listing for the homeowner who wrote them."""
    params = ReviewListQuerySerializer(data=request.query_params)
    params.is_valid(raise_exception=True)

    listing = list_reviewer_reviews(
        request.user.id,
        ListingQuery(**params.validated_data),
        repository=review_repository,
    )
    return Response(WrittenReviewListSerializer(listing).data)


@extend_schema(
    responses={200: ReviewOverviewSerializer},
    description="Review counts, average and response rate across all contractors.",
    tags=['reviews'],
)
@api_view(['GET'])
@permission_classes([IsAdminUser])
def review_overview(request):
    """Moderation overview for staff."""
    overview = get_review_overview(repository=review_repository)
    return Response(ReviewOverviewSerializer(overview).data)
