from django.urls import path
from . import views

app_name = 'reviews'

urlpatterns = [
    # Public contractor profile
    # GET /api/reviews/contractors/{id}/          - Public review listing
    # GET /api/reviews/contractors/{id}/summary/  - Rating summary
    # GET /api/reviews/contractors/{id}/rating/   - Time-decayed score
    path('contractors/<uuid:contractor_id>/', views.contractor_reviews, name='contractor-reviews'),
    path('contractors/<uuid:contractor_id>/summary/', views.contractor_summary, name='contractor-summary'),
    path('contractors/<uuid:contractor_id>/rating/', views.contractor_rating, name='contractor-rating'),

    # Contractor dashboard (authenticated contractor)
    path('me/', views.my_reviews, name='my-reviews'),
    path('me/stats/', views.my_stats, name='my-stats'),
    path('me/monthly-stats/', views.my_monthly_stats, name='my-monthly-stats'),

    # Reviews the authenticated user wrote
    path('me/written/', views.my_written_reviews, name='my-written-reviews'),

    # Staff
    path('overview/', views.review_overview, name='review-overview'),
]
