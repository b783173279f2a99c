from django.contrib import admin
from .models import Review
from .services import DjangoReviewRepository, get_contractor_rating


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for contractor reviews."""

    list_display = [
        'get_contractor_name',
        'reviewer',
        'rating',
        'is_public',
        'is_deleted',
        'helpful_count',
        'created_at'
    ]
    list_filter = [
        'rating',
        'is_public',
        'is_deleted',
        'created_at',
    ]
    search_fields = [
        'contractor__email',
        'contractor__company_name',
        'reviewer__email',
        'comment',
        'response',
    ]
    readonly_fields = ['created_at', 'updated_at', 'helpful_count']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('project_id', 'contractor', 'reviewer', 'rating')
        }),
        ('Detailed Ratings', {
            'fields': (
                'quality_rating',
                'timeliness_rating',
                'communication_rating',
                'value_rating',
            ),
            'classes': ('collapse',)
        }),
        ('Review Content', {
            'fields': ('comment', 'images', 'helpful_count')
        }),
        ('Contractor Response', {
            'fields': ('response', 'responded_at'),
        }),
        ('Moderation', {
            'fields': ('is_public', 'is_deleted', 'deleted_at'),
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_contractor_name(self, obj):
        """Display contractor name in list."""
        return obj.contractor.company_name or obj.contractor.get_display_name()
    get_contractor_name.short_description = 'Contractor'
    get_contractor_name.admin_order_field = 'contractor__company_name'

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('contractor', 'reviewer')

    actions = ['hide_reviews', 'publish_reviews', 'show_contractor_ratings']

    @admin.action(description='Hide selected reviews from public listings')
    def hide_reviews(self, request, queryset):
        count = queryset.update(is_public=False)
        self.message_user(request, f'Hid {count} review(s).')

    @admin.action(description='Publish selected reviews')
    def publish_reviews(self, request, queryset):
        count = queryset.update(is_public=True)
        self.message_user(request, f'Published {count} review(s).')

    @admin.action(description='Show current rating of affected contractors')
    def show_contractor_ratings(self, request, queryset):
        """Recompute the time-decayed rating of each contractor in the selection."""
        repository = DjangoReviewRepository()
        contractor_ids = set(queryset.values_list('contractor_id', flat=True))
        for contractor_id in contractor_ids:
            rating = get_contractor_rating(contractor_id, repository=repository)
            self.message_user(request, f'Contractor {contractor_id}: {rating}')
