# ==========================================
# apps/reviews/models.py
# ==========================================

from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
import uuid


RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


class Review(models.Model):
    """Homeowner review of the contractor who delivered a project."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project_id = models.UUIDField(db_index=True)
    contractor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='received_reviews')
    reviewer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='written_reviews')
    rating = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    quality_rating = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    timeliness_rating = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    communication_rating = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    value_rating = models.PositiveSmallIntegerField(null=True, blank=True, validators=RATING_VALIDATORS)
    comment = models.TextField(null=True, blank=True)
    images = models.JSONField(default=list, blank=True)
    is_public = models.BooleanField(default=True)
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    helpful_count = models.PositiveIntegerField(default=0)
    response = models.TextField(null=True, blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'contractor_reviews'
        unique_together = [['project_id', 'reviewer']]
        indexes = [
            models.Index(fields=['contractor', 'is_deleted', 'is_public'], name='reviews_visibility_idx'),
            models.Index(fields=['contractor', 'created_at'], name='reviews_contractor_date_idx'),
            models.Index(fields=['created_at'], name='reviews_created_at_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.reviewer.get_display_name()} -> {self.contractor.get_display_name()} ({self.rating}★)"
