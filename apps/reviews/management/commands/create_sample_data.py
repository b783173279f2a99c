"""
Management command to create sample data for trying out the reviews API.

Usage:
    python manage.py create_sample_data [--clear] [--seed 42]

This creates:
- 1 admin, 3 contractors and 6 homeowners
- Reviews spread over the last 18 months, some hidden, some soft-deleted,
  some answered by the contractor
"""

import random
import uuid
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User, UserRole
from apps.reviews.models import Review
from apps.reviews.services import (
    CriteriaRatings,
    DjangoReviewRepository,
    get_contractor_rating,
    overall_rating_from_criteria,
)


CONTRACTORS = [
    ('hung@example.com', 'Le Van Hung', 'Hung Renovations'),
    ('phuong@example.com', 'Do Thi Phuong', 'Phuong Electric'),
    ('khoa@example.com', 'Vo Minh Khoa', 'Khoa Roofing & Gutters'),
]

HOMEOWNERS = [
    ('an@example.com', 'Nguyen Van An'),
    ('mai@example.com', 'Tran Thi Mai'),
    ('duc@example.com', 'Pham Minh Duc'),
    ('hoa@example.com', 'Le Thi Hoa'),
    ('binh@example.com', 'Binh'),
    ('quang@example.com', ''),
]

COMMENTS = [
    'Finished on time and left the site spotless.',
    'Good work but communication could be better.',
    'Took twice as long as quoted.',
    'Fair price, would hire again.',
    'Had to call three times before anyone showed up.',
    None,
]

RESPONSES = [
    'Thank you for the kind words!',
    'Sorry about the delay, we have changed our scheduling since.',
]


class Command(BaseCommand):
    help = 'Create sample contractors, homeowners and reviews'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )
        parser.add_argument(
            '--seed',
            type=int,
            default=42,
            help='Random seed, for reproducible sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')
        rng = random.Random(options['seed'])

        users = self.create_users()
        self.create_reviews(users, rng)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Contractor ratings:')
        repository = DjangoReviewRepository()
        for contractor in users['contractors']:
            rating = get_contractor_rating(contractor.id, repository=repository)
            self.stdout.write(f'  {contractor.company_name}: {rating}')
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  hung@example.com / password123 (contractor)')
        self.stdout.write('  an@example.com / password123 (homeowner)')

    def clear_data(self):
        """Clear all data from the database."""
        Review.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        contractors = []
        for email, name, company in CONTRACTORS:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    'display_name': name,
                    'role': UserRole.CONTRACTOR,
                    'company_name': company,
                }
            )
            user.set_password('password123')
            user.save()
            contractors.append(user)

        homeowners = []
        for email, name in HOMEOWNERS:
            user, _ = User.objects.get_or_create(email=email, defaults={'display_name': name})
            user.set_password('password123')
            user.save()
            homeowners.append(user)

        return {'admin': admin, 'contractors': contractors, 'homeowners': homeowners}

    def create_reviews(self, users, rng):
        """Create backdated reviews so the time decay is visible."""
        self.stdout.write('  Creating reviews...')

        now = timezone.now()
        count = 0
        for contractor in users['contractors']:
            for reviewer in users['homeowners']:
                for _ in range(rng.randint(1, 3)):
                    criteria = CriteriaRatings(**{
                        name: rng.choice([None, 2, 3, 4, 5, 5])
                        for name in ('quality', 'timeliness', 'communication', 'value')
                    })
                    fallback = rng.randint(1, 5)
                    responded = rng.random() < 0.3

                    review = Review.objects.create(
                        contractor=contractor,
                        reviewer=reviewer,
                        project_id=uuid.UUID(int=rng.getrandbits(128), version=4),
                        rating=overall_rating_from_criteria(criteria, fallback),
                        quality_rating=criteria.quality,
                        timeliness_rating=criteria.timeliness,
                        communication_rating=criteria.communication,
                        value_rating=criteria.value,
                        comment=rng.choice(COMMENTS),
                        is_public=rng.random() > 0.15,
                        is_deleted=rng.random() < 0.05,
                        helpful_count=rng.choice([0, 0, 1, 2, 3, 5, 8]),
                        response=rng.choice(RESPONSES) if responded else None,
                        responded_at=now if responded else None,
                    )
                    # created_at is auto_now_add
                    Review.objects.filter(id=review.id).update(
                        created_at=now - timedelta(days=rng.randint(0, 540))
                    )
                    count += 1

        self.stdout.write(f'    {count} reviews')
