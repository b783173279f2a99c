import uuid
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def rating_validators():
    return [
        django.core.validators.MinValueValidator(1),
        django.core.validators.MaxValueValidator(5),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('project_id', models.UUIDField(db_index=True)),
                ('rating', models.PositiveSmallIntegerField(validators=rating_validators())),
                ('quality_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ('timeliness_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ('communication_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ('value_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=rating_validators())),
                ('comment', models.TextField(blank=True, null=True)),
                ('images', models.JSONField(blank=True, default=list)),
                ('is_public', models.BooleanField(default=True)),
                ('is_deleted', models.BooleanField(default=False)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('helpful_count', models.PositiveIntegerField(default=0)),
                ('response', models.TextField(blank=True, null=True)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('contractor', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='received_reviews', to=settings.AUTH_USER_MODEL)),
                ('reviewer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='written_reviews', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'contractor_reviews',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['contractor', 'is_deleted', 'is_public'], name='reviews_visibility_idx'),
                    models.Index(fields=['contractor', 'created_at'], name='reviews_contractor_date_idx'),
                    models.Index(fields=['created_at'], name='reviews_created_at_idx'),
                ],
                'unique_together': {('project_id', 'reviewer')},
            },
        ),
    ]
