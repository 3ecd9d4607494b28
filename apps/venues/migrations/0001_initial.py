from decimal import Decimal

import django.core.validators
from django.db import migrations, models

import apps.venues.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Venue",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("capacity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                (
                    "price_per_hour",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "price_per_day",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("location", models.CharField(blank=True, max_length=255)),
                ("opening_time", models.TimeField(default=apps.venues.models.default_opening_time)),
                ("closing_time", models.TimeField(default=apps.venues.models.default_closing_time)),
                (
                    "slot_minutes",
                    models.PositiveSmallIntegerField(
                        default=apps.venues.models.default_slot_minutes,
                        help_text="Width of one listed availability slot, in minutes.",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Venue",
                "verbose_name_plural": "Venues",
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("opening_time__lt", models.F("closing_time"))),
                        name="venue_opening_before_closing",
                    )
                ],
            },
        ),
    ]
