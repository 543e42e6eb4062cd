from decimal import Decimal

import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Discount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                (
                    "scope",
                    models.CharField(
                        choices=[("ENTIRE_ORDER", "Entire Order"), ("CATEGORY", "Category"), ("FOOD", "Food")],
                        default="ENTIRE_ORDER",
                        max_length=20,
                    ),
                ),
                (
                    "percent",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Percentage taken off every eligible line.",
                        max_digits=5,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("100")),
                        ],
                    ),
                ),
                ("start_date", models.DateTimeField()),
                ("expiration_date", models.DateTimeField()),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "applicable_categories",
                    models.ManyToManyField(
                        blank=True,
                        help_text="For 'Category' discounts, the categories whose foods are eligible.",
                        related_name="discounts",
                        to="products.category",
                    ),
                ),
                (
                    "applicable_foods",
                    models.ManyToManyField(
                        blank=True,
                        help_text="For 'Food' discounts, the foods that are eligible.",
                        related_name="discounts",
                        to="products.food",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["start_date", "expiration_date"], name="discount_active_window_idx")],
            },
        ),
    ]
