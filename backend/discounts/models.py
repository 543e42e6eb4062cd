from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
from django.utils import timezone
from products.models import Food, Category


class Discount(models.Model):
    class DiscountScope(models.TextChoices):
        ENTIRE_ORDER = "ENTIRE_ORDER", "Entire Order"
        CATEGORY = "CATEGORY", "Category"
        FOOD = "FOOD", "Food"

    name = models.CharField(max_length=255)
    scope = models.CharField(
        max_length=20,
        choices=DiscountScope.choices,
        default=DiscountScope.ENTIRE_ORDER,
    )
    percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="Percentage taken off every eligible line.",
    )
    start_date = models.DateTimeField()
    expiration_date = models.DateTimeField()

    applicable_categories = models.ManyToManyField(
        Category,
        blank=True,
        related_name="discounts",
        help_text="For 'Category' discounts, the categories whose foods are eligible.",
    )
    applicable_foods = models.ManyToManyField(
        Food,
        blank=True,
        related_name="discounts",
        help_text="For 'Food' discounts, the foods that are eligible.",
    )

    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["start_date", "expiration_date"], name="discount_active_window_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.percent}% {self.get_scope_display()})"

    def is_currently_active(self, now=None):
        """Checks if the discount is enabled and `now` falls within its date range (inclusive)."""
        if not self.is_active:
            return False
        now = now or timezone.now()
        return self.start_date <= now <= self.expiration_date

    def clean(self):
        super().clean()
        if self.start_date and self.expiration_date and self.start_date > self.expiration_date:
            raise ValidationError(
                {"expiration_date": "Expiration date must not be before the start date."}
            )

    def snapshot(self):
        """Detach this discount from the ORM for use by the pricing engine."""
        from .strategies import AppliedDiscount

        return AppliedDiscount(
            id=self.pk,
            name=self.name,
            scope=self.scope,
            percent=self.percent,
            category_ids=frozenset(self.applicable_categories.values_list("id", flat=True)),
            food_ids=frozenset(self.applicable_foods.values_list("id", flat=True)),
        )
