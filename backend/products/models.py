from django.db import models
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    name = models.CharField(
        max_length=100, unique=True, help_text=_("Name of the menu category.")
    )
    description = models.TextField(
        blank=True, help_text=_("Description of the category.")
    )
    order = models.IntegerField(
        default=0,
        help_text=_("Display order for this category. Lower numbers appear first."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = _("categories")
        ordering = ["order", "name"]

    def __str__(self):
        return self.name


class Food(models.Model):
    """A menu item that can be added to a table's order."""

    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="foods",
        help_text=_("The menu category this food is listed under."),
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    is_available = models.BooleanField(
        default=True,
        db_index=True,
        help_text=_("Unavailable foods stay on past orders but are hidden from the POS."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category", "is_available"], name="food_category_available_idx"),
        ]

    def __str__(self):
        return self.name

    def snapshot(self):
        """Freeze this food's current catalog values for embedding in an order line."""
        from tables.records import FoodSnapshot

        return FoodSnapshot(
            id=self.pk,
            name=self.name,
            price=self.price,
            description=self.description,
            category_id=self.category_id,
        )
