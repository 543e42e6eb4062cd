from django.contrib import admin
from .models import Discount


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    """
    Admin interface for managing storewide discounts.
    """

    list_display = (
        "name",
        "scope",
        "percent",
        "is_active",
        "start_date",
        "expiration_date",
    )
    list_filter = ("scope", "is_active")
    search_fields = ("name",)
    ordering = ("name",)

    fieldsets = (
        (None, {"fields": ("name", "is_active")}),
        ("Rule", {"fields": ("scope", "percent")}),
        ("Applicability", {"fields": ("applicable_foods", "applicable_categories")}),
        ("Timeframe", {"fields": ("start_date", "expiration_date")}),
    )

    filter_horizontal = ("applicable_foods", "applicable_categories")
