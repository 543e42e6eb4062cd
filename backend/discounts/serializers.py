from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import Discount


class DiscountSerializer(BaseModelSerializer):
    scope_display = serializers.CharField(source="get_scope_display", read_only=True)
    applicable_category_ids = serializers.PrimaryKeyRelatedField(
        source="applicable_categories", many=True, read_only=True
    )
    applicable_food_ids = serializers.PrimaryKeyRelatedField(
        source="applicable_foods", many=True, read_only=True
    )

    class Meta:
        model = Discount
        fields = [
            "id",
            "name",
            "scope",
            "scope_display",
            "percent",
            "start_date",
            "expiration_date",
            "applicable_category_ids",
            "applicable_food_ids",
        ]
