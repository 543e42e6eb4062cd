from rest_framework import serializers
from core_backend.base import TimestampedSerializer
from .models import TableRecord


class TableRecordSerializer(TimestampedSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = TableRecord
        fields = [
            "id",
            "name",
            "status",
            "status_display",
            "occupied",
            "occupied_by",
            "staff_id",
            "order",
            "order_placed_at",
            "kitchen_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "status",
            "occupied",
            "occupied_by",
            "staff_id",
            "order",
            "order_placed_at",
            "kitchen_status",
        ]
