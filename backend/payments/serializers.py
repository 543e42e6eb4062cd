from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import Transaction


class TransactionSerializer(BaseModelSerializer):
    id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "table_name",
            "staff_name",
            "items",
            "subtotal",
            "line_discount_total",
            "storewide_discount_total",
            "discount_total",
            "discount_name",
            "tax",
            "service_charge",
            "total",
            "currency",
            "created_at",
        ]
        read_only_fields = fields
