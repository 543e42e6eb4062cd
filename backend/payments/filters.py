from django_filters import rest_framework as filters
from core_backend.base import BaseFilterSet
from .models import Transaction


class TransactionFilter(BaseFilterSet):
    table_name = filters.CharFilter(lookup_expr="icontains")

    class Meta:
        model = Transaction
        fields = {
            "staff_id": ["exact"],
            "currency": ["exact"],
        }
