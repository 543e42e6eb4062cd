from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import ReadOnlyBaseViewSet
from .filters import DiscountFilter
from .models import Discount
from .serializers import DiscountSerializer
from .services import DiscountService


class DiscountViewSet(ReadOnlyBaseViewSet):
    queryset = Discount.objects.prefetch_related("applicable_categories", "applicable_foods")
    serializer_class = DiscountSerializer
    filterset_class = DiscountFilter
    search_fields = ["name"]
    ordering = ["name"]

    @action(detail=False, methods=["get"])
    def active(self, request):
        """Discounts that can be applied to an order right now."""
        discounts = DiscountService.list_active_discounts()
        return Response(self.get_serializer(discounts, many=True).data)
