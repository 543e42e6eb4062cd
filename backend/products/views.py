from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import ReadOnlyBaseViewSet
from .models import Category
from .serializers import CategorySerializer, FoodSerializer
from .services import CatalogService


class CategoryViewSet(ReadOnlyBaseViewSet):
    """Menu categories, with the foods of one category under `foods/`."""

    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    pagination_class = None
    ordering = ["order", "name"]

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(CatalogService.list_categories(), many=True)
        return Response(serializer.data)

    @action(detail=True, methods=["get"])
    def foods(self, request, pk=None):
        category = self.get_object()
        foods = CatalogService.list_foods_by_category(category.id)
        return Response(FoodSerializer(foods, many=True).data)
