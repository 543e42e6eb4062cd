from typing import List

from core_backend.infrastructure.cache_utils import cache_static_data
from .models import Category, Food


class CatalogService:
    """Read-only catalog access for the POS screens."""

    @staticmethod
    @cache_static_data(timeout=300)
    def list_categories() -> List[Category]:
        return list(Category.objects.all())

    @staticmethod
    def list_foods_by_category(category_id) -> List[Food]:
        return list(
            Food.objects.filter(category_id=category_id, is_available=True).select_related("category")
        )

    @staticmethod
    def get_food(food_id) -> Food:
        return Food.objects.select_related("category").get(pk=food_id)
