from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import Category, Food


class CategorySerializer(BaseModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "description", "order"]


class FoodSerializer(BaseModelSerializer):
    category_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Food
        fields = ["id", "name", "description", "price", "category_id", "is_available"]
