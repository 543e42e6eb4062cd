from django.contrib import admin
from .models import Category, Food


class FoodInline(admin.TabularInline):
    model = Food
    extra = 0
    fields = ("name", "price", "is_available")


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "order")
    search_fields = ("name",)
    inlines = [FoodInline]


@admin.register(Food)
class FoodAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "is_available")
    list_filter = ("category", "is_available")
    search_fields = ("name",)
