from django.contrib import admin
from .models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("table_name", "staff_name", "total", "currency", "created_at")
    list_filter = ("currency", "created_at")
    search_fields = ("table_name", "staff_name")
    date_hierarchy = "created_at"

    def has_change_permission(self, request, obj=None):
        return False

    def has_add_permission(self, request):
        return False
