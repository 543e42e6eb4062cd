from django.contrib import admin
from .models import TableRecord


@admin.register(TableRecord)
class TableRecordAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "occupied_by", "kitchen_status", "order_placed_at")
    list_filter = ("status", "kitchen_status")
    search_fields = ("name", "occupied_by")
    readonly_fields = ("order", "order_placed_at", "created_at", "updated_at")
