from django.db import models
from django.utils.translation import gettext_lazy as _

from .records import TableStatus, KitchenStatus


class TableRecord(models.Model):
    """
    The shared document for one physical table: occupancy, the current order
    and its kitchen/service status. The order is stored as a list of line
    dictionaries (see `tables.records.OrderLine.to_dict`).
    """

    name = models.CharField(max_length=100, help_text=_("Display name, e.g. 'Table 4'."))
    status = models.CharField(
        max_length=20,
        choices=TableStatus.choices,
        default=TableStatus.AVAILABLE,
        db_index=True,
    )
    occupied = models.BooleanField(default=False)
    occupied_by = models.CharField(max_length=150, blank=True, null=True)
    staff_id = models.PositiveBigIntegerField(blank=True, null=True)
    order = models.JSONField(default=list, blank=True)
    order_placed_at = models.DateTimeField(
        blank=True,
        null=True,
        help_text=_("Set when the table first enters 'serving'. Orders the kitchen queue."),
    )
    kitchen_status = models.CharField(
        max_length=20,
        choices=KitchenStatus.choices,
        blank=True,
        null=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["status", "order_placed_at"], name="table_status_placed_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        if not self.status:
            self.status = TableStatus.AVAILABLE
        self.occupied = self.status != TableStatus.AVAILABLE
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"occupied", "updated_at"}
        super().save(*args, **kwargs)
