import uuid
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Transaction(models.Model):
    """
    An immutable record of a paid table order. Items and amounts are copied
    at payment time, so later catalog or table changes never alter it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    table = models.ForeignKey(
        "tables.TableRecord",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    table_name = models.CharField(max_length=100)
    staff_id = models.PositiveBigIntegerField(null=True, blank=True)
    staff_name = models.CharField(max_length=150, blank=True)

    items = models.JSONField(
        default=list,
        help_text=_("Per item: id, name, price, quantity, discount, note and line total."),
    )
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    line_discount_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    storewide_discount_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_name = models.CharField(max_length=255, blank=True)
    tax = models.DecimalField(max_digits=12, decimal_places=2)
    service_charge = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="IDR")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.table_name} {self.total} {self.currency} ({self.created_at:%Y-%m-%d %H:%M})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Transactions are immutable once recorded.")
        super().save(*args, **kwargs)
