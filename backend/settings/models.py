from decimal import Decimal
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


class GlobalSettings(models.Model):
    """
    Restaurant-wide settings: brand identity, currency and the two surcharge
    rates applied to every order (tax and service charge).

    Only one row ever exists; use `GlobalSettings.load()` rather than querying.
    """

    brand_name = models.CharField(
        max_length=100,
        default="OneCore POS",
        help_text="The restaurant's brand name, shown on receipts.",
    )
    currency = models.CharField(
        max_length=3,
        default="IDR",
        help_text="ISO 4217 currency code used for prices and receipts.",
    )
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=Decimal("0.10"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Tax rate as a fraction of the discounted subtotal (0.10 = 10%).",
    )
    service_charge_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=Decimal("0.10"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        help_text="Service charge as a fraction of the discounted subtotal (0.10 = 10%).",
    )
    brand_receipt_footer = models.CharField(
        max_length=255,
        blank=True,
        default="Thank you for dining with us!",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Global settings"
        verbose_name_plural = "Global settings"

    def __str__(self):
        return f"{self.brand_name} ({self.currency})"

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj
