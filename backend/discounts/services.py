from django.utils import timezone
import logging

from core_backend.exceptions import DiscountNotActive
from .models import Discount

logger = logging.getLogger(__name__)


class DiscountService:
    """Catalog access for storewide discounts."""

    @staticmethod
    def list_active_discounts(now=None):
        """
        Discounts eligible at `now`: enabled and with
        start_date <= now <= expiration_date.
        """
        now = now or timezone.now()
        discounts = list(
            Discount.objects.filter(
                is_active=True,
                start_date__lte=now,
                expiration_date__gte=now,
            ).prefetch_related("applicable_categories", "applicable_foods")
        )
        logger.debug(f"{len(discounts)} active discounts at {now.isoformat()}")
        return discounts

    @staticmethod
    def get_applicable_discount(discount_id, now=None):
        """
        Load a discount for application to an order. Raises DiscountNotActive
        when the discount is outside its active window.
        """
        discount = Discount.objects.prefetch_related(
            "applicable_categories", "applicable_foods"
        ).get(pk=discount_id)
        if not discount.is_currently_active(now):
            raise DiscountNotActive(discount.name)
        return discount.snapshot()
