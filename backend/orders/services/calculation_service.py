from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional
import logging

from discounts.factories import DiscountStrategyFactory
from discounts.strategies import AppliedDiscount
from payments.money import quantize
from settings.config import DEFAULT_TAX_RATE, DEFAULT_SERVICE_CHARGE_RATE

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal = ZERO
    line_discount_total: Decimal = ZERO
    storewide_discount_total: Decimal = ZERO
    tax: Decimal = ZERO
    service_charge: Decimal = ZERO
    total: Decimal = ZERO

    @property
    def total_discount(self) -> Decimal:
        return self.line_discount_total + self.storewide_discount_total

    @property
    def taxable_base(self) -> Decimal:
        return self.subtotal - self.total_discount

    def quantized(self, currency) -> "OrderTotals":
        """Round every amount to the currency's minor unit."""
        return OrderTotals(
            subtotal=quantize(currency, self.subtotal),
            line_discount_total=quantize(currency, self.line_discount_total),
            storewide_discount_total=quantize(currency, self.storewide_discount_total),
            tax=quantize(currency, self.tax),
            service_charge=quantize(currency, self.service_charge),
            total=quantize(currency, self.total),
        )

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "line_discount_total": self.line_discount_total,
            "storewide_discount_total": self.storewide_discount_total,
            "total_discount": self.total_discount,
            "taxable_base": self.taxable_base,
            "tax": self.tax,
            "service_charge": self.service_charge,
            "total": self.total,
        }


class OrderCalculationService:
    """Pure order pricing: no I/O, no rounding, same input gives the same output."""

    @staticmethod
    def compute_totals(
        lines: Iterable,
        storewide_discount: Optional[AppliedDiscount] = None,
        tax_rate: Decimal = DEFAULT_TAX_RATE,
        service_charge_rate: Decimal = DEFAULT_SERVICE_CHARGE_RATE,
    ) -> OrderTotals:
        """
        Price a list of order lines.

        1. subtotal = sum of price x quantity
        2. line discounts = sum of price x quantity x discount/100
        3. storewide discount = percent of each eligible line's post-line-discount total
        4. tax and service charge are both charged on subtotal minus all discounts
        """
        lines = list(lines)

        subtotal = sum((line.gross_total for line in lines), ZERO)
        line_discount_total = sum((line.discount_amount for line in lines), ZERO)

        storewide_discount_total = ZERO
        if storewide_discount is not None:
            strategy = DiscountStrategyFactory.get_strategy(storewide_discount)
            storewide_discount_total = sum(
                (strategy.apply(line, storewide_discount) for line in lines), ZERO
            )

        taxable_base = subtotal - line_discount_total - storewide_discount_total
        tax = taxable_base * Decimal(tax_rate)
        service_charge = taxable_base * Decimal(service_charge_rate)

        return OrderTotals(
            subtotal=subtotal,
            line_discount_total=line_discount_total,
            storewide_discount_total=storewide_discount_total,
            tax=tax,
            service_charge=service_charge,
            total=taxable_base + tax + service_charge,
        )
