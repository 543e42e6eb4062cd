from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import FrozenSet, Optional
import logging

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class AppliedDiscount:
    """A storewide discount as held by an open order."""

    id: Optional[int]
    name: str
    scope: str
    percent: Decimal
    category_ids: FrozenSet[int] = field(default_factory=frozenset)
    food_ids: FrozenSet[int] = field(default_factory=frozenset)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "scope": self.scope,
            "percent": str(self.percent),
            "categories": sorted(self.category_ids),
            "foods": sorted(self.food_ids),
        }


class DiscountStrategy(ABC):
    """The interface for a storewide discount strategy."""

    @abstractmethod
    def is_eligible(self, line, discount: AppliedDiscount) -> bool:
        pass

    def apply(self, line, discount: AppliedDiscount) -> Decimal:
        """
        Storewide discount amount for one line. The base is the line total after
        its own line discount, so both discounts compound.
        """
        if not self.is_eligible(line, discount):
            return Decimal("0")
        return line.net_total * Decimal(discount.percent) / HUNDRED


class EntireOrderDiscountStrategy(DiscountStrategy):
    """Every line in the order is eligible."""

    def is_eligible(self, line, discount: AppliedDiscount) -> bool:
        return True


class CategoryDiscountStrategy(DiscountStrategy):
    """Lines whose food belongs to one of the discount's categories are eligible."""

    def is_eligible(self, line, discount: AppliedDiscount) -> bool:
        return line.food.category_id in discount.category_ids


class FoodDiscountStrategy(DiscountStrategy):
    """Lines for one of the discount's foods are eligible."""

    def is_eligible(self, line, discount: AppliedDiscount) -> bool:
        return line.food.id in discount.food_ids
