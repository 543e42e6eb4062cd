from .models import Discount
from .strategies import (
    AppliedDiscount,
    DiscountStrategy,
    EntireOrderDiscountStrategy,
    CategoryDiscountStrategy,
    FoodDiscountStrategy,
)


class DiscountStrategyFactory:
    """
    Factory for creating a discount strategy based on the discount's scope.
    """

    _strategies = {
        Discount.DiscountScope.ENTIRE_ORDER: EntireOrderDiscountStrategy,
        Discount.DiscountScope.CATEGORY: CategoryDiscountStrategy,
        Discount.DiscountScope.FOOD: FoodDiscountStrategy,
    }

    @staticmethod
    def get_strategy(discount: AppliedDiscount) -> DiscountStrategy:
        strategy_class = DiscountStrategyFactory._strategies.get(discount.scope)

        if strategy_class:
            return strategy_class()

        raise NotImplementedError(
            f"No strategy implemented for discount scope '{discount.scope}'"
        )
