"""
Orders services package.

- OrderCalculationService: pure order pricing
- OrderBuilder: working copy of one table's order on the POS screen
- PendingOrderTracker: front-of-house view of an order in the kitchen
"""

from .calculation_service import OrderCalculationService, OrderTotals
from .order_builder import OrderBuilder, BuilderLine, ItemEditor
from .pending_order_service import PendingOrderTracker

__all__ = [
    'OrderCalculationService',
    'OrderTotals',
    'OrderBuilder',
    'BuilderLine',
    'ItemEditor',
    'PendingOrderTracker',
]
