"""
Value types for the table record document.

A table record embeds its order as a list of plain dictionaries (the store's
wire shape). These frozen dataclasses are the in-memory view of that document:
observers receive `TableSnapshot` objects and never share mutable state.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from django.db import models
from django.utils.translation import gettext_lazy as _


class TableStatus(models.TextChoices):
    AVAILABLE = "available", _("Available")
    SERVING = "serving", _("Serving")
    ORDER_READY = "order_ready", _("Order Ready")


class KitchenStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    IN_PROGRESS = "in_progress", _("In Progress")


def to_decimal(value, default=None):
    if value is None or value == "":
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


@dataclass(frozen=True)
class FoodSnapshot:
    """Copy of a catalog food taken when it is added to an order."""

    id: Any
    name: str
    price: Decimal
    description: str = ""
    category_id: Any = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "description": self.description,
            "categoryId": self.category_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FoodSnapshot":
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            price=to_decimal(data.get("price"), Decimal("0")),
            description=data.get("description") or "",
            category_id=data.get("categoryId"),
        )


@dataclass(frozen=True)
class OrderLine:
    food: FoodSnapshot
    quantity: int = 1
    discount: Optional[Decimal] = None
    note: str = ""

    @property
    def gross_total(self) -> Decimal:
        return self.food.price * self.quantity

    @property
    def discount_amount(self) -> Decimal:
        if not self.discount:
            return Decimal("0")
        return self.gross_total * self.discount / Decimal("100")

    @property
    def net_total(self) -> Decimal:
        return self.gross_total - self.discount_amount

    def to_dict(self) -> dict:
        return {
            "food": self.food.to_dict(),
            "quantity": self.quantity,
            "discount": str(self.discount) if self.discount else None,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrderLine":
        discount = to_decimal(data.get("discount"))
        return cls(
            food=FoodSnapshot.from_dict(data.get("food") or {}),
            quantity=int(data.get("quantity") or 1),
            discount=discount if discount else None,
            note=data.get("note") or "",
        )


@dataclass(frozen=True)
class TableSnapshot:
    """
    A whole-document view of one table record at a point in time.

    `exists` is False when the record was deleted; subscribers receive such a
    snapshot instead of an error.
    """

    id: Any
    name: str = ""
    status: str = TableStatus.AVAILABLE
    occupied: bool = False
    occupied_by: Optional[str] = None
    staff_id: Any = None
    order: Tuple[OrderLine, ...] = field(default_factory=tuple)
    order_placed_at: Any = None
    kitchen_status: Optional[str] = None
    exists: bool = True

    @property
    def is_available(self) -> bool:
        return self.status == TableStatus.AVAILABLE

    @classmethod
    def from_record(cls, record) -> "TableSnapshot":
        return cls(
            id=record.pk,
            name=record.name,
            status=record.status or TableStatus.AVAILABLE,
            occupied=record.occupied,
            occupied_by=record.occupied_by,
            staff_id=record.staff_id,
            order=tuple(OrderLine.from_dict(line) for line in (record.order or [])),
            order_placed_at=record.order_placed_at,
            kitchen_status=record.kitchen_status,
        )

    @classmethod
    def missing(cls, table_id) -> "TableSnapshot":
        return cls(id=table_id, exists=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "occupied": self.occupied,
            "occupiedBy": self.occupied_by,
            "staffId": self.staff_id,
            "order": [line.to_dict() for line in self.order],
            "orderPlacedAt": self.order_placed_at.isoformat() if self.order_placed_at else None,
            "kitchenStatus": self.kitchen_status,
            "exists": self.exists,
        }
