"""
Order Builder: the POS screen's working copy of one table's order.

The builder mirrors the table record through a live store subscription and
stages local edits (add, quantity changes, line discounts, notes, storewide
discount) until the staff member saves or takes payment. Every mutation is
gated by the staff session and recomputes the totals.
"""
import logging
import uuid
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from core_backend.exceptions import (
    DiscountNotActive,
    EmptyOrder,
    LineNotFound,
    NotAuthenticated,
    POSError,
    StoreUnavailable,
    TableNotFound,
)
from discounts.strategies import AppliedDiscount
from payments.services import TransactionLedger
from settings.config import app_settings
from staff.services import StaffSessionGate
from tables.records import FoodSnapshot, KitchenStatus, OrderLine, TableStatus
from tables.store import table_store, cleared_fields
from .calculation_service import OrderCalculationService, OrderTotals

logger = logging.getLogger(__name__)

MAX_LINE_DISCOUNT = Decimal("100")


@dataclass(frozen=True)
class BuilderLine:
    """An order line plus the local id the POS screen addresses it by."""

    line_id: str
    line: OrderLine

    def to_dict(self) -> dict:
        data = self.line.to_dict()
        data["lineId"] = self.line_id
        data["total"] = str(self.line.net_total)
        return data


@dataclass
class ItemEditor:
    """Unsaved values typed into the edit dialog for one line."""

    line_id: str
    quantity: str = ""
    discount: str = ""
    note: str = ""

    def to_dict(self) -> dict:
        return {
            "lineId": self.line_id,
            "quantity": self.quantity,
            "discount": self.discount,
            "note": self.note,
        }


def parse_quantity(value) -> Optional[int]:
    """A positive whole number, or None when the input is not one."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value >= 1 else None
    text = str(value).strip()
    if not text.isdigit():
        return None
    quantity = int(text)
    return quantity if quantity >= 1 else None


def parse_discount(value) -> Optional[Decimal]:
    """A percentage in (0, 100], or None (no discount) for anything else."""
    if value is None or isinstance(value, bool):
        return None
    try:
        percent = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not percent.is_finite() or percent <= 0 or percent > MAX_LINE_DISCOUNT:
        return None
    return percent


class OrderBuilder:
    def __init__(self, table_id, session: Optional[StaffSessionGate] = None, store=None, on_change=None):
        self.table_id = table_id
        self.session = session or StaffSessionGate()
        self.store = store or table_store
        self.on_change = on_change

        self.table = None
        self.lines: List[BuilderLine] = []
        self.storewide_discount: Optional[AppliedDiscount] = None
        self.editor: Optional[ItemEditor] = None
        self.disconnected = False
        self.last_receipt = None
        self._unsubscribe = None

    # ------------------------------------------------------------------
    # Store subscription
    # ------------------------------------------------------------------

    def open(self):
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(
                self.table_id, self._on_snapshot, self._on_store_error
            )
        return self

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh(self):
        """Re-read the table record and mirror it, as if a new snapshot arrived."""
        try:
            snapshot = self.store.read(self.table_id)
        except StoreUnavailable as e:
            self._on_store_error(e)
            return
        self._on_snapshot(snapshot)

    def _on_snapshot(self, snapshot):
        self.table = snapshot
        self.disconnected = False
        self.lines = self._mirror_lines(snapshot.order if snapshot.exists else ())
        if self.editor and not self._find(self.editor.line_id, raise_missing=False):
            self.editor = None
        self._changed()

    def _on_store_error(self, error):
        if not self.disconnected:
            logger.warning(f"Order builder for table {self.table_id} disconnected: {error}")
        self.disconnected = True
        self._changed()

    def _mirror_lines(self, order_lines):
        """Adopt the store's lines, keeping local ids where the same food sits at the same position."""
        mirrored = []
        for index, line in enumerate(order_lines):
            previous = self.lines[index] if index < len(self.lines) else None
            if previous is not None and previous.line.food.id == line.food.id:
                line_id = previous.line_id
            else:
                line_id = uuid.uuid4().hex
            mirrored.append(BuilderLine(line_id=line_id, line=line))
        return mirrored

    def _changed(self):
        if self.on_change:
            self.on_change(self)

    # ------------------------------------------------------------------
    # Line editing
    # ------------------------------------------------------------------

    def _require_login(self):
        if not self.session.is_authenticated:
            raise NotAuthenticated()
        return self.session.staff

    def _find(self, line_id, raise_missing=True):
        for index, entry in enumerate(self.lines):
            if entry.line_id == line_id:
                return index, entry
        if raise_missing:
            raise LineNotFound(line_id)
        return None

    def _replace(self, index, line: OrderLine):
        self.lines[index] = BuilderLine(line_id=self.lines[index].line_id, line=line)

    @property
    def has_lines(self) -> bool:
        return bool(self.lines)

    @property
    def order_lines(self) -> List[OrderLine]:
        return [entry.line for entry in self.lines]

    def add_item(self, food):
        """
        Add one of `food`. An existing line for the same food is incremented
        unless it carries a line discount, in which case a new line is started.
        """
        self._require_login()
        if not isinstance(food, FoodSnapshot):
            food = food.snapshot()

        for index, entry in enumerate(self.lines):
            if entry.line.food.id == food.id and not entry.line.discount:
                self._replace(index, replace(entry.line, quantity=entry.line.quantity + 1))
                break
        else:
            self.lines.append(BuilderLine(line_id=uuid.uuid4().hex, line=OrderLine(food=food)))
        self._changed()
        return self.lines

    def increment_quantity(self, line_id):
        self._require_login()
        index, entry = self._find(line_id)
        self._replace(index, replace(entry.line, quantity=entry.line.quantity + 1))
        self._changed()

    def decrement_quantity(self, line_id):
        """Decrease by one; a line at quantity 1 is removed instead."""
        self._require_login()
        index, entry = self._find(line_id)
        if entry.line.quantity <= 1:
            del self.lines[index]
        else:
            self._replace(index, replace(entry.line, quantity=entry.line.quantity - 1))
        self._changed()

    def remove_item(self, line_id):
        self._require_login()
        index, _ = self._find(line_id)
        del self.lines[index]
        if self.editor and self.editor.line_id == line_id:
            self.editor = None
        self._changed()

    def edit_item(self, line_id, quantity=None, discount_percent=None, note=None):
        """
        Apply edits to one line. Arguments left as None are not touched.

        - quantity: must be a positive whole number, otherwise it is left unchanged
        - discount_percent: a number in (0, 100]; zero or invalid input removes the discount
        - note: stored as given
        """
        self._require_login()
        index, entry = self._find(line_id)
        line = entry.line

        if quantity is not None:
            parsed = parse_quantity(quantity)
            if parsed is not None:
                line = replace(line, quantity=parsed)
            else:
                logger.debug(f"Ignoring invalid quantity {quantity!r} for line {line_id}")
        if discount_percent is not None:
            line = replace(line, discount=parse_discount(discount_percent))
        if note is not None:
            line = replace(line, note=str(note))

        self._replace(index, line)
        self._changed()
        return self.lines[index]

    def begin_edit(self, line_id) -> ItemEditor:
        _, entry = self._find(line_id)
        self.editor = ItemEditor(
            line_id=line_id,
            quantity=str(entry.line.quantity),
            discount=str(entry.line.discount) if entry.line.discount else "",
            note=entry.line.note,
        )
        self._changed()
        return self.editor

    def update_editor(self, quantity=None, discount=None, note=None):
        if self.editor is None:
            raise POSError("No line is being edited.")
        if quantity is not None:
            self.editor.quantity = str(quantity)
        if discount is not None:
            self.editor.discount = str(discount)
        if note is not None:
            self.editor.note = str(note)
        self._changed()
        return self.editor

    def commit_edit(self):
        if self.editor is None:
            raise POSError("No line is being edited.")
        editor = self.editor
        entry = self.edit_item(
            editor.line_id,
            quantity=editor.quantity,
            discount_percent=editor.discount,
            note=editor.note,
        )
        self.editor = None
        self._changed()
        return entry

    def cancel_edit(self):
        self.editor = None
        self._changed()

    # ------------------------------------------------------------------
    # Storewide discount
    # ------------------------------------------------------------------

    def apply_storewide_discount(self, discount):
        """Replace any storewide discount with `discount` (a Discount or AppliedDiscount)."""
        self._require_login()
        if not isinstance(discount, AppliedDiscount):
            if not discount.is_currently_active():
                raise DiscountNotActive(discount.name)
            discount = discount.snapshot()
        self.storewide_discount = discount
        logger.info(f"Storewide discount '{discount.name}' applied on table {self.table_id}")
        self._changed()

    def clear_storewide_discount(self):
        self._require_login()
        self.storewide_discount = None
        self._changed()

    # ------------------------------------------------------------------
    # Totals, save and payment
    # ------------------------------------------------------------------

    @property
    def totals(self) -> OrderTotals:
        return OrderCalculationService.compute_totals(
            self.order_lines,
            self.storewide_discount,
            tax_rate=app_settings.tax_rate,
            service_charge_rate=app_settings.service_charge_rate,
        )

    def save_order(self) -> bool:
        """
        Write the order to the table record.

        An empty order clears the table. Otherwise the table becomes `serving`;
        the first save into `serving` also stamps the placement time and queues
        the order for the kitchen. Re-saving an order already being served
        keeps its place in the kitchen queue.
        """
        staff = self._require_login()

        if not self.lines:
            fields = cleared_fields()
        else:
            current = self.store.read(self.table_id)
            fields = {
                "order": [line.to_dict() for line in self.order_lines],
                "occupied": True,
                "occupied_by": staff.name,
                "staff_id": staff.pk,
                "status": TableStatus.SERVING,
            }
            if current.status != TableStatus.SERVING:
                fields["order_placed_at"] = timezone.now()
                fields["kitchen_status"] = KitchenStatus.PENDING

        saved = self.store.write(self.table_id, fields)
        if saved:
            logger.info(
                f"Order saved on table {self.table_id} by '{staff.name}' "
                f"({len(self.lines)} lines, status {fields['status']})"
            )
        else:
            logger.warning(f"Order for table {self.table_id} not saved: table no longer exists")
        return saved

    def pay(self) -> dict:
        """
        Record the transaction, clear the table and return the receipt.
        The receipt is built from the stored transaction, so later edits to the
        builder or the table never change it.
        """
        staff = self._require_login()
        if not self.lines:
            raise EmptyOrder()

        lines = self.order_lines
        totals = self.totals
        table = self.table or self.store.read(self.table_id)

        with transaction.atomic():
            record = TransactionLedger.append(
                table=table,
                staff=staff,
                lines=lines,
                totals=totals,
                storewide_discount=self.storewide_discount,
            )
            if not self.store.write(self.table_id, cleared_fields()):
                logger.warning(f"Payment on table {self.table_id} rolled back: table no longer exists")
                raise TableNotFound(self.table_id)

        self.lines = []
        self.storewide_discount = None
        self.editor = None
        self.last_receipt = TransactionLedger.build_receipt(record)
        self._changed()
        return self.last_receipt

    def logout(self, force=False):
        """
        End the staff session. A forced logout discards unsaved edits so the
        next staff member starts from the stored order.
        """
        was_logged_in = self.session.is_authenticated
        self.session.logout(has_lines=self.has_lines, force=force)
        if force and was_logged_in:
            stored = self.table.order if self.table is not None and self.table.exists else ()
            self.lines = self._mirror_lines(stored)
            self.storewide_discount = None
            self.editor = None
        self._changed()

    def state(self) -> dict:
        """Everything the POS screen renders."""
        return {
            "table": self.table.to_dict() if self.table else None,
            "lines": [entry.to_dict() for entry in self.lines],
            "storewide_discount": self.storewide_discount.to_dict() if self.storewide_discount else None,
            "totals": self.totals.to_dict(),
            "editor": self.editor.to_dict() if self.editor else None,
            "session": self.session.current_session(),
            "disconnected": self.disconnected,
        }
