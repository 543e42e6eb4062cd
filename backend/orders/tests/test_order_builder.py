"""
Order Builder tests.

The builder is the POS screen's working copy of a table's order. These tests
cover line editing rules, the session gate on every mutation, saving to the
table record and taking payment.
"""
import pytest
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch
from django.db import DatabaseError
from django.utils import timezone

from core_backend.exceptions import (
    DiscountNotActive,
    EmptyOrder,
    LineNotFound,
    NotAuthenticated,
    StoreUnavailable,
    TableNotFound,
)
from discounts.models import Discount
from orders.services import OrderBuilder
from payments.models import Transaction
from tables.models import TableRecord
from tables.records import KitchenStatus, TableStatus
from tables.store import table_store


@pytest.mark.django_db
class TestLineEditing:
    """Adding, incrementing, decrementing and editing order lines"""

    def test_add_item_merges_same_food(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.add_item(nasi_goreng)

        assert len(logged_in_builder.lines) == 1
        assert logged_in_builder.lines[0].line.quantity == 2

    def test_add_item_starts_new_line_when_existing_line_is_discounted(self, logged_in_builder, nasi_goreng):
        """
        A discounted line keeps its own quantity; another of the same food is a new line.

        Business Impact: A discount granted on one plate must not silently spread to the next
        """
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id
        logged_in_builder.edit_item(line_id, discount_percent="50")

        logged_in_builder.add_item(nasi_goreng)

        assert len(logged_in_builder.lines) == 2
        assert logged_in_builder.lines[0].line.discount == Decimal("50")
        assert logged_in_builder.lines[1].line.discount is None

    def test_food_is_snapshotted_when_added(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)

        nasi_goreng.price = Decimal("999.00")
        nasi_goreng.save()

        assert logged_in_builder.lines[0].line.food.price == Decimal("100.00")

    def test_decrementing_quantity_one_removes_line(self, logged_in_builder, nasi_goreng, es_teh):
        """
        CRITICAL: A line never reaches quantity 0, it is removed instead
        """
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.add_item(es_teh)
        line_id = logged_in_builder.lines[0].line_id

        logged_in_builder.decrement_quantity(line_id)

        assert len(logged_in_builder.lines) == 1
        assert logged_in_builder.lines[0].line.food.name == "Es Teh"

    def test_increment_and_decrement(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id

        logged_in_builder.increment_quantity(line_id)
        logged_in_builder.increment_quantity(line_id)
        logged_in_builder.decrement_quantity(line_id)

        assert logged_in_builder.lines[0].line.quantity == 2

    def test_remove_item(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)

        logged_in_builder.remove_item(logged_in_builder.lines[0].line_id)

        assert logged_in_builder.lines == []

    def test_unknown_line_id(self, logged_in_builder):
        with pytest.raises(LineNotFound):
            logged_in_builder.increment_quantity("missing")

    @pytest.mark.parametrize("quantity", ["0", "-1", "2.5", "abc", "", 0])
    def test_invalid_quantity_is_ignored(self, logged_in_builder, nasi_goreng, quantity):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id

        logged_in_builder.edit_item(line_id, quantity=quantity)

        assert logged_in_builder.lines[0].line.quantity == 1

    def test_edit_sets_quantity_discount_and_note(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id

        logged_in_builder.edit_item(line_id, quantity="3", discount_percent="15", note="  no chili ")

        line = logged_in_builder.lines[0].line
        assert line.quantity == 3
        assert line.discount == Decimal("15")
        assert line.note == "  no chili "

    @pytest.mark.parametrize("discount", ["0", "abc", "-5", "150"])
    def test_invalid_or_zero_discount_clears_it(self, logged_in_builder, nasi_goreng, discount):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id
        logged_in_builder.edit_item(line_id, discount_percent="20")

        logged_in_builder.edit_item(line_id, discount_percent=discount)

        assert logged_in_builder.lines[0].line.discount is None

    def test_item_editor_commits_typed_values(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id

        editor = logged_in_builder.begin_edit(line_id)
        assert editor.quantity == "1"
        logged_in_builder.update_editor(quantity="4", note="extra egg")
        logged_in_builder.commit_edit()

        assert logged_in_builder.editor is None
        assert logged_in_builder.lines[0].line.quantity == 4
        assert logged_in_builder.lines[0].line.note == "extra egg"

    def test_cancelled_editor_changes_nothing(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id

        logged_in_builder.begin_edit(line_id)
        logged_in_builder.update_editor(quantity="9")
        logged_in_builder.cancel_edit()

        assert logged_in_builder.lines[0].line.quantity == 1

    def test_totals_follow_every_mutation(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.add_item(nasi_goreng)

        assert logged_in_builder.totals.total == Decimal("240")


@pytest.mark.django_db
class TestSessionGateOnMutations:
    """Every order mutation requires a logged-in staff member"""

    def test_add_item_requires_login(self, builder, nasi_goreng):
        with pytest.raises(NotAuthenticated):
            builder.add_item(nasi_goreng)

        assert builder.lines == []

    def test_save_requires_login(self, builder, table):
        with pytest.raises(NotAuthenticated):
            builder.save_order()

        table.refresh_from_db()
        assert table.status == TableStatus.AVAILABLE


@pytest.mark.django_db
class TestStorewideDiscount:
    def test_apply_and_clear(self, logged_in_builder, nasi_goreng, entire_order_discount):
        logged_in_builder.add_item(nasi_goreng)

        logged_in_builder.apply_storewide_discount(entire_order_discount)
        assert logged_in_builder.totals.storewide_discount_total == Decimal("10")

        logged_in_builder.clear_storewide_discount()
        assert logged_in_builder.totals.storewide_discount_total == Decimal("0")

    def test_only_one_storewide_discount(self, logged_in_builder, nasi_goreng, entire_order_discount):
        now = timezone.now()
        bigger = Discount.objects.create(
            name="Grand Opening",
            scope=Discount.DiscountScope.ENTIRE_ORDER,
            percent=Decimal("50"),
            start_date=now - timedelta(hours=1),
            expiration_date=now + timedelta(hours=1),
        )
        logged_in_builder.add_item(nasi_goreng)

        logged_in_builder.apply_storewide_discount(entire_order_discount)
        logged_in_builder.apply_storewide_discount(bigger)

        assert logged_in_builder.storewide_discount.name == "Grand Opening"
        assert logged_in_builder.totals.storewide_discount_total == Decimal("50")

    def test_expired_discount_is_rejected(self, logged_in_builder):
        now = timezone.now()
        expired = Discount.objects.create(
            name="Last Week",
            scope=Discount.DiscountScope.ENTIRE_ORDER,
            percent=Decimal("10"),
            start_date=now - timedelta(days=14),
            expiration_date=now - timedelta(days=7),
        )

        with pytest.raises(DiscountNotActive):
            logged_in_builder.apply_storewide_discount(expired)

        assert logged_in_builder.storewide_discount is None

    def test_storewide_discount_survives_incoming_snapshots(self, logged_in_builder, nasi_goreng, entire_order_discount):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.apply_storewide_discount(entire_order_discount)

        logged_in_builder.save_order()

        assert logged_in_builder.storewide_discount is not None


@pytest.mark.django_db
class TestSaveOrder:
    """Writing the order to the shared table record"""

    def test_first_save_starts_serving(self, logged_in_builder, nasi_goreng, staff_alice, table):
        """
        CRITICAL: The first save puts the table in the kitchen queue

        Business Impact: Orders that never reach 'serving/pending' are never cooked
        """
        logged_in_builder.add_item(nasi_goreng)

        assert logged_in_builder.save_order() is True

        table.refresh_from_db()
        assert table.status == TableStatus.SERVING
        assert table.kitchen_status == KitchenStatus.PENDING
        assert table.occupied is True
        assert table.occupied_by == "Alice"
        assert table.staff_id == staff_alice.pk
        assert table.order_placed_at is not None
        assert table.order[0]["food"]["name"] == "Nasi Goreng"
        assert table.order[0]["quantity"] == 1

    def test_resave_keeps_order_placed_at(self, logged_in_builder, nasi_goreng, table):
        """
        CRITICAL: Saving again does not move the order to the back of the kitchen queue
        """
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()
        table.refresh_from_db()
        first_placed_at = table.order_placed_at

        logged_in_builder.save_order()
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()

        table.refresh_from_db()
        assert table.order_placed_at == first_placed_at
        assert table.order[0]["quantity"] == 2

    def test_resave_keeps_kitchen_progress(self, logged_in_builder, nasi_goreng, table):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()
        TableRecord.objects.filter(pk=table.pk).update(kitchen_status=KitchenStatus.IN_PROGRESS)

        logged_in_builder.save_order()

        table.refresh_from_db()
        assert table.kitchen_status == KitchenStatus.IN_PROGRESS

    def test_empty_save_clears_table(self, logged_in_builder, nasi_goreng, table):
        """
        CRITICAL: Saving an empty order is a full clear, whatever the table's state
        """
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()
        TableRecord.objects.filter(pk=table.pk).update(status=TableStatus.ORDER_READY)
        logged_in_builder.refresh()

        logged_in_builder.remove_item(logged_in_builder.lines[0].line_id)
        logged_in_builder.save_order()

        table.refresh_from_db()
        assert table.status == TableStatus.AVAILABLE
        assert table.occupied is False
        assert table.occupied_by is None
        assert table.staff_id is None
        assert table.order == []
        assert table.kitchen_status is None

    def test_builder_mirrors_writes_from_other_screens(self, logged_in_builder, nasi_goreng, table):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()

        other = OrderBuilder(table.pk).open()
        assert len(other.lines) == 1

        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()

        assert other.lines[0].line.quantity == 2
        other.close()

    def test_line_ids_survive_own_save(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        line_id = logged_in_builder.lines[0].line_id

        logged_in_builder.save_order()

        assert logged_in_builder.lines[0].line_id == line_id

    def test_order_ready_table_requeued_when_order_changes(self, logged_in_builder, nasi_goreng, table):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()
        TableRecord.objects.filter(pk=table.pk).update(status=TableStatus.ORDER_READY)
        logged_in_builder.refresh()

        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()

        table.refresh_from_db()
        assert table.status == TableStatus.SERVING
        assert table.kitchen_status == KitchenStatus.PENDING


@pytest.mark.django_db
class TestPayment:
    """Taking payment records a transaction and frees the table"""

    def test_pay_empty_order(self, logged_in_builder):
        with pytest.raises(EmptyOrder):
            logged_in_builder.pay()

        assert Transaction.objects.count() == 0

    def test_pay_records_transaction_and_clears_table(self, logged_in_builder, nasi_goreng, table):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()

        receipt = logged_in_builder.pay()

        transaction = Transaction.objects.get()
        assert transaction.total == Decimal("240.00")
        assert transaction.tax == Decimal("20.00")
        assert transaction.service_charge == Decimal("20.00")
        assert transaction.staff_name == "Alice"
        assert transaction.table_name == "Table 1"
        assert transaction.items[0]["quantity"] == 2
        assert transaction.items[0]["total"] == "200.00"

        assert receipt["total"] == Decimal("240.00")
        assert receipt["staff_name"] == "Alice"
        assert receipt["currency"] == "IDR"

        table.refresh_from_db()
        assert table.status == TableStatus.AVAILABLE
        assert table.occupied is False
        assert table.order == []
        assert table.kitchen_status is None
        assert logged_in_builder.lines == []

    def test_pay_with_discounts(self, logged_in_builder, nasi_goreng, entire_order_discount):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.edit_item(logged_in_builder.lines[0].line_id, discount_percent="10")
        logged_in_builder.apply_storewide_discount(entire_order_discount)

        receipt = logged_in_builder.pay()

        assert receipt["discount"] == Decimal("19.00")
        assert receipt["discount_name"] == "Happy Hour"
        assert receipt["total"] == Decimal("97.20")
        assert logged_in_builder.storewide_discount is None

    def test_transaction_unaffected_by_later_price_change(self, logged_in_builder, nasi_goreng):
        """
        CRITICAL: A recorded transaction keeps the prices charged at payment time

        Business Impact: Editing the menu must never rewrite sales history
        """
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.pay()

        nasi_goreng.price = Decimal("150.00")
        nasi_goreng.save()

        transaction = Transaction.objects.get()
        assert transaction.items[0]["price"] == "100.00"
        assert transaction.total == Decimal("120.00")

    def test_transactions_cannot_be_modified(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.pay()
        transaction = Transaction.objects.get()

        transaction.total = Decimal("1.00")
        with pytest.raises(ValueError):
            transaction.save()

    def test_pay_on_deleted_table_is_rolled_back(self, logged_in_builder, nasi_goreng, table):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.close()
        TableRecord.objects.filter(pk=table.pk).delete()

        with pytest.raises(TableNotFound):
            logged_in_builder.pay()

        assert Transaction.objects.count() == 0
        assert len(logged_in_builder.lines) == 1
        assert logged_in_builder.last_receipt is None


@pytest.mark.django_db
class TestStoreOutage:
    """The POS screen keeps its last known order while the store is unreachable"""

    def test_outage_marks_disconnected_and_keeps_lines(self, logged_in_builder, nasi_goreng, table):
        logged_in_builder.add_item(nasi_goreng)
        logged_in_builder.save_order()

        with patch.object(TableRecord.objects, "filter", side_effect=DatabaseError("locked")):
            table_store.publish(table.pk)

        assert logged_in_builder.disconnected is True
        assert logged_in_builder.state()["disconnected"] is True
        assert len(logged_in_builder.lines) == 1
        assert logged_in_builder.table.status == TableStatus.SERVING

        table_store.publish(table.pk)

        assert logged_in_builder.disconnected is False
        assert len(logged_in_builder.lines) == 1

    def test_failed_save_leaves_local_order_intact(self, logged_in_builder, nasi_goreng):
        logged_in_builder.add_item(nasi_goreng)

        with patch.object(TableRecord.objects, "filter", side_effect=DatabaseError("locked")):
            with pytest.raises(StoreUnavailable):
                logged_in_builder.save_order()

        assert logged_in_builder.lines[0].line.quantity == 1
        assert logged_in_builder.session.is_authenticated
