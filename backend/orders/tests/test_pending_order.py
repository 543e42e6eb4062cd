"""
Pending-order tracker tests.

Front of house watches a table while the kitchen cooks. The table may only be
cleared once the kitchen says the order is ready.
"""
import pytest
from unittest.mock import patch
from django.db import DatabaseError

from core_backend.exceptions import NotReady
from kds.services import KitchenQueueProjector
from orders.services import PendingOrderTracker
from orders.services.pending_order_service import IN_PROGRESS, PENDING_IN_KITCHEN, READY_FOR_PICKUP
from tables.models import TableRecord
from tables.records import TableStatus
from tables.store import table_store


@pytest.mark.django_db
class TestDisplayStatus:
    def test_status_follows_kitchen_progress(self, serving_table):
        tracker = PendingOrderTracker(serving_table.pk).open()
        kitchen = KitchenQueueProjector()

        assert tracker.display_status == PENDING_IN_KITCHEN

        kitchen.accept_order(serving_table.pk)
        assert tracker.display_status == IN_PROGRESS

        kitchen.mark_prepared(serving_table.pk)
        assert tracker.display_status == READY_FOR_PICKUP
        tracker.close()


@pytest.mark.django_db
class TestMarkAsServed:
    """The serve gate between kitchen and an available table"""

    def test_serving_table_cannot_be_cleared(self, serving_table):
        """
        CRITICAL: A table whose food is still cooking cannot be marked as served
        """
        tracker = PendingOrderTracker(serving_table.pk).open()

        with pytest.raises(NotReady):
            tracker.mark_as_served()

        serving_table.refresh_from_db()
        assert serving_table.status == TableStatus.SERVING
        tracker.close()

    def test_ready_table_is_cleared_and_redirects(self, serving_table):
        redirects = []
        tracker = PendingOrderTracker(serving_table.pk, on_redirect=redirects.append).open()
        KitchenQueueProjector().mark_prepared(serving_table.pk)

        assert tracker.mark_as_served() is True

        serving_table.refresh_from_db()
        assert serving_table.status == TableStatus.AVAILABLE
        assert serving_table.occupied_by is None
        assert serving_table.staff_id is None
        assert serving_table.order == []
        assert serving_table.kitchen_status is None
        assert redirects == [serving_table.pk]
        tracker.close()

    def test_table_cleared_elsewhere_redirects_proactively(self, serving_table):
        redirects = []
        tracker = PendingOrderTracker(serving_table.pk, on_redirect=redirects.append).open()

        record = TableRecord.objects.get(pk=serving_table.pk)
        record.status = TableStatus.AVAILABLE
        record.order = []
        record.save()

        assert tracker.redirected is True
        assert redirects == [serving_table.pk]

    def test_stale_serve_is_a_warning(self, serving_table):
        """
        If the table left 'order_ready' after the screen rendered, serving is a no-op with a warning.
        """
        warnings = []
        tracker = PendingOrderTracker(serving_table.pk, on_warning=warnings.append)
        KitchenQueueProjector().mark_prepared(serving_table.pk)
        tracker.refresh()
        TableRecord.objects.filter(pk=serving_table.pk).update(status=TableStatus.SERVING)

        assert tracker.mark_as_served() is False

        serving_table.refresh_from_db()
        assert serving_table.status == TableStatus.SERVING
        assert warnings[0].code == "stale_table"


@pytest.mark.django_db
class TestStoreOutage:
    def test_last_status_is_kept_while_disconnected(self, serving_table):
        redirects = []
        tracker = PendingOrderTracker(serving_table.pk, on_redirect=redirects.append).open()

        with patch.object(TableRecord.objects, "filter", side_effect=DatabaseError("locked")):
            table_store.publish(serving_table.pk)

        assert tracker.disconnected is True
        assert tracker.state()["disconnected"] is True
        assert tracker.display_status == PENDING_IN_KITCHEN
        assert redirects == []

        KitchenQueueProjector().mark_prepared(serving_table.pk)

        assert tracker.disconnected is False
        assert tracker.display_status == READY_FOR_PICKUP
        tracker.close()
