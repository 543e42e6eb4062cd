"""
Table record store.

Reads and writes go through the ORM; every committed change to a
`TableRecord` is fanned out to in-process subscribers (synchronously, from the
`post_save`/`post_delete` signals) and to Channels groups once the surrounding
transaction commits (see `tables.signals`).
"""
import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from django.db import DatabaseError, transaction

from core_backend.exceptions import StoreUnavailable
from .models import TableRecord
from .records import TableSnapshot, TableStatus

logger = logging.getLogger(__name__)


def cleared_fields():
    """Fields written by a full clear: the table returns to available with no order."""
    return {
        "status": TableStatus.AVAILABLE,
        "occupied": False,
        "occupied_by": None,
        "staff_id": None,
        "order": [],
        "order_placed_at": None,
        "kitchen_status": None,
    }


@dataclass
class Subscription:
    token: int
    on_snapshot: Callable
    on_error: Optional[Callable] = None
    table_id: Optional[int] = None
    filters: Optional[dict] = None

    @property
    def is_query(self):
        return self.filters is not None


class TableRecordStore:
    WRITABLE_FIELDS = {
        "name",
        "status",
        "occupied",
        "occupied_by",
        "staff_id",
        "order",
        "order_placed_at",
        "kitchen_status",
    }

    def __init__(self):
        self._subscriptions = {}
        self._tokens = itertools.count(1)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Reads and writes
    # ------------------------------------------------------------------

    def read(self, table_id) -> TableSnapshot:
        try:
            record = TableRecord.objects.filter(pk=table_id).first()
        except DatabaseError as e:
            logger.error(f"Store read failed for table {table_id}: {e}")
            raise StoreUnavailable() from e
        if record is None:
            return TableSnapshot.missing(table_id)
        return TableSnapshot.from_record(record)

    def query(self, **filters):
        try:
            return [
                TableSnapshot.from_record(record)
                for record in TableRecord.objects.filter(**filters)
            ]
        except DatabaseError as e:
            logger.error(f"Store query failed for {filters}: {e}")
            raise StoreUnavailable() from e

    def write(self, table_id, fields: dict, expected: Optional[dict] = None) -> bool:
        """
        Merge `fields` into the table record.

        `expected` maps field names to the value (or collection of values) the
        record must currently hold; the write is skipped and False returned when
        any of them differ, or when the table no longer exists.
        """
        unknown = (set(fields) | set(expected or {})) - self.WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown table fields: {', '.join(sorted(unknown))}")

        try:
            with transaction.atomic():
                record = TableRecord.objects.select_for_update().filter(pk=table_id).first()
                if record is None:
                    logger.warning(f"Write to missing table {table_id} ignored")
                    return False
                mismatch = self._first_mismatch(record, expected or {})
                if mismatch:
                    logger.info(f"Conditional write to table {table_id} skipped: {mismatch}")
                    return False
                for name, value in fields.items():
                    setattr(record, name, value)
                record.save(update_fields=list(fields))
        except DatabaseError as e:
            logger.error(f"Store write failed for table {table_id}: {e}")
            raise StoreUnavailable() from e
        return True

    @staticmethod
    def _first_mismatch(record, expected):
        for name, allowed in expected.items():
            if isinstance(allowed, str) or allowed is None:
                allowed = {allowed}
            actual = getattr(record, name)
            if name == "status":
                actual = actual or TableStatus.AVAILABLE
            if actual not in allowed:
                return f"{name} is '{actual}'"
        return None

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, table_id, on_snapshot, on_error=None):
        """
        Observe one table. `on_snapshot(TableSnapshot)` is called immediately
        with the current state and again after every change.
        Returns an unsubscribe callable.
        """
        subscription = self._register(
            Subscription(token=next(self._tokens), on_snapshot=on_snapshot, on_error=on_error, table_id=table_id)
        )
        self._deliver(subscription)
        return lambda: self.unsubscribe(subscription.token)

    def subscribe_query(self, filters: dict, on_snapshot, on_error=None):
        """
        Observe every table matching the ORM `filters`. `on_snapshot` receives
        the full list of matching TableSnapshots each time any table changes.
        """
        subscription = self._register(
            Subscription(token=next(self._tokens), on_snapshot=on_snapshot, on_error=on_error, filters=dict(filters))
        )
        self._deliver(subscription)
        return lambda: self.unsubscribe(subscription.token)

    def unsubscribe(self, token):
        with self._lock:
            self._subscriptions.pop(token, None)

    def subscriber_count(self):
        with self._lock:
            return len(self._subscriptions)

    def publish(self, table_id):
        """Deliver fresh snapshots to every subscriber affected by a change to `table_id`."""
        with self._lock:
            subscriptions = list(self._subscriptions.values())
        for subscription in subscriptions:
            if subscription.is_query or str(subscription.table_id) == str(table_id):
                self._deliver(subscription)

    def clear_subscriptions(self):
        with self._lock:
            self._subscriptions.clear()

    def _register(self, subscription):
        with self._lock:
            self._subscriptions[subscription.token] = subscription
        return subscription

    def _deliver(self, subscription):
        try:
            if subscription.is_query:
                payload = self.query(**subscription.filters)
            else:
                payload = self.read(subscription.table_id)
        except StoreUnavailable as e:
            if subscription.on_error:
                subscription.on_error(e)
            return

        try:
            subscription.on_snapshot(payload)
        except Exception:
            logger.exception(f"Subscriber {subscription.token} failed to handle snapshot")


table_store = TableRecordStore()
