import logging
from datetime import datetime, timezone as dt_timezone
from typing import Iterable, List

from core_backend.exceptions import StaleTable, StoreUnavailable
from tables.records import KitchenStatus, TableStatus
from tables.store import table_store

logger = logging.getLogger(__name__)

_NEVER_PLACED = datetime.max.replace(tzinfo=dt_timezone.utc)


class KitchenQueueProjector:
    """
    Live kitchen queue: every table being served with a non-empty order,
    oldest placement first.

    `accept_order` and `mark_prepared` are conditional on the table still being
    in the expected state. When it is not, the action is skipped and a
    StaleTable warning is passed to `on_warning` instead of being raised.
    """

    def __init__(self, store=None, on_change=None, on_warning=None):
        self.store = store or table_store
        self.on_change = on_change
        self.on_warning = on_warning

        self.orders = []
        self.disconnected = False
        self._unsubscribe = None

    @staticmethod
    def project(tables: Iterable) -> List:
        active = [
            table
            for table in tables
            if table.exists and table.status == TableStatus.SERVING and table.order
        ]
        return sorted(
            active,
            key=lambda table: (table.order_placed_at or _NEVER_PLACED, str(table.id)),
        )

    def open(self):
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe_query(
                {"status": TableStatus.SERVING}, self._on_snapshots, self._on_store_error
            )
        return self

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def refresh(self):
        try:
            tables = self.store.query(status=TableStatus.SERVING)
        except StoreUnavailable as e:
            self._on_store_error(e)
            return
        self._on_snapshots(tables)

    def _on_snapshots(self, tables):
        self.orders = self.project(tables)
        self.disconnected = False
        if self.on_change:
            self.on_change(self)

    def _on_store_error(self, error):
        if not self.disconnected:
            logger.warning(f"Kitchen queue disconnected: {error}")
        self.disconnected = True
        if self.on_change:
            self.on_change(self)

    def _warn(self, table_id, expected):
        current = self.store.read(table_id)
        warning = StaleTable(table_id, expected=expected, actual=current.status if current.exists else None)
        logger.warning(warning.message)
        if self.on_warning:
            self.on_warning(warning)

    def accept_order(self, table_id) -> bool:
        """Start cooking: serving/pending becomes serving/in_progress."""
        accepted = self.store.write(
            table_id,
            {"kitchen_status": KitchenStatus.IN_PROGRESS},
            expected={
                "status": TableStatus.SERVING,
                "kitchen_status": {KitchenStatus.PENDING, None},
            },
        )
        if accepted:
            logger.info(f"Kitchen accepted order for table {table_id}")
        else:
            self._warn(table_id, expected=f"{TableStatus.SERVING}/{KitchenStatus.PENDING}")
        return accepted

    def mark_prepared(self, table_id) -> bool:
        """The order is ready for pickup: serving becomes order_ready."""
        prepared = self.store.write(
            table_id,
            {"status": TableStatus.ORDER_READY},
            expected={"status": TableStatus.SERVING},
        )
        if prepared:
            logger.info(f"Kitchen marked order for table {table_id} as prepared")
        else:
            self._warn(table_id, expected=TableStatus.SERVING)
        return prepared

    def state(self) -> dict:
        return {
            "orders": [table.to_dict() for table in self.orders],
            "disconnected": self.disconnected,
        }
