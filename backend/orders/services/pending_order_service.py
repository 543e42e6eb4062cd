import logging

from core_backend.exceptions import NotReady, StaleTable, StoreUnavailable
from tables.records import KitchenStatus, TableStatus
from tables.store import table_store, cleared_fields

logger = logging.getLogger(__name__)

READY_FOR_PICKUP = "Ready for Pickup"
IN_PROGRESS = "In Progress"
PENDING_IN_KITCHEN = "Pending in Kitchen"


def display_status(snapshot) -> str:
    if snapshot is None:
        return PENDING_IN_KITCHEN
    if snapshot.status == TableStatus.ORDER_READY:
        return READY_FOR_PICKUP
    if snapshot.status == TableStatus.SERVING and snapshot.kitchen_status == KitchenStatus.IN_PROGRESS:
        return IN_PROGRESS
    return PENDING_IN_KITCHEN


class PendingOrderTracker:
    """
    Front-of-house view of one table after its order went to the kitchen.

    `on_redirect` is called once the table is back to available, whether this
    tracker cleared it or someone else did.
    """

    def __init__(self, table_id, store=None, on_change=None, on_redirect=None, on_warning=None):
        self.table_id = table_id
        self.store = store or table_store
        self.on_change = on_change
        self.on_redirect = on_redirect
        self.on_warning = on_warning

        self.table = None
        self.disconnected = False
        self.redirected = False
        self._unsubscribe = None

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
        try:
            snapshot = self.store.read(self.table_id)
        except StoreUnavailable as e:
            self._on_store_error(e)
            return
        self._on_snapshot(snapshot)

    @property
    def display_status(self) -> str:
        return display_status(self.table)

    def _on_snapshot(self, snapshot):
        self.table = snapshot
        self.disconnected = False
        if not snapshot.exists or snapshot.is_available:
            self._redirect()
        if self.on_change:
            self.on_change(self)

    def _on_store_error(self, error):
        if not self.disconnected:
            logger.warning(f"Pending order view for table {self.table_id} disconnected: {error}")
        self.disconnected = True
        if self.on_change:
            self.on_change(self)

    def _redirect(self):
        if self.redirected:
            return
        self.redirected = True
        logger.info(f"Table {self.table_id} is available, leaving the pending order view")
        if self.on_redirect:
            self.on_redirect(self.table_id)

    def _warn(self, warning):
        logger.warning(warning.message)
        if self.on_warning:
            self.on_warning(warning)

    def mark_as_served(self) -> bool:
        """
        Clear the table once the kitchen marked the order ready.
        Returns False (with a StaleTable warning) when the table changed first.
        """
        if self.table is None or self.table.status != TableStatus.ORDER_READY:
            raise NotReady()

        cleared = self.store.write(
            self.table_id,
            cleared_fields(),
            expected={"status": TableStatus.ORDER_READY},
        )
        if not cleared:
            current = self.store.read(self.table_id)
            self._warn(StaleTable(self.table_id, expected=TableStatus.ORDER_READY, actual=current.status))
            return False

        logger.info(f"Table {self.table_id} served and cleared")
        self._redirect()
        return True

    def state(self) -> dict:
        return {
            "table": self.table.to_dict() if self.table else None,
            "display_status": self.display_status,
            "disconnected": self.disconnected,
            "redirect": self.redirected,
        }
