import logging
from typing import List

from django.db import transaction

from .models import TableRecord
from .records import TableStatus, TableSnapshot
from .store import table_store, cleared_fields

logger = logging.getLogger(__name__)


class TableService:
    """Table lifecycle: create, rename, delete, list and reset tables."""

    VALID_STATUS_TRANSITIONS = {
        TableStatus.AVAILABLE: [
            TableStatus.AVAILABLE,
            TableStatus.SERVING,
        ],
        TableStatus.SERVING: [
            TableStatus.SERVING,
            TableStatus.ORDER_READY,
            TableStatus.AVAILABLE,
        ],
        TableStatus.ORDER_READY: [
            TableStatus.SERVING,  # order edited and re-saved after the kitchen finished
            TableStatus.AVAILABLE,
        ],
    }

    @staticmethod
    def can_transition(current_status, new_status) -> bool:
        current_status = current_status or TableStatus.AVAILABLE
        return new_status in TableService.VALID_STATUS_TRANSITIONS.get(current_status, [])

    @staticmethod
    def _clean_name(name) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("Table name cannot be blank.")
        return name

    @staticmethod
    @transaction.atomic
    def create_table(name) -> TableRecord:
        table = TableRecord.objects.create(name=TableService._clean_name(name))
        logger.info(f"Created table {table.pk} '{table.name}'")
        return table

    @staticmethod
    def rename_table(table_id, name) -> TableRecord:
        name = TableService._clean_name(name)
        table = TableRecord.objects.get(pk=table_id)
        table.name = name
        table.save(update_fields=["name"])
        logger.info(f"Renamed table {table.pk} to '{name}'")
        return table

    @staticmethod
    def delete_table(table_id):
        TableRecord.objects.filter(pk=table_id).delete()

    @staticmethod
    def list_tables() -> List[TableSnapshot]:
        return sorted(table_store.query(), key=lambda table: table.name.lower())

    @staticmethod
    def reset_table(table_id) -> bool:
        """Force a table back to available, discarding its order."""
        reset = table_store.write(table_id, cleared_fields())
        if reset:
            logger.info(f"Table {table_id} reset to available")
        return reset

    @staticmethod
    def open_for_order(table_id, on_change=None):
        """Hand a table to a new, subscribed Order Builder."""
        from orders.services import OrderBuilder

        table = TableRecord.objects.get(pk=table_id)
        builder = OrderBuilder(table.pk, on_change=on_change)
        builder.open()
        return builder
