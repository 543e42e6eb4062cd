import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)

KITCHEN_QUEUE_GROUP = "kitchen_queue"


def table_group_name(table_id):
    return f"table_{table_id}"


class TableEventPublisher:
    """Broadcasts table record changes to WebSocket consumers."""

    @staticmethod
    def table_changed(snapshot):
        # Consumers re-read the store, so the broadcast must not precede the commit.
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(lambda: TableEventPublisher._broadcast(snapshot))
        else:
            TableEventPublisher._broadcast(snapshot)

    @staticmethod
    def _broadcast(snapshot):
        channel_layer = get_channel_layer()
        if not channel_layer:
            logger.warning("No channel layer available for table notifications")
            return

        message = {
            "type": "table_changed",
            "table_id": snapshot.id,
            "table": snapshot.to_dict(),
        }
        try:
            async_to_sync(channel_layer.group_send)(table_group_name(snapshot.id), message)
            async_to_sync(channel_layer.group_send)(KITCHEN_QUEUE_GROUP, message)
            logger.debug(f"Broadcast change of table {snapshot.id} ({snapshot.status})")
        except Exception as e:
            logger.error(f"Error broadcasting change of table {snapshot.id}: {e}")
