import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async

from core_backend.exceptions import POSError
from orders.consumers import convert_complex_types_to_str
from tables.events import KITCHEN_QUEUE_GROUP
from .services import KitchenQueueProjector

logger = logging.getLogger(__name__)


class KitchenQueueConsumer(AsyncWebsocketConsumer):
    """WebSocket consumer for the kitchen queue screen"""

    async def connect(self):
        self.group_name = KITCHEN_QUEUE_GROUP
        self.warnings = []
        self.projector = KitchenQueueProjector(on_warning=self.warnings.append)

        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

        await database_sync_to_async(self.projector.open)()
        await self.send_queue()
        logger.info("Kitchen queue WebSocket connected")

    async def disconnect(self, close_code):
        await database_sync_to_async(self.projector.close)()
        await self.channel_layer.group_discard(self.group_name, self.channel_name)
        logger.info(f"Kitchen queue WebSocket disconnected: code={close_code}")

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error(POSError("Invalid JSON format"))
            return

        action = data.get("action")
        operation_id = data.get("operationId")
        logger.debug(f"Kitchen queue action: {action}")

        if action in ("accept_order", "mark_prepared"):
            table_id = data.get("table_id")
            if table_id is None:
                await self.send_error(POSError("Missing table_id"), operation_id)
                return
            try:
                await database_sync_to_async(getattr(self.projector, action))(table_id)
            except POSError as e:
                logger.warning(f"Kitchen queue: {action} failed for table {table_id}: {e.code}")
                await self.send_error(e, operation_id)
        elif action == "refresh":
            await database_sync_to_async(self.projector.refresh)()
        else:
            await self.send_error(POSError(f"Unknown action: {action}"), operation_id)
            return

        while self.warnings:
            await self.send_error(self.warnings.pop(0), operation_id)
        await self.send_queue(operation_id)

    async def send_queue(self, operation_id=None):
        await self.send(text_data=json.dumps(convert_complex_types_to_str({
            "type": "kitchen_queue",
            "operationId": operation_id,
            "state": self.projector.state(),
        })))

    async def send_error(self, error, operation_id=None):
        await self.send(text_data=json.dumps({
            "type": "error",
            "operationId": operation_id,
            "code": error.code,
            "message": error.message,
        }))

    # Event handlers for group messages
    async def table_changed(self, event):
        await database_sync_to_async(self.projector.refresh)()
        await self.send_queue()
