import json
import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async
from django.core.exceptions import ObjectDoesNotExist

from core_backend.exceptions import POSError
from discounts.services import DiscountService
from products.services import CatalogService
from staff.services import StaffRoster, StaffSessionGate
from tables.events import table_group_name
from tables.models import TableRecord
from .services import OrderBuilder, PendingOrderTracker

logger = logging.getLogger(__name__)


def convert_complex_types_to_str(data):
    """
    Recursively converts UUID, Decimal and datetime values in a data structure to strings.
    """
    if isinstance(data, dict):
        return {k: convert_complex_types_to_str(v) for k, v in data.items()}
    elif isinstance(data, (list, tuple)):
        return [convert_complex_types_to_str(elem) for elem in data]
    elif isinstance(data, UUID):
        return str(data)
    elif isinstance(data, Decimal):
        return str(data)
    elif isinstance(data, datetime):
        return data.isoformat()
    return data


class TableConsumerMixin:
    """Joins the table's group on connect and closes for unknown tables."""

    async def join_table(self):
        self.table_id = self.scope["url_route"]["kwargs"]["table_id"]
        self.table_group_name = table_group_name(self.table_id)

        exists = await database_sync_to_async(TableRecord.objects.filter(pk=self.table_id).exists)()
        if not exists:
            logger.warning(f"{type(self).__name__}: table {self.table_id} does not exist. Closing connection.")
            await self.close()
            return False

        await self.channel_layer.group_add(self.table_group_name, self.channel_name)
        await self.accept()
        return True

    async def leave_table(self):
        if getattr(self, "table_group_name", None):
            await self.channel_layer.group_discard(self.table_group_name, self.channel_name)

    async def send_json(self, payload):
        await self.send(text_data=json.dumps(convert_complex_types_to_str(payload)))

    async def send_error(self, error, operation_id=None):
        await self.send_json(
            {
                "type": "error",
                "operationId": operation_id,
                "code": error.code,
                "message": error.message,
            }
        )


class PosConsumer(TableConsumerMixin, AsyncWebsocketConsumer):
    """
    One POS screen for one table: a staff session gate plus an order builder.

    Client messages are `{"type": ..., "payload": {...}, "operationId": ...}`;
    every handled message is answered with the full order state.
    """

    async def connect(self):
        self.builder = None
        if not await self.join_table():
            return

        self.builder = OrderBuilder(self.table_id, session=StaffSessionGate())
        await database_sync_to_async(self.builder.open)()
        logger.info(f"PosConsumer: connected to table {self.table_id}")
        await self.send_state()

    async def disconnect(self, close_code):
        if self.builder is not None:
            await database_sync_to_async(self.builder.close)()
        await self.leave_table()

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error(POSError("Invalid JSON format"))
            return

        message_type = data.get("type")
        payload = data.get("payload") or {}
        operation_id = data.get("operationId")

        handler = self.HANDLERS.get(message_type)
        if handler is None:
            await self.send_error(POSError(f"Unknown message type: {message_type}"), operation_id)
            return

        try:
            result = await database_sync_to_async(handler)(self, payload)
        except POSError as e:
            logger.info(f"PosConsumer: {message_type} rejected on table {self.table_id}: {e.code}")
            await self.send_error(e, operation_id)
        except ObjectDoesNotExist as e:
            await self.send_error(POSError(str(e)), operation_id)
        else:
            if message_type == "pay":
                await self.send_json({"type": "receipt", "operationId": operation_id, "receipt": result})

        await self.send_state(operation_id)

    async def send_state(self, operation_id=None):
        state = await database_sync_to_async(self.builder.state)()
        await self.send_json({"type": "order_state", "operationId": operation_id, "state": state})

    async def table_changed(self, event):
        await database_sync_to_async(self.builder.refresh)()
        await self.send_state()

    # Handlers run in the sync thread with ORM access.

    def _select_staff(self, payload):
        staff = StaffRoster.get_staff(payload.get("staff_id"))
        self.builder.session.select_staff(staff, table=self.builder.table)

    def _submit_pin(self, payload):
        self.builder.session.submit_pin(payload.get("pin"))

    def _cancel_pin(self, payload):
        self.builder.session.cancel()

    def _logout(self, payload):
        self.builder.logout(force=bool(payload.get("force", False)))

    def _add_item(self, payload):
        self.builder.add_item(CatalogService.get_food(payload.get("food_id")))

    def _increment(self, payload):
        self.builder.increment_quantity(payload.get("line_id"))

    def _decrement(self, payload):
        self.builder.decrement_quantity(payload.get("line_id"))

    def _remove_item(self, payload):
        self.builder.remove_item(payload.get("line_id"))

    def _edit_item(self, payload):
        self.builder.edit_item(
            payload.get("line_id"),
            quantity=payload.get("quantity"),
            discount_percent=payload.get("discount"),
            note=payload.get("note"),
        )

    def _begin_edit(self, payload):
        self.builder.begin_edit(payload.get("line_id"))

    def _update_editor(self, payload):
        self.builder.update_editor(
            quantity=payload.get("quantity"),
            discount=payload.get("discount"),
            note=payload.get("note"),
        )

    def _commit_edit(self, payload):
        self.builder.commit_edit()

    def _cancel_edit(self, payload):
        self.builder.cancel_edit()

    def _apply_discount(self, payload):
        self.builder.apply_storewide_discount(
            DiscountService.get_applicable_discount(payload.get("discount_id"))
        )

    def _clear_discount(self, payload):
        self.builder.clear_storewide_discount()

    def _save_order(self, payload):
        self.builder.save_order()

    def _pay(self, payload):
        return self.builder.pay()

    def _refresh(self, payload):
        self.builder.refresh()

    HANDLERS = {
        "select_staff": _select_staff,
        "submit_pin": _submit_pin,
        "cancel_pin": _cancel_pin,
        "logout": _logout,
        "add_item": _add_item,
        "increment_quantity": _increment,
        "decrement_quantity": _decrement,
        "remove_item": _remove_item,
        "edit_item": _edit_item,
        "begin_edit": _begin_edit,
        "update_editor": _update_editor,
        "commit_edit": _commit_edit,
        "cancel_edit": _cancel_edit,
        "apply_discount": _apply_discount,
        "clear_discount": _clear_discount,
        "save_order": _save_order,
        "pay": _pay,
        "refresh": _refresh,
    }


class PendingOrderConsumer(TableConsumerMixin, AsyncWebsocketConsumer):
    """Front-of-house view of one table's order while the kitchen works on it."""

    async def connect(self):
        self.tracker = None
        if not await self.join_table():
            return

        self.warnings = []
        self.tracker = PendingOrderTracker(self.table_id, on_warning=self.warnings.append)
        await database_sync_to_async(self.tracker.open)()
        await self.send_state()

    async def disconnect(self, close_code):
        if self.tracker is not None:
            await database_sync_to_async(self.tracker.close)()
        await self.leave_table()

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error(POSError("Invalid JSON format"))
            return

        action = data.get("action")
        operation_id = data.get("operationId")

        if action == "mark_as_served":
            try:
                await database_sync_to_async(self.tracker.mark_as_served)()
            except POSError as e:
                await self.send_error(e, operation_id)
        elif action == "refresh":
            await database_sync_to_async(self.tracker.refresh)()
        else:
            await self.send_error(POSError(f"Unknown action: {action}"), operation_id)
            return

        while self.warnings:
            await self.send_error(self.warnings.pop(0), operation_id)
        await self.send_state(operation_id)

    async def send_state(self, operation_id=None):
        await self.send_json(
            {"type": "pending_order", "operationId": operation_id, "state": self.tracker.state()}
        )

    async def table_changed(self, event):
        await database_sync_to_async(self.tracker.refresh)()
        await self.send_state()
