import logging
from typing import Iterable, Optional

from django.db import transaction

from settings.config import app_settings
from .models import Transaction
from .money import quantize

logger = logging.getLogger(__name__)


class TransactionLedger:
    """Append-only ledger of paid orders."""

    @staticmethod
    def _item_snapshot(line, currency) -> dict:
        return {
            "id": line.food.id,
            "name": line.food.name,
            "price": str(line.food.price),
            "quantity": line.quantity,
            "discount": str(line.discount) if line.discount else None,
            "note": line.note,
            "total": str(quantize(currency, line.net_total)),
        }

    @staticmethod
    @transaction.atomic
    def append(
        *,
        table,
        staff,
        lines: Iterable,
        totals,
        storewide_discount=None,
        currency: Optional[str] = None,
    ) -> Transaction:
        """
        Record a payment. `table` is a TableSnapshot, `staff` a StaffMember (or
        None), `totals` the unrounded OrderTotals; amounts are stored rounded
        to the currency's minor unit.
        """
        currency = currency or app_settings.currency
        rounded = totals.quantized(currency)

        record = Transaction.objects.create(
            table_id=table.id if table.exists else None,
            table_name=table.name,
            staff_id=staff.pk if staff else None,
            staff_name=staff.name if staff else "",
            items=[TransactionLedger._item_snapshot(line, currency) for line in lines],
            subtotal=rounded.subtotal,
            line_discount_total=rounded.line_discount_total,
            storewide_discount_total=rounded.storewide_discount_total,
            discount_total=quantize(currency, totals.total_discount),
            discount_name=storewide_discount.name if storewide_discount else "",
            tax=rounded.tax,
            service_charge=rounded.service_charge,
            total=rounded.total,
            currency=currency,
        )
        logger.info(
            f"Recorded transaction {record.id} for table '{table.name}': {record.total} {currency}"
        )
        return record

    @staticmethod
    def list_transactions(start_date=None, end_date=None):
        """Newest first; both date bounds are inclusive calendar dates."""
        queryset = Transaction.objects.order_by("-created_at")
        if start_date:
            queryset = queryset.filter(created_at__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__date__lte=end_date)
        return queryset

    @staticmethod
    def build_receipt(record: Transaction) -> dict:
        """Everything the receipt screen prints for one transaction."""
        receipt_config = app_settings.get_receipt_config()
        return {
            "transaction_id": str(record.id),
            "brand_name": receipt_config["brand_name"],
            "footer": receipt_config["footer"],
            "table_name": record.table_name,
            "staff_name": record.staff_name,
            "items": record.items,
            "subtotal": record.subtotal,
            "tax": record.tax,
            "service_charge": record.service_charge,
            "discount": record.discount_total,
            "discount_name": record.discount_name,
            "total": record.total,
            "currency": record.currency,
            "created_at": record.created_at,
        }
