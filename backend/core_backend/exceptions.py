"""
Domain exceptions shared by the POS apps, plus the DRF exception handler that
turns them into consistent API error responses.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base exception for POS domain errors."""

    code = "pos_error"
    default_message = "The operation could not be completed."

    def __init__(self, message=None, **details):
        self.details = details
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)


class NotAuthenticated(POSError):
    """Raised when an order mutation is attempted with no logged-in staff member."""

    code = "not_authenticated"
    default_message = "A staff member must log in before changing this order."


class InvalidPin(POSError):
    """Raised when the submitted PIN does not match the selected staff member."""

    code = "invalid_pin"
    default_message = "Incorrect PIN."


class StaffNotPermitted(POSError):
    """Raised when a staff member tries to take over a table owned by someone else."""

    code = "staff_not_permitted"

    def __init__(self, staff_name=None, owner_name=None, message=None):
        self.staff_name = staff_name
        self.owner_name = owner_name
        if message is None:
            message = f"This table is being served by {owner_name or 'another staff member'}."
        super().__init__(message, staff_name=staff_name, owner_name=owner_name)


class UnsavedOrderExists(POSError):
    """Raised when logging out while the order still holds unsaved lines."""

    code = "unsaved_order"
    default_message = "Save or clear the current order before logging out."


class EmptyOrder(POSError):
    """Raised when payment is attempted on an order with no lines."""

    code = "empty_order"
    default_message = "Cannot take payment for an empty order."


class DiscountNotActive(POSError):
    """Raised when a storewide discount is applied outside its active window."""

    code = "discount_not_active"

    def __init__(self, discount_name=None, message=None):
        self.discount_name = discount_name
        if message is None:
            message = f"Discount '{discount_name}' is not currently active."
        super().__init__(message, discount_name=discount_name)


class TableNotFound(POSError):
    """Raised when an order is paid for on a table that no longer exists."""

    code = "table_not_found"

    def __init__(self, table_id, message=None):
        self.table_id = table_id
        if message is None:
            message = f"Table {table_id} no longer exists."
        super().__init__(message, table_id=str(table_id))


class NotReady(POSError):
    """Raised when a table is marked as served before the kitchen marked it ready."""

    code = "not_ready"
    default_message = "The order is not yet marked as ready by the kitchen."


class LineNotFound(POSError):
    """Raised when an order line id does not exist in the current order."""

    code = "line_not_found"

    def __init__(self, line_id, message=None):
        self.line_id = line_id
        if message is None:
            message = f"Order line '{line_id}' not found."
        super().__init__(message, line_id=str(line_id))


class StaleTable(POSError):
    """
    Soft warning: the table changed underneath the caller and the requested
    transition no longer applies. Reported, never raised to the user flow.
    """

    code = "stale_table"

    def __init__(self, table_id, expected=None, actual=None, message=None):
        self.table_id = table_id
        self.expected = expected
        self.actual = actual
        if message is None:
            message = f"Table {table_id} is no longer in state '{expected}' (now '{actual}')."
        super().__init__(message, table_id=str(table_id), expected=expected, actual=actual)


class StoreUnavailable(POSError):
    """Raised when the table record store cannot be read, written or observed."""

    code = "store_unavailable"
    default_message = "The table store is unavailable. Please try again."


ERROR_STATUS_CODES = {
    NotAuthenticated: status.HTTP_401_UNAUTHORIZED,
    InvalidPin: status.HTTP_401_UNAUTHORIZED,
    StaffNotPermitted: status.HTTP_403_FORBIDDEN,
    LineNotFound: status.HTTP_404_NOT_FOUND,
    TableNotFound: status.HTTP_404_NOT_FOUND,
    DiscountNotActive: status.HTTP_409_CONFLICT,
    UnsavedOrderExists: status.HTTP_409_CONFLICT,
    NotReady: status.HTTP_409_CONFLICT,
    StaleTable: status.HTTP_409_CONFLICT,
    StoreUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_payload(exc):
    return {"error": exc.message, "code": exc.code}


def pos_exception_handler(exc, context):
    """
    DRF exception handler: POSError subclasses become `{"error", "code"}`
    responses, everything else falls through to the default handler.
    """
    if isinstance(exc, POSError):
        status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
        request = context.get("request")
        log = logger.error if status_code >= 500 else logger.info
        log(
            "POS API error %s on %s %s: %s",
            exc.code,
            getattr(request, "method", "-"),
            getattr(request, "path", "-"),
            exc.message,
        )
        return Response(error_payload(exc), status=status_code)

    return exception_handler(exc, context)
