import enum
import logging
from typing import List, Optional

from core_backend.exceptions import (
    InvalidPin,
    POSError,
    StaffNotPermitted,
    UnsavedOrderExists,
)
from .models import StaffMember

logger = logging.getLogger(__name__)


class StaffRoster:
    @staticmethod
    def list_staff() -> List[StaffMember]:
        return list(StaffMember.objects.filter(is_active=True))

    @staticmethod
    def get_staff(staff_id) -> StaffMember:
        return StaffMember.objects.get(pk=staff_id, is_active=True)


class SessionState(str, enum.Enum):
    LOGGED_OUT = "logged_out"
    PIN_PENDING = "pin_pending"
    LOGGED_IN = "logged_in"


class StaffSessionGate:
    """
    PIN gate for one POS screen.

    LOGGED_OUT --select_staff--> PIN_PENDING --submit_pin--> LOGGED_IN --logout--> LOGGED_OUT

    While a table is occupied, only the staff member who occupies it may be
    selected. A wrong PIN keeps the gate in PIN_PENDING for the same staff member.
    """

    def __init__(self):
        self.state = SessionState.LOGGED_OUT
        self.staff: Optional[StaffMember] = None

    @property
    def is_authenticated(self):
        return self.state == SessionState.LOGGED_IN

    @staticmethod
    def selectable_staff(table=None) -> List[StaffMember]:
        """Staff that may be selected for `table` (a TableSnapshot or None)."""
        roster = StaffRoster.list_staff()
        if table is not None and table.occupied and table.staff_id is not None:
            return [member for member in roster if member.pk == table.staff_id]
        return roster

    def select_staff(self, staff: StaffMember, table=None):
        if self.state == SessionState.LOGGED_IN:
            raise POSError("Log out before selecting another staff member.")

        if table is not None and table.occupied and table.staff_id is not None:
            if staff.pk != table.staff_id:
                logger.info(
                    f"Staff '{staff.name}' refused on table {table.id}, "
                    f"occupied by '{table.occupied_by}'"
                )
                raise StaffNotPermitted(staff_name=staff.name, owner_name=table.occupied_by)

        self.state = SessionState.PIN_PENDING
        self.staff = staff

    def submit_pin(self, pin):
        if self.state != SessionState.PIN_PENDING:
            raise POSError("Select a staff member before entering a PIN.")

        if not self.staff.check_pin(pin):
            logger.info(f"Invalid PIN for staff '{self.staff.name}'")
            raise InvalidPin()

        self.state = SessionState.LOGGED_IN
        logger.info(f"Staff '{self.staff.name}' logged in")
        return self.staff

    def cancel(self):
        """Back out of PIN entry."""
        if self.state == SessionState.PIN_PENDING:
            self.state = SessionState.LOGGED_OUT
            self.staff = None

    def logout(self, has_lines=False, force=False):
        if self.state != SessionState.LOGGED_IN:
            return
        if has_lines and not force:
            raise UnsavedOrderExists()

        logger.info(f"Staff '{self.staff.name}' logged out{' (forced)' if force else ''}")
        self.state = SessionState.LOGGED_OUT
        self.staff = None

    def current_session(self):
        return {
            "state": self.state.value,
            "staff_id": self.staff.pk if self.staff else None,
            "staff_name": self.staff.name if self.staff else None,
        }
