"""
Base for collaborator services that write inside someone else's transaction.

The loan ledger, the allowance/deduction synchronizer, the entry service and
the SQL calendar only ever ``flush()``.  ``AttendanceService`` and
``PayrollService`` own commit and rollback, so an installment is marked paid
in the same commit as the salary header that consumed it, and an attendance
record is closed in the same commit as the entries derived from it.
"""

from abc import ABC
from uuid import UUID

from sqlalchemy.orm import Session

# Recorded as creator on rows written by automated jobs when no HR user is
# involved: auto checkout, absence marking, synchronizer, batch payroll.
SYSTEM_ACTOR_ID = UUID("00000000-0000-0000-0000-000000000001")


class BaseService(ABC):
    """Holds the session.  Subclasses never commit or roll back."""

    def __init__(self, session: Session):
        self.session = session
