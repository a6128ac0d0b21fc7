"""
Approval workflow (``workforce_modules.payroll.approval``).

Responsibility
--------------
The payroll engine hands a new salary header to an ``ApprovalWorkflow`` to
obtain its initial status and first approver, and consults it again as
approvers act.  ``ConfigApprovalWorkflow`` walks the ordered approval
chains declared in configuration, delegating the chain arithmetic to
``workforce_engines.approval``.

Architecture position
---------------------
**Modules layer** -- collaborator.  No persistence; the payroll service
stores the decision on the header.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from workforce_engines.approval import (
    ApprovalDecision,
    ApprovalLevel,
    advance_chain,
    can_act,
    start_chain,
)
from workforce_kernel.logging_config import get_logger

logger = get_logger("modules.payroll.approval")


@runtime_checkable
class ApprovalWorkflow(Protocol):
    def initialize(
        self,
        request_type: str,
        employee_no: str,
        amount: Decimal,
        request_date: date,
    ) -> ApprovalDecision: ...

    def move_to_next_level(self, request_type: str, current_level: int | None) -> ApprovalDecision: ...

    def can_approve(self, next_approver_id: str | None, approver_id: str) -> bool: ...


class ConfigApprovalWorkflow:
    """Approval chains keyed by request type.

    A request type with no configured chain is approved immediately.
    """

    def __init__(self, chains: Mapping[str, Sequence[ApprovalLevel]] | None = None):
        self._chains = {key: tuple(levels) for key, levels in (chains or {}).items()}

    def chain_for(self, request_type: str) -> tuple[ApprovalLevel, ...]:
        return self._chains.get(request_type, ())

    def initialize(
        self,
        request_type: str,
        employee_no: str,
        amount: Decimal,
        request_date: date,
    ) -> ApprovalDecision:
        decision = start_chain(self.chain_for(request_type))
        logger.info(
            "approval_initialized",
            extra={
                "request_type": request_type,
                "employee_no": employee_no,
                "amount": str(amount),
                "request_date": request_date.isoformat(),
                "status": decision.status.value,
                "next_approver_id": decision.next_approver_id,
                "next_level": decision.next_level,
            },
        )
        return decision

    def move_to_next_level(self, request_type: str, current_level: int | None) -> ApprovalDecision:
        decision = advance_chain(self.chain_for(request_type), current_level)
        logger.info(
            "approval_level_advanced",
            extra={
                "request_type": request_type,
                "from_level": current_level,
                "status": decision.status.value,
                "next_level": decision.next_level,
            },
        )
        return decision

    def can_approve(self, next_approver_id: str | None, approver_id: str) -> bool:
        return can_act(next_approver_id, approver_id)
