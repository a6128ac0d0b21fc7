"""
Approval Chain Engine (``workforce_engines.approval``).

Responsibility
--------------
Pure evaluation of an ordered multi-level approval chain: where a new
request starts, where it goes after each approval, and who may act on it.

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O.  The chain itself is
supplied by the caller (from configuration).

Invariants enforced
-------------------
* Levels are walked in ascending ``level_no`` order.
* An empty chain approves immediately.
* Only the approver recorded as next approver may act.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class ApprovalStatus(Enum):
    """Approval state of a request; persisted as "N" / "A" / "R"."""

    PENDING = "N"
    APPROVED = "A"
    REJECTED = "R"


@dataclass(frozen=True)
class ApprovalLevel:
    level_no: int
    approver_id: str
    title: str = ""


@dataclass(frozen=True)
class ApprovalDecision:
    """Status plus who acts next (``None`` once the chain is finished)."""

    status: ApprovalStatus
    next_approver_id: str | None
    next_level: int | None

    @property
    def is_final(self) -> bool:
        return self.status is not ApprovalStatus.PENDING


def _ordered(chain: Sequence[ApprovalLevel]) -> list[ApprovalLevel]:
    return sorted(chain, key=lambda level: level.level_no)


def start_chain(chain: Sequence[ApprovalLevel]) -> ApprovalDecision:
    """Initial decision for a new request."""
    levels = _ordered(chain)
    if not levels:
        return ApprovalDecision(ApprovalStatus.APPROVED, None, None)
    first = levels[0]
    return ApprovalDecision(ApprovalStatus.PENDING, first.approver_id, first.level_no)


def advance_chain(chain: Sequence[ApprovalLevel], current_level: int | None) -> ApprovalDecision:
    """Decision after the approver at ``current_level`` approves."""
    for level in _ordered(chain):
        if current_level is None or level.level_no > current_level:
            return ApprovalDecision(ApprovalStatus.PENDING, level.approver_id, level.level_no)
    return ApprovalDecision(ApprovalStatus.APPROVED, None, None)


def reject_chain() -> ApprovalDecision:
    return ApprovalDecision(ApprovalStatus.REJECTED, None, None)


def can_act(next_approver_id: str | None, approver_id: str) -> bool:
    return next_approver_id is not None and next_approver_id == approver_id
