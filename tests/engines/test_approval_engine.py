"""
Tests for the approval chain engine.
"""

from workforce_engines.approval import (
    ApprovalLevel,
    ApprovalStatus,
    advance_chain,
    can_act,
    reject_chain,
    start_chain,
)

CHAIN = (
    ApprovalLevel(level_no=2, approver_id="FINANCE_MANAGER"),
    ApprovalLevel(level_no=1, approver_id="HR_MANAGER"),
    ApprovalLevel(level_no=3, approver_id="CFO"),
)


class TestStartChain:

    def test_starts_at_lowest_level(self):
        decision = start_chain(CHAIN)
        assert decision.status is ApprovalStatus.PENDING
        assert decision.next_approver_id == "HR_MANAGER"
        assert decision.next_level == 1
        assert not decision.is_final

    def test_empty_chain_approves_immediately(self):
        decision = start_chain(())
        assert decision.status is ApprovalStatus.APPROVED
        assert decision.next_approver_id is None
        assert decision.is_final


class TestAdvanceChain:

    def test_walks_levels_in_order(self):
        second = advance_chain(CHAIN, 1)
        assert (second.next_level, second.next_approver_id) == (2, "FINANCE_MANAGER")
        third = advance_chain(CHAIN, 2)
        assert (third.next_level, third.next_approver_id) == (3, "CFO")

    def test_last_level_approves(self):
        decision = advance_chain(CHAIN, 3)
        assert decision.status is ApprovalStatus.APPROVED
        assert decision.next_level is None

    def test_gap_in_level_numbers(self):
        chain = (ApprovalLevel(1, "A"), ApprovalLevel(5, "B"))
        assert advance_chain(chain, 1).next_approver_id == "B"


class TestRejectAndAuthority:

    def test_reject(self):
        decision = reject_chain()
        assert decision.status is ApprovalStatus.REJECTED
        assert decision.is_final

    def test_only_next_approver_may_act(self):
        assert can_act("HR_MANAGER", "HR_MANAGER")
        assert not can_act("HR_MANAGER", "FINANCE_MANAGER")
        assert not can_act(None, "HR_MANAGER")

    def test_status_codes(self):
        assert ApprovalStatus.PENDING.value == "N"
        assert ApprovalStatus.APPROVED.value == "A"
        assert ApprovalStatus.REJECTED.value == "R"
