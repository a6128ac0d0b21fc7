"""
Payroll settings: who is paid, how partial months are prorated, which
approval chain gates a salary header, and how wide a batch run fans out.

The ``payroll`` section of the engine YAML feeds ``from_dict``.
"""

from dataclasses import dataclass, field
from typing import Self

from workforce_kernel.logging_config import get_logger
from workforce_modules.directory import EmploymentStatus

logger = get_logger("modules.payroll.config")

VALID_EMPLOYMENT_STATUSES = {s.value for s in EmploymentStatus}


@dataclass
class PayrollConfig:
    """
    Eligibility needs both a whitelisted contract type and an eligible
    employment status.  For a site that also pays permanent staff:

        PayrollConfig(
            eligible_contract_types=("TECHNO", "PERMANENT"),
            batch_max_workers=8,
        )
    """

    # Eligibility
    eligible_contract_types: tuple[str, ...] = field(default_factory=lambda: ("TECHNO",))
    eligible_employment_statuses: tuple[str, ...] = field(
        default_factory=lambda: ("ACTIVE", "ON_LEAVE")
    )

    # Proration (flat divisor, not calendar month length)
    proration_divisor: int = 30

    # Approval
    approval_request_type: str = "PAYROLL"

    # Batch runs
    batch_max_workers: int = 4

    def __post_init__(self):
        if not self.eligible_contract_types:
            raise ValueError("eligible_contract_types cannot be empty")
        invalid = set(self.eligible_employment_statuses) - VALID_EMPLOYMENT_STATUSES
        if invalid:
            raise ValueError(
                f"eligible_employment_statuses must be drawn from {sorted(VALID_EMPLOYMENT_STATUSES)}, "
                f"got {sorted(invalid)}"
            )
        if self.proration_divisor <= 0:
            raise ValueError("proration_divisor must be positive")
        if not self.approval_request_type:
            raise ValueError("approval_request_type is required")
        if self.batch_max_workers <= 0:
            raise ValueError("batch_max_workers must be positive")

        logger.info(
            "payroll_settings_validated",
            extra={
                "eligible_contract_types": list(self.eligible_contract_types),
                "eligible_employment_statuses": list(self.eligible_employment_statuses),
                "proration_divisor": self.proration_divisor,
                "approval_request_type": self.approval_request_type,
                "batch_max_workers": self.batch_max_workers,
            },
        )

    def is_eligible_contract(self, contract_type: str | None) -> bool:
        return contract_type is not None and contract_type in self.eligible_contract_types

    def is_eligible_status(self, status: EmploymentStatus) -> bool:
        return status.value in self.eligible_employment_statuses

    @classmethod
    def with_defaults(cls) -> Self:
        """TECHNO contracts, ACTIVE or ON_LEAVE, 30-day proration."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Build from the ``payroll`` YAML section; lists become tuples."""
        data = dict(data)
        for key in ("eligible_contract_types", "eligible_employment_statuses"):
            if key in data:
                data[key] = tuple(data[key])
        return cls(**data)
