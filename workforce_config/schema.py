"""
EngineConfig schema.

The typed form of the engine's YAML configuration.  The loader parses a
YAML document into these frozen dataclasses; module configs
(``AttendanceConfig``, ``PayrollConfig``) are embedded as-is so each module
keeps ownership of its own defaults and validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from workforce_engines.approval import ApprovalLevel
from workforce_modules.attendance.config import AttendanceConfig
from workforce_modules.payroll.config import PayrollConfig

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection settings handed to ``workforce_kernel.db.engine``."""

    url: str = "sqlite:///:memory:"
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10

    def __post_init__(self):
        if not self.url:
            raise ValueError("database url must not be empty")
        if self.pool_size <= 0:
            raise ValueError(f"pool_size must be positive, got {self.pool_size}")


# ---------------------------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EngineConfig:
    """Everything the attendance and payroll services need at runtime."""

    config_id: str
    version: int
    attendance: AttendanceConfig
    payroll: PayrollConfig
    approval_chains: dict[str, tuple[ApprovalLevel, ...]] = field(default_factory=dict)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    checksum: str = ""

    def chain_for(self, request_type: str) -> tuple[ApprovalLevel, ...]:
        return self.approval_chains.get(request_type, ())
