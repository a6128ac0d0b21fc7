"""
Payroll module.

Monthly salary calculation per employee: proration, breakdown, monthly
allowances and deductions, loan installments, versioned headers and
multi-level approval.
"""

from workforce_modules.payroll.approval import ApprovalWorkflow, ConfigApprovalWorkflow
from workforce_modules.payroll.batch import PayrollBatchRunner
from workforce_modules.payroll.config import PayrollConfig
from workforce_modules.payroll.models import (
    EmployeePayrollOutcome,
    PayrollBatchResult,
    PayrollResult,
    SalaryDetail,
    SalaryHeader,
    SalaryType,
)
from workforce_modules.payroll.service import PayrollService

__all__ = [
    "ApprovalWorkflow",
    "ConfigApprovalWorkflow",
    "EmployeePayrollOutcome",
    "PayrollBatchResult",
    "PayrollBatchRunner",
    "PayrollConfig",
    "PayrollResult",
    "PayrollService",
    "SalaryDetail",
    "SalaryHeader",
    "SalaryType",
]
