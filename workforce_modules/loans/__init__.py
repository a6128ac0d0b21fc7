"""Employee loans and installment consumption."""

from workforce_modules.loans.models import (
    ConsumedInstallment,
    InstallmentStatus,
    Loan,
    LoanInstallment,
)
from workforce_modules.loans.service import LoanLedger

__all__ = [
    "ConsumedInstallment",
    "InstallmentStatus",
    "Loan",
    "LoanInstallment",
    "LoanLedger",
]
