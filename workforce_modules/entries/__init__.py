"""Monthly allowances and deductions (system-generated and manual)."""

from workforce_modules.entries.models import EntryStatus, MonthlyEntry
from workforce_modules.entries.service import MonthlyEntryService

__all__ = ["EntryStatus", "MonthlyEntry", "MonthlyEntryService"]
