"""
Workforce Modules.

Thin orchestration layers over the Workforce Kernel and Engines.
Each module contains:
- Domain models (frozen DTOs and enums)
- ORM persistence models
- Configuration schema
- A service that owns the transaction boundary

Modules:
- Attendance: check-in/out, manual HR entries, schedules, calendar, day closure,
  allowance/deduction synchronization
- Entries: monthly allowances and deductions (system-generated and manual)
- Loans: loans, installment schedules, installment consumption
- Payroll: monthly salary calculation, versioning, approval, batch runs

Directory protocols (employees, projects) live in ``workforce_modules.directory``.
"""
