"""
Workforce Kernel - shared infrastructure for the attendance-to-payroll engine

- Typed exceptions with machine-readable codes
- Structured JSON logging with request-scoped context
- SQLAlchemy declarative base, engine and session scope
- Injectable clock for deterministic time
"""

__version__ = "0.1.0"
