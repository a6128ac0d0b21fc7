"""
Pure domain layer.

Value objects and time abstraction with NO dependencies on the ORM, the
database or I/O.
"""

from workforce_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from workforce_kernel.domain.results import ResultStatus, ServiceResult

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "ResultStatus",
    "ServiceResult",
]
