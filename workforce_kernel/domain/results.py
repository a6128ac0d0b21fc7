"""
Service results -- explicit success / business-rejection values.

Responsibility:
    Module services return a ``ServiceResult`` instead of raising for
    business-rule outcomes (duplicate check-in, duplicate payroll, closed
    date, ...).  Callers branch on ``is_success`` and read ``error.code``
    without relying on exception semantics.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from workforce_kernel.exceptions import BusinessRuleViolation

T = TypeVar("T")


class ResultStatus(str, Enum):
    """Outcome of a module service operation."""

    SUCCEEDED = "succeeded"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Either a value or the business rule that refused the request."""

    status: ResultStatus
    value: T | None = None
    error: BusinessRuleViolation | None = None
    message: str | None = None

    @classmethod
    def ok(cls, value: T, message: str | None = None) -> ServiceResult[T]:
        return cls(status=ResultStatus.SUCCEEDED, value=value, message=message)

    @classmethod
    def rejected(cls, error: BusinessRuleViolation) -> ServiceResult[T]:
        return cls(status=ResultStatus.REJECTED, error=error, message=str(error))

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCEEDED

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, or raise the carried business error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
