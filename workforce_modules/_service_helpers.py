"""
Shared helpers for module service transaction boundaries.

Used by workforce_modules/*/service.py to turn a business-rule violation
into a rejected ``ServiceResult`` after rolling the session back.

Architecture: Modules layer. Imports only from workforce_kernel.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from workforce_kernel.domain.results import ServiceResult
from workforce_kernel.exceptions import BusinessRuleViolation


def reject(
    session: Session,
    logger: logging.Logger,
    event: str,
    exc: BusinessRuleViolation,
    extra: dict[str, Any] | None = None,
) -> ServiceResult:
    """Roll back, log ``event`` at WARNING with the error code, return the rejection."""
    session.rollback()
    payload = dict(extra or {})
    payload.update({"error_code": exc.code, "reason": str(exc)})
    logger.warning(event, extra=payload)
    return ServiceResult.rejected(exc)
