"""
Module: workforce_kernel.db.base
Responsibility: Declarative base for every attendance, entry, loan and
    payroll table: UUID keys, the annotation map that turns the aliases in
    ``db.types`` into columns, and the audit columns each row carries.
Architecture position: Kernel > DB.  Imported by every ``orm.py``; imports
    only ``db.types``.

Invariants enforced:
    - Keys are uuid4 values stored as String(36) on every backend.
    - ``Money`` columns are Numeric(18, 4), ``Hours`` Numeric(9, 2),
      ``Degrees`` Numeric(12, 8).  A bare ``Decimal`` annotation falls back
      to the money scale.
    - Attendance timestamps are naive local wall-clock values; audit
      timestamps are server-side and timezone aware.
    - Every row names the actor that created it.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from workforce_kernel.db.types import Degrees, Hours, LongText, Money, ShortCode


class UUIDString(TypeDecorator):
    """UUID persisted as its 36-character text form."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)


class Base(DeclarativeBase):
    type_annotation_map: ClassVar[dict] = {
        Money: Numeric(18, 4),
        Hours: Numeric(9, 2),
        Degrees: Numeric(12, 8),
        ShortCode: String(50),
        LongText: String(4000),
        Decimal: Numeric(18, 4),
        datetime: DateTime(timezone=False),
        UUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[UUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """Abstract base adding who/when audit columns.

    ``created_by_id`` is mandatory; system jobs (auto checkout, absence
    marking, batch payroll) pass ``SYSTEM_ACTOR_ID``.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    created_by_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    updated_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
