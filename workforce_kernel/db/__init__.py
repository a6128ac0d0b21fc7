"""Database layer: engine, declarative base and column types."""

from workforce_kernel.db.base import Base, TrackedBase, UUIDString
from workforce_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from workforce_kernel.db.types import Hours, Money, round_hours, round_money

__all__ = [
    "Base",
    "TrackedBase",
    "UUIDString",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "session_scope",
    "Hours",
    "Money",
    "round_hours",
    "round_money",
]
