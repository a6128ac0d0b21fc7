"""
Module ORM Registry (``workforce_modules._orm_registry``).

Ensures every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table before ``create_tables()`` runs.
"""


def import_all_orm_models() -> None:
    """Import every ``workforce_modules.*.orm`` module.  Idempotent."""
    import workforce_modules.attendance.orm  # noqa: F401
    import workforce_modules.entries.orm  # noqa: F401
    import workforce_modules.loans.orm  # noqa: F401
    import workforce_modules.payroll.orm  # noqa: F401
