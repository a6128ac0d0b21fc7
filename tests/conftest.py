"""
Shared fixtures.

- JSON log capture (``captured_logs``)
- ``engine`` / ``session``: a private in-memory SQLite database per test;
  services commit for real
- ``file_session_factory``: file-backed SQLite for multi-threaded tests
- ``deterministic_clock``: Monday 2024-01-15 08:00
"""

import json
import logging
from uuid import UUID

import pytest
from sqlalchemy.orm import sessionmaker

from workforce_kernel.db.engine import (
    build_engine,
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from workforce_kernel.domain.clock import DeterministicClock
from workforce_kernel.logging_config import (
    ROOT_LOGGER_NAME,
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

HR_ACTOR_ID = UUID("00000000-0000-0000-0000-0000000000a1")


class _JsonListHandler(logging.Handler):
    """Keeps every record as the dict the JSON formatter would emit."""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.setFormatter(StructuredFormatter())
        self.lines: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.lines.append(self.format(record))


# --- logging ---------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _structured_logging():
    reset_logging()
    configure_logging(level=logging.DEBUG, handler=logging.NullHandler())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _fresh_log_context():
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """Callable returning the JSON log lines emitted so far, parsed.

    Example::

        payroll_service.calculate("E100", "2024-01")
        assert any(r["message"] == "payroll_calculated" for r in captured_logs())
    """
    handler = _JsonListHandler()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.addHandler(handler)
    try:
        yield lambda: [json.loads(line) for line in handler.lines]
    finally:
        root.removeHandler(handler)


# --- database --------------------------------------------------------------


@pytest.fixture
def engine():
    eng = build_engine("sqlite:///:memory:")
    create_tables(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    sess = sessionmaker(bind=engine, expire_on_commit=False)()
    try:
        yield sess
    finally:
        sess.close()


@pytest.fixture
def file_session_factory(tmp_path):
    """One connection per thread; SQLite file locks serialize the writers."""
    eng = init_engine_from_url(f"sqlite:///{tmp_path / 'workforce.db'}")
    create_tables(eng)
    yield get_session_factory()
    drop_tables(eng)
    reset_engine()


# --- actors and time -------------------------------------------------------


@pytest.fixture
def test_actor_id() -> UUID:
    return HR_ACTOR_ID


@pytest.fixture
def deterministic_clock():
    return DeterministicClock()
