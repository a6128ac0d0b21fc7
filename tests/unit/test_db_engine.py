"""Tests for engine setup and the transactional session scope."""

import pytest
from sqlalchemy import select

from workforce_kernel.db.engine import get_session, reset_engine, session_scope
from workforce_kernel.services.base import SYSTEM_ACTOR_ID
from workforce_modules.attendance.orm import WeekendDayModel


def _weekend_days(session_factory) -> list[int]:
    with session_factory() as session:
        return list(session.scalars(select(WeekendDayModel.iso_weekday)))


class TestSessionScope:

    def test_commits_on_success(self, file_session_factory):
        with session_scope() as session:
            session.add(WeekendDayModel(iso_weekday=5, created_by_id=SYSTEM_ACTOR_ID))

        assert _weekend_days(file_session_factory) == [5]

    def test_rolls_back_and_reraises(self, file_session_factory, captured_logs):
        with pytest.raises(RuntimeError, match="boom"):
            with session_scope() as session:
                session.add(WeekendDayModel(iso_weekday=6, created_by_id=SYSTEM_ACTOR_ID))
                session.flush()
                raise RuntimeError("boom")

        assert _weekend_days(file_session_factory) == []
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())


class TestUninitialized:

    def test_get_session_requires_engine(self):
        reset_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_session()
