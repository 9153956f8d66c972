"""
Back Office API - Practice Information Store Tests
===================================================

What:  find_one / create_one / update_many against sqlite, plus the
       SQLAlchemy error classification.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.database import async_session_factory
from app.exceptions import FailureKind, PersistenceError
from app.models import Clinician
from app.services.practice_information_store import PracticeInformationStore

FIELDS = {
    "practice_name": "Practice",
    "practice_email": "p@example.com",
    "time_zone": "UTC",
    "practice_logo": None,
    "phone_numbers": "[]",
    "tele_health": False,
}


async def add_clinician(session, user_id: str) -> Clinician:
    row = Clinician(user_id=user_id, first_name="A", last_name="B")
    session.add(row)
    await session.flush()
    return row


class TestStoreAgainstDatabase:

    @pytest.mark.asyncio
    async def test_create_then_find(self, db_tables):
        async with async_session_factory() as session:
            clinician = await add_clinician(session, "u1")
            store = PracticeInformationStore(session)

            created = await store.create_one(clinician.id, FIELDS)
            found = await store.find_one(clinician.id)

            assert found is not None
            assert found.id == created.id
            assert found.phone_numbers == "[]"

    @pytest.mark.asyncio
    async def test_update_many_is_scoped_to_clinician(self, db_tables):
        async with async_session_factory() as session:
            mine = await add_clinician(session, "u1")
            theirs = await add_clinician(session, "u2")
            store = PracticeInformationStore(session)
            await store.create_one(mine.id, FIELDS)
            await store.create_one(theirs.id, FIELDS)

            count = await store.update_many(mine.id, {**FIELDS, "practice_name": "Changed"})

            assert count == 1
            assert (await store.find_one(mine.id)).practice_name == "Changed"
            assert (await store.find_one(theirs.id)).practice_name == "Practice"

    @pytest.mark.asyncio
    async def test_second_row_for_clinician_is_rejected(self, db_tables):
        async with async_session_factory() as session:
            clinician = await add_clinician(session, "u1")
            store = PracticeInformationStore(session)
            await store.create_one(clinician.id, FIELDS)

            with pytest.raises(PersistenceError) as exc_info:
                await store.create_one(clinician.id, FIELDS)

            assert exc_info.value.kind is FailureKind.UNKNOWN

    @pytest.mark.asyncio
    async def test_unknown_column_is_a_programming_error(self, db_tables):
        async with async_session_factory() as session:
            store = PracticeInformationStore(session)

            with pytest.raises(ValueError):
                await store.update_many("c1", {"clinician_id": "someone-else"})


class TestErrorClassification:

    @pytest.mark.asyncio
    async def test_operational_error_is_unavailable(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("server closed the connection"))
        )

        with pytest.raises(PersistenceError) as exc_info:
            await PracticeInformationStore(mock_db_session).find_one("c1")

        assert exc_info.value.kind is FailureKind.UNAVAILABLE
        assert "server closed" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_integrity_error_is_unknown(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=IntegrityError("UPDATE", {}, Exception("constraint"))
        )

        with pytest.raises(PersistenceError) as exc_info:
            await PracticeInformationStore(mock_db_session).update_many("c1", FIELDS)

        assert exc_info.value.kind is FailureKind.UNKNOWN
