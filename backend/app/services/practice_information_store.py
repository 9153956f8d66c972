"""
Back Office API - Practice Information Store
=============================================

What:  Persistence collaborator for the practice_information table.
How:   Three operations over an AsyncSession:
           find_one(clinician_id)           → row or None
           create_one(fields)               → new row (flushed, not committed)
           update_many(clinician_id, fields) → number of rows updated
       The transaction is committed by get_db_session at the end of the request.
Who:   Constructed per call by PracticeInformationService.

Failure contract:
    Every SQLAlchemy error leaves this module as a PersistenceError tagged
    with a FailureKind:
        OperationalError / InterfaceError / DBAPI disconnect  → UNAVAILABLE
        any other SQLAlchemyError                              → UNKNOWN
    The driver message is logged here and never travels further.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import FailureKind, PersistenceError
from app.models.practice_information import PracticeInformation

logger = logging.getLogger(__name__)

# Columns the write path may set; anything else in `fields` is a bug
WRITABLE_COLUMNS = frozenset(
    {
        "practice_name",
        "practice_email",
        "time_zone",
        "practice_logo",
        "phone_numbers",
        "tele_health",
    }
)


def _classify(exc: SQLAlchemyError) -> FailureKind:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return FailureKind.UNAVAILABLE
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return FailureKind.UNAVAILABLE
    return FailureKind.UNKNOWN


def _persistence_error(operation: str, exc: SQLAlchemyError) -> PersistenceError:
    kind = _classify(exc)
    logger.error("practice_information.%s failed (%s): %s", operation, kind.value, exc)
    return PersistenceError(
        message=f"practice_information.{operation} failed",
        kind=kind,
        context={"operation": operation, "error_type": type(exc).__name__},
    )


def _check_columns(fields: Dict[str, Any]) -> None:
    unknown = set(fields) - WRITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Not writable: {sorted(unknown)}")


class PracticeInformationStore:
    """Row access for practice information, always keyed by clinician id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_one(self, clinician_id: str) -> Optional[PracticeInformation]:
        try:
            result = await self.db.execute(
                select(PracticeInformation)
                .where(PracticeInformation.clinician_id == clinician_id)
                # Reflect values written earlier in this session by update_many
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _persistence_error("find_one", e) from e

    async def create_one(self, clinician_id: str, fields: Dict[str, Any]) -> PracticeInformation:
        _check_columns(fields)
        row = PracticeInformation(clinician_id=clinician_id, **fields)
        try:
            self.db.add(row)
            # Assigns defaults and surfaces constraint violations now
            await self.db.flush()
        except SQLAlchemyError as e:
            raise _persistence_error("create_one", e) from e
        logger.info("Created practice information %s for clinician %s", row.id, clinician_id)
        return row

    async def update_many(self, clinician_id: str, fields: Dict[str, Any]) -> int:
        """
        Overwrite `fields` on every row owned by `clinician_id`.

        The WHERE clause is always the clinician id, so a call can never
        reach another clinician's record.
        """
        _check_columns(fields)
        try:
            result = await self.db.execute(
                update(PracticeInformation)
                .where(PracticeInformation.clinician_id == clinician_id)
                .values(**fields)
                .execution_options(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            raise _persistence_error("update_many", e) from e
        count = result.rowcount or 0
        logger.info("Updated %d practice information row(s) for clinician %s", count, clinician_id)
        return count
