"""
Back Office API - Practice Information Service
===============================================

What:  Read and upsert of the single practice information record owned by
       the signed-in clinician.
How:   Composes the session (passed in explicitly), the clinician resolver,
       the phone number codec and PracticeInformationStore.
Who:   Called by the /api/practiceInformation route handlers.

Operation order (both operations):
    1. Session present?            no  → UnauthenticatedError (401), no DB access
    2. Payload valid? (update)     no  → InvalidPayloadError (422), no write
    3. Clinician resolvable?       no  → NotFoundError (404)
    4. Store call                  raises → PersistenceError (500, generic)

Upsert:
    no row      → create_one with every field
    row exists  → update_many scoped by clinician_id, full overwrite
    Concurrent updates for one clinician are not coordinated; the last
    write wins.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session
from app.exceptions import (
    BackOfficeError,
    FailureKind,
    InvalidPayloadError,
    NotFoundError,
    PersistenceError,
    UnauthenticatedError,
)
from app.models.practice_information import PracticeInformation
from app.schemas.practice_information import (
    PracticeInformationRecord,
    PracticeInformationResponse,
    PracticeInformationUpdate,
)
from app.services.clinician_service import ClinicianInfo, resolve_clinician
from app.services.phone_numbers import decode_phone_numbers, encode_phone_numbers
from app.services.practice_information_store import PracticeInformationStore

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch practice information"
UPDATE_FAILED = "Failed to update practice information"

ClinicianResolver = Callable[[AsyncSession, Session], Awaitable[Optional[ClinicianInfo]]]
StoreFactory = Callable[[AsyncSession], PracticeInformationStore]


def parse_update_payload(payload: Any) -> PracticeInformationUpdate:
    """
    Validate a raw JSON body.

    Raises:
        InvalidPayloadError: with one details entry per failing field
    """
    try:
        return PracticeInformationUpdate.model_validate(payload)
    except PydanticValidationError as exc:
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "body",
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors(include_url=False)
        ]
        raise InvalidPayloadError(details=details, context={"error_count": len(details)})


def to_response(row: PracticeInformation) -> PracticeInformationResponse:
    """Row → GET shape (phone numbers decoded)."""
    return PracticeInformationResponse(
        id=row.id,
        clinician_id=row.clinician_id,
        practice_name=row.practice_name,
        practice_email=row.practice_email,
        time_zone=row.time_zone,
        practice_logo=row.practice_logo,
        phone_numbers=decode_phone_numbers(row.phone_numbers),
        tele_health=row.tele_health,
    )


class PracticeInformationService:
    """
    Business logic for the practice information record.

    Stateless: the db session and the caller's Session arrive with every
    call. The clinician resolver and store factory are injectable so unit
    tests can replace them without a database.
    """

    def __init__(
        self,
        clinician_resolver: ClinicianResolver = resolve_clinician,
        store_factory: StoreFactory = PracticeInformationStore,
    ):
        self._resolve_clinician = clinician_resolver
        self._store_factory = store_factory

    @staticmethod
    def _require_session(session: Optional[Session]) -> Session:
        if session is None:
            raise UnauthenticatedError()
        return session

    async def _require_clinician(self, db: AsyncSession, session: Session) -> ClinicianInfo:
        info = await self._resolve_clinician(db, session)
        if info is None or not info.is_clinician or not info.clinician_id:
            raise NotFoundError(resource="Clinician", context={"user_id": session.user_id})
        return info

    async def get(
        self, db: AsyncSession, session: Optional[Session]
    ) -> PracticeInformationResponse:
        """
        Return the caller's practice information.

        Raises:
            UnauthenticatedError: no session
            NotFoundError: no clinician for the user, or no stored record
            PersistenceError: any failure while reading ("Failed to fetch ...")
        """
        session = self._require_session(session)

        try:
            info = await self._require_clinician(db, session)
            row = await self._store_factory(db).find_one(info.clinician_id)
            if row is None:
                raise NotFoundError(
                    resource="Practice information",
                    context={"clinician_id": info.clinician_id},
                )
            return to_response(row)

        except NotFoundError:
            raise
        except Exception as e:
            raise self._failure(FETCH_FAILED, e) from e

    async def update(
        self, db: AsyncSession, session: Optional[Session], payload: Any
    ) -> PracticeInformationRecord:
        """
        Create or fully overwrite the caller's practice information.

        Args:
            db: Async database session
            session: Caller's session (None when unauthenticated)
            payload: Raw JSON body (camelCase keys)

        Returns:
            The stored record, phone_numbers in its serialized text form

        Raises:
            UnauthenticatedError: no session
            InvalidPayloadError: body failed validation; nothing was written
            NotFoundError: no clinician for the user
            PersistenceError: create/update failed ("Failed to update ...")
        """
        session = self._require_session(session)
        data = parse_update_payload(payload)

        fields: Dict[str, Any] = {
            "practice_name": data.practice_name,
            "practice_email": data.practice_email,
            "time_zone": data.time_zone,
            "practice_logo": data.practice_logo,
            "phone_numbers": encode_phone_numbers(data.phone_numbers),
            "tele_health": data.tele_health,
        }

        try:
            info = await self._require_clinician(db, session)
            store = self._store_factory(db)

            existing = await store.find_one(info.clinician_id)
            if existing is None:
                row = await store.create_one(info.clinician_id, fields)
            else:
                await store.update_many(info.clinician_id, fields)
                row = await store.find_one(info.clinician_id)
                if row is None:
                    # Deleted between the update and the read-back
                    raise PersistenceError(
                        message="practice_information row vanished after update",
                        kind=FailureKind.NOT_FOUND,
                    )

            logger.info("Practice information saved for clinician %s", info.clinician_id)
            return PracticeInformationRecord.model_validate(row)

        except NotFoundError:
            raise
        except Exception as e:
            raise self._failure(UPDATE_FAILED, e) from e

    @staticmethod
    def _failure(message: str, exc: Exception) -> PersistenceError:
        """Wrap any failure in a generic PersistenceError, keeping the kind for logs."""
        kind = exc.kind if isinstance(exc, PersistenceError) else FailureKind.UNKNOWN
        context: Dict[str, Any] = {"error_type": type(exc).__name__}
        if isinstance(exc, BackOfficeError):
            context.update(exc.context)
        logger.error("%s: %s", message, exc, exc_info=not isinstance(exc, BackOfficeError))
        return PersistenceError(message=message, kind=kind, context=context)


# Stateless; shared by all requests
practice_information_service = PracticeInformationService()
