"""
Back Office API - Practice Information Routes
==============================================

What:  GET and PUT /api/practiceInformation.
How:   Resolves the session and db session through dependencies and hands
       both to PracticeInformationService explicitly.
Who:   Called by the settings page of the back-office console.

The PUT handler reads the raw JSON body itself instead of declaring a
pydantic body parameter. FastAPI would otherwise validate the body before
the handler runs, and an unauthenticated caller with a bad body would get
422 instead of 401.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session, resolve_session
from app.database import get_db_session
from app.exceptions import InvalidPayloadError, UnauthenticatedError
from app.schemas.common import ErrorResponse
from app.schemas.practice_information import (
    PracticeInformationRecord,
    PracticeInformationResponse,
)
from app.services.practice_information_service import practice_information_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Practice Information"])


@router.get(
    "/practiceInformation",
    response_model=PracticeInformationResponse,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "No clinician or no stored record", "model": ErrorResponse},
        500: {"description": "Read failed", "model": ErrorResponse},
    },
    summary="Get the clinician's practice information",
)
async def get_practice_information(
    session: Optional[Session] = Depends(resolve_session),
    db: AsyncSession = Depends(get_db_session),
) -> PracticeInformationResponse:
    return await practice_information_service.get(db, session)


@router.put(
    "/practiceInformation",
    response_model=PracticeInformationRecord,
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "No clinician for the user", "model": ErrorResponse},
        422: {"description": "Invalid request payload", "model": ErrorResponse},
        500: {"description": "Write failed", "model": ErrorResponse},
    },
    summary="Create or replace the clinician's practice information",
)
async def update_practice_information(
    request: Request,
    session: Optional[Session] = Depends(resolve_session),
    db: AsyncSession = Depends(get_db_session),
) -> PracticeInformationRecord:
    """
    Upsert: the first call creates the record, later calls overwrite every
    field. The response echoes the stored row with phone_numbers as text.
    """
    if session is None:
        raise UnauthenticatedError()

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidPayloadError(
            details=[{"field": "body", "message": "Body must be valid JSON", "type": "json_invalid"}],
            context={"decode_error": str(e)},
        ) from e

    return await practice_information_service.update(db, session, payload)
