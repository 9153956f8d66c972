"""
Back Office API - Clinician Resolver
=====================================

What:  Maps an authenticated Session to the clinician it belongs to.
Who:   Called by PracticeInformationService before any record access.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth import Session
from app.models.clinician import Clinician

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClinicianInfo:
    """Result of resolving a session to a clinician."""

    is_clinician: bool
    clinician_id: str
    clinician: Clinician


async def resolve_clinician(db: AsyncSession, session: Session) -> Optional[ClinicianInfo]:
    """
    Look up the clinician linked to the session's user.

    Returns None when the user has no clinician record. Database errors
    propagate; the caller decides how to report them.
    """
    result = await db.execute(select(Clinician).where(Clinician.user_id == session.user_id))
    clinician = result.scalar_one_or_none()
    if clinician is None:
        logger.info("No clinician linked to user %s", session.user_id)
        return None
    return ClinicianInfo(is_clinician=True, clinician_id=clinician.id, clinician=clinician)
