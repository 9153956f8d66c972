"""
Back Office API - Session Resolution
=====================================

What:  Turns the `Authorization: Bearer <token>` header into a Session.
How:   Tokens are JWTs signed with settings.jwt_secret (PyJWT). Claims:
           sub    user id
           roles  list of role names, e.g. ["ADMIN"]
           exp    expiry (enforced by PyJWT)
Who:   `resolve_session` is a FastAPI dependency; its result is passed
       explicitly into every service call. Services never read headers.

A missing, malformed, expired or wrongly signed token resolves to None.
Rejecting the request is the service's decision (UnauthenticatedError),
so the 401 is produced in the same place for every operation.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from app.config import settings

logger = logging.getLogger(__name__)

# auto_error=False: a missing header yields None instead of FastAPI's own 403
bearer_scheme = HTTPBearer(auto_error=False)


class Session(BaseModel):
    """Proof of authentication for the current request."""

    user_id: str
    roles: List[str] = Field(default_factory=list)
    expires: Optional[datetime] = None

    def has_role(self, role: str) -> bool:
        return role.upper() in {r.upper() for r in self.roles}


def create_session_token(
    user_id: str,
    roles: Sequence[str] = (),
    expires_minutes: Optional[int] = None,
) -> str:
    """Issue a signed session token for the given user."""
    minutes = expires_minutes if expires_minutes is not None else settings.session_ttl_minutes
    payload = {
        "sub": user_id,
        "roles": list(roles),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> Optional[Session]:
    """Verify a token and return its Session, or None if it is not acceptable."""
    if not settings.jwt_secret_configured:
        logger.warning("JWT_SECRET is unset or a placeholder; rejecting session token")
        return None
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except jwt.PyJWTError as e:
        logger.info("Invalid session token: %s", type(e).__name__)
        return None

    user_id = data.get("sub")
    if not user_id:
        logger.info("Session token has no subject")
        return None

    roles = data.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]

    exp = data.get("exp")
    expires = datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
    return Session(user_id=str(user_id), roles=[str(r) for r in roles], expires=expires)


async def resolve_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Session]:
    """FastAPI dependency: the current Session, or None when unauthenticated."""
    if credentials is None:
        return None
    return decode_session_token(credentials.credentials)
