"""
Back Office API - Clinician SQLAlchemy Model
=============================================

What:  ORM model for the `clinicians` table.
Who:   Read by the clinician resolver to map a session's user id to the
       clinician that owns a practice information record.

Clinicians are linked one-to-one with user accounts. Creating and editing
clinicians belongs to other parts of the platform; this service only reads
them.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Clinician(Base):
    """A practitioner linked to exactly one authenticated user account."""

    __tablename__ = "clinicians"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Clinician identifier (UUID string)",
    )

    # One clinician per user account
    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
        index=True,
        comment="Identifier of the user account this clinician belongs to",
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Clinician(id={self.id}, user_id='{self.user_id}')>"
