"""
Back Office API - Practice Information SQLAlchemy Model
========================================================

What:  ORM model representing the `practice_information` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Read and written by PracticeInformationStore only.

Table Design:
    - clinician_id: UNIQUE foreign key → at most one row per clinician.
      Updates are scoped by this column and can never touch another
      clinician's row.
    - phone_numbers: TEXT holding a JSON array of {number, type} objects.
      Encoding/decoding lives in app.services.phone_numbers; nothing else
      reads or writes the raw text.
    - tele_health: BOOLEAN, NOT NULL.

Lifecycle:
    ABSENT  → PRESENT   first successful update creates the row
    PRESENT → PRESENT   every later update overwrites all fields
    Rows are never deleted through the API.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PracticeInformation(Base):
    """The single settings record owned by a clinician."""

    __tablename__ = "practice_information"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    clinician_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("clinicians.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
        comment="Owning clinician; one practice information row per clinician",
    )

    practice_name: Mapped[str] = mapped_column(String(255), nullable=False)
    practice_email: Mapped[str] = mapped_column(String(320), nullable=False)

    # IANA zone name, e.g. "America/Chicago"
    time_zone: Mapped[str] = mapped_column(String(64), nullable=False)

    # URL or blob name returned by POST /api/upload
    practice_logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    phone_numbers: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
        server_default=text("'[]'"),
        comment="JSON array of {number, type} objects",
    )

    tele_health: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return (
            f"<PracticeInformation(id={self.id}, clinician_id='{self.clinician_id}', "
            f"practice_name='{self.practice_name}')>"
        )
