"""Create clinicians and practice_information tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema. `clinicians` is owned by the wider platform and is
       created here so the service can run standalone; `practice_information`
       holds at most one settings row per clinician.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clinicians",
        sa.Column("id", sa.String(36), nullable=False, comment="Clinician identifier (UUID string)"),
        sa.Column(
            "user_id",
            sa.String(36),
            nullable=False,
            comment="Identifier of the user account this clinician belongs to",
        ),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_clinicians_user_id", "clinicians", ["user_id"], unique=True)

    op.create_table(
        "practice_information",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column(
            "clinician_id",
            sa.String(36),
            nullable=False,
            comment="Owning clinician; one practice information row per clinician",
        ),
        sa.Column("practice_name", sa.String(255), nullable=False),
        sa.Column("practice_email", sa.String(320), nullable=False),
        sa.Column("time_zone", sa.String(64), nullable=False),
        sa.Column("practice_logo", sa.Text(), nullable=True),
        sa.Column(
            "phone_numbers",
            sa.Text(),
            nullable=False,
            server_default=sa.text("'[]'"),
            comment="JSON array of {number, type} objects",
        ),
        sa.Column("tele_health", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["clinician_id"], ["clinicians.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # Unique: the upsert relies on one row per clinician
    op.create_index(
        "ix_practice_information_clinician_id",
        "practice_information",
        ["clinician_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("ix_practice_information_clinician_id", table_name="practice_information")
    op.drop_table("practice_information")
    op.drop_index("ix_clinicians_user_id", table_name="clinicians")
    op.drop_table("clinicians")
