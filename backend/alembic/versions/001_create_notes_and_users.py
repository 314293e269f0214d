"""Create notes and users tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `notes` and `users`.
How:   Portable column types (Uuid, DateTime with timezone) so the same
       migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False,
                  comment="Unique identifier, immutable once assigned"),
        sa.Column("content", sa.Text(), nullable=False,
                  comment="Note text, never empty"),
        sa.Column("important", sa.Boolean(), nullable=False,
                  server_default=sa.false(), comment="Importance flag"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  comment="Insertion time (UTC), orders listings"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_notes_created_at", "notes", ["created_at"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("username", sa.String(255), nullable=False,
                  comment="Login name, unique and case-sensitive"),
        sa.Column("name", sa.String(255), nullable=False, comment="Display name"),
        sa.Column("password_hash", sa.String(255), nullable=False,
                  comment="bcrypt hash of the password"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # Enforced at insert time; concurrent registrations cannot both commit
        sa.UniqueConstraint("username", name="uq_users_username"),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
