"""Create users and setups tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Initial schema: `users` (token lookup) and `setups` (owned documents).
Rollback: downgrade() drops both tables (destructive).
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
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("token", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_token", "users", ["token"], unique=True)

    op.create_table(
        "setups",
        sa.Column("id", sa.Uuid(), nullable=False, comment="Unique identifier"),
        sa.Column(
            "owner",
            sa.String(64),
            nullable=False,
            comment="Identity of the creating user",
        ),
        sa.Column(
            "document",
            sa.JSON(),
            nullable=False,
            comment="Client-supplied fields",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this setup was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this setup was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # Owner lookups back "my setups" style queries
    op.create_index("idx_setups_owner", "setups", ["owner"])
    op.create_index("idx_setups_created_at", "setups", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_setups_created_at", table_name="setups")
    op.drop_index("idx_setups_owner", table_name="setups")
    op.drop_table("setups")
    op.drop_index("ix_users_token", table_name="users")
    op.drop_table("users")
