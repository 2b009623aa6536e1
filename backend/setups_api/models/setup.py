"""
Setups API - Setup SQLAlchemy Model
=====================================

What:  ORM model representing the `setups` table.
Why:   A setup is a free-form document owned by the user who created it.
How:   Fixed columns hold what the server controls (id, owner, timestamps);
       everything the client sends lives in the `document` JSON column.
Who:   Used by SetupService for CRUD operations and by Alembic.

Table Design:
    - id: UUID primary key generated in Python (portable across PostgreSQL/SQLite)
    - owner: str(user.id) of the creator, set once at insert time
    - document: client fields (title, ...) stored as a JSON object
    - created_at / updated_at: UTC, maintained by the ORM
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from setups_api.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Keys the server owns. They are never read from a client document.
RESERVED_FIELDS = frozenset({"id", "owner", "created_at", "updated_at"})


class Setup(Base):
    """
    A setup record.

    Lifecycle:
        1. Created via POST /setups; owner bound to the caller
        2. Updated via PATCH /setups/{id} by the owner only (document merge)
        3. Deleted via DELETE /setups/{id} by the owner only
    """

    __tablename__ = "setups"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    # Immutable after creation; nothing in the update path writes this column
    owner: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Identity of the creating user",
    )

    document: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Client-supplied fields",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this setup was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        comment="When this setup was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_setups_owner", "owner"),
        Index("idx_setups_created_at", "created_at"),
    )

    def merge(self, fields: Dict[str, Any]) -> None:
        """
        Apply a partial update to the document.

        Keys not present in `fields` keep their stored value. The dict is
        rebuilt rather than mutated in place so SQLAlchemy sees the change.
        """
        updates = {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}
        self.document = {**(self.document or {}), **updates}

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form returned by the API: server fields plus the document."""
        data: Dict[str, Any] = dict(self.document or {})
        data.update(
            id=self.id,
            owner=self.owner,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
        return data

    def __repr__(self) -> str:
        return f"<Setup(id={self.id}, owner='{self.owner}')>"
