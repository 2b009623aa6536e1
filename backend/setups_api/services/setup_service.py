"""
Setups API - Setup Service (Business Logic)
=============================================

What:  CRUD operations on setups, with the not-found and ownership gates.
Why:   Keeps persistence and ownership rules out of the route handlers.
How:   Each method receives the request's AsyncSession; writes are flushed
       here and committed by get_db_session when the request succeeds.
Who:   Called by the /setups route handlers.

Mutation Flow (PATCH / DELETE):
    ┌──────────┐    ┌──────────────┐    ┌─────────────────┐    ┌──────────┐
    │  Find    │───▶│  Not-found   │───▶│  Ownership      │───▶│  Mutate  │
    │  by id   │    │  guard (404) │    │  guard (403)    │    │  + flush │
    └──────────┘    └──────────────┘    └─────────────────┘    └──────────┘
    PATCH validates its payload (422) only after both guards pass.

Error Handling Strategy:
    Application exceptions (NotFoundError, ForbiddenError) propagate as-is.
    SQLAlchemy errors are logged with context and re-raised as DatabaseError,
    whose response message never includes driver output.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from setups_api.exceptions import DatabaseError, ValidationError
from setups_api.models.setup import RESERVED_FIELDS, Setup
from setups_api.models.user import User
from setups_api.schemas.setup import SetupUpdateRequest
from setups_api.services.guards import handle_not_found, require_ownership

logger = logging.getLogger(__name__)


def _parse_id(setup_id: str) -> Optional[uuid.UUID]:
    """Malformed ids can't match any row, so they're reported as not found."""
    try:
        return uuid.UUID(str(setup_id))
    except ValueError:
        return None


def _validate_changes(changes: Any) -> Dict[str, Any]:
    """
    Validate the `setup` object of a PATCH body into the fields to merge.

    Only the keys the client actually sent are returned; declared fields
    left at their defaults must not overwrite stored values. `owner` is
    dropped since ownership can't change after creation.
    """
    try:
        payload = SetupUpdateRequest.model_validate({"setup": changes})
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)

    sent = changes.keys()
    fields = {k: v for k, v in payload.setup.model_dump().items() if k in sent}
    fields.pop("owner", None)
    return fields


class SetupService:
    """
    Stateless service for setup records.

    Responsibilities:
        - list_setups():  every record, oldest first
        - get_setup():    single record or NotFoundError
        - create_setup(): insert with the owner forced to the caller
        - update_setup(): merge fields into an owned record
        - delete_setup(): remove an owned record
    """

    async def list_setups(self, db: AsyncSession) -> List[Setup]:
        try:
            result = await db.execute(
                select(Setup).order_by(Setup.created_at, Setup.id)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing setups: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve setups. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def find_setup(self, db: AsyncSession, setup_id: str) -> Optional[Setup]:
        """Lookup without the not-found gate. Returns None for unknown or malformed ids."""
        parsed = _parse_id(setup_id)
        if parsed is None:
            return None
        try:
            result = await db.execute(select(Setup).where(Setup.id == parsed))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching setup %s: %s", setup_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the setup. Please try again.",
                context={"setup_id": str(setup_id)},
            )

    async def get_setup(self, db: AsyncSession, setup_id: str) -> Setup:
        """
        Retrieve a single setup.

        Raises:
            NotFoundError: no setup with this id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        setup = await self.find_setup(db, setup_id)
        return handle_not_found(setup, resource="setup", resource_id=str(setup_id))

    async def create_setup(
        self,
        db: AsyncSession,
        owner: User,
        fields: Dict[str, Any],
    ) -> Setup:
        """
        Insert a new setup owned by `owner`.

        Any `owner` (or other server-owned key) in `fields` is discarded;
        the stored owner is always the authenticated caller.
        """
        document = {k: v for k, v in fields.items() if k not in RESERVED_FIELDS}
        setup = Setup(owner=str(owner.id), document=document)
        try:
            db.add(setup)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating setup: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the setup. Please try again.",
                context={"owner": str(owner.id)},
            )
        logger.info("Setup %s created by user %s", setup.id, owner.id)
        return setup

    async def update_setup(
        self,
        db: AsyncSession,
        setup_id: str,
        user: User,
        changes: Any,
    ) -> None:
        """
        Validate `changes` and merge them into an owned setup.

        Raises:
            NotFoundError: no setup with this id (→ 404, checked first)
            ForbiddenError: caller is not the owner (→ 403)
            ValidationError: `changes` is not a valid partial setup (→ 422)
            DatabaseError: write failed (→ 500)
        """
        setup = await self.get_setup(db, setup_id)
        require_ownership(user, setup)

        fields = _validate_changes(changes)
        setup.merge(fields)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating setup %s: %s", setup_id, str(e))
            raise DatabaseError(
                message="Could not update the setup. Please try again.",
                context={"setup_id": str(setup_id)},
            )
        logger.info("Setup %s updated by user %s", setup.id, user.id)

    async def delete_setup(self, db: AsyncSession, setup_id: str, user: User) -> None:
        """
        Delete an owned setup. Same gates and errors as update_setup().
        """
        setup = await self.get_setup(db, setup_id)
        require_ownership(user, setup)

        try:
            await db.delete(setup)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting setup %s: %s", setup_id, str(e))
            raise DatabaseError(
                message="Could not delete the setup. Please try again.",
                context={"setup_id": str(setup_id)},
            )
        logger.info("Setup %s deleted by user %s", setup_id, user.id)


# Stateless, so one shared instance is enough
setup_service = SetupService()
