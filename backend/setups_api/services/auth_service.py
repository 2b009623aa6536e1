"""
Setups API - Bearer Token Authentication
==========================================

What:  Resolves a bearer token to the User it belongs to.
Why:   Every mutating endpoint (and GET by id) needs the caller's identity
       for ownership checks.
How:   Looks the token up in the `users` table. Issuing tokens (sign-up,
       sign-in) happens elsewhere; this service only reads them.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from setups_api.exceptions import DatabaseError, UnauthorizedError
from setups_api.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless token lookup."""

    async def authenticate(self, db: AsyncSession, token: str) -> User:
        """
        Return the user owning `token`.

        Raises:
            UnauthorizedError: empty token, or no user holds it (→ 401)
            DatabaseError: the lookup itself failed (→ 500)
        """
        if not token:
            raise UnauthorizedError()

        try:
            result = await db.execute(select(User).where(User.token == token))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error resolving bearer token: %s", str(e))
            raise DatabaseError(context={"operation": "authenticate"})

        if user is None:
            # Never log the token itself
            logger.warning("Rejected unknown bearer token")
            raise UnauthorizedError(message="Invalid authentication token")

        return user


auth_service = AuthService()
