"""
FastAPI dependencies for authentication and request body parsing.

- get_current_user:  `Authorization: Bearer <token>` → User, else 401
- get_create_fields: POST body → validated fields of the new setup
- get_update_body:   PATCH body → blank-stripped JSON object (validated
                     later, once the record is found and owned)

Declare get_current_user before any body dependency in a route signature;
dependencies resolve in order, so an unauthenticated request is rejected
before its payload is looked at. Routes read bodies through these
dependencies rather than a pydantic body parameter, which FastAPI would
parse ahead of every dependency.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from setups_api.database import get_db_session
from setups_api.exceptions import UnauthorizedError, ValidationError
from setups_api.models.user import User
from setups_api.schemas.setup import SetupCreateRequest
from setups_api.services.auth_service import auth_service
from setups_api.services.sanitizer import remove_blank_fields

logger = logging.getLogger(__name__)

# auto_error=False: a missing header reaches get_current_user as None, so
# the 401 is rendered by our own handler in the standard error shape.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    Resolve the caller from the bearer token.

    Raises:
        UnauthorizedError: header missing, scheme not Bearer, or unknown token
    """
    if credentials is None:
        logger.warning("Request without bearer credentials")
        raise UnauthorizedError(message="Missing authentication credentials")

    return await auth_service.authenticate(db, credentials.credentials)


async def _read_json_object(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError(message="Request body must be valid JSON")

    if not isinstance(body, dict):
        raise ValidationError(message="Request body must be a JSON object")
    return body


async def get_create_fields(request: Request) -> Dict[str, Any]:
    """Parse and validate a POST body into the fields of the new setup."""
    body = await _read_json_object(request)
    try:
        payload = SetupCreateRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e)
    return payload.setup.model_dump()


async def get_update_body(request: Request) -> Dict[str, Any]:
    """
    Parse a PATCH body and strip its blank strings.

    Schema validation is left to SetupService.update_setup, which runs it
    after the not-found and ownership checks.
    """
    body = await _read_json_object(request)
    return remove_blank_fields(body)
