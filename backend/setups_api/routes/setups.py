"""
Setups API - Setup Route Handlers
===================================

What:  The five /setups endpoints.
How:   Resolve the caller (where required), delegate to SetupService,
       shape the JSON envelope. Errors are raised, never returned.

Endpoint Inventory:
    GET    /setups        public      → 200 {"setups": [...]}
    GET    /setups/{id}   bearer      → 200 {"setup": {...}}
    POST   /setups        bearer      → 201 {"setup": {...}}
    PATCH  /setups/{id}   bearer+owner → 204
    DELETE /setups/{id}   bearer+owner → 204
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from setups_api.database import get_db_session
from setups_api.dependencies import get_create_fields, get_current_user, get_update_body
from setups_api.models.setup import Setup
from setups_api.models.user import User
from setups_api.schemas.setup import (
    ErrorResponse,
    SetupEnvelope,
    SetupListEnvelope,
    SetupResponse,
)
from setups_api.services.setup_service import setup_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Setups"])

_AUTH_ERRORS = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Setup not found", "model": ErrorResponse}}
_FORBIDDEN = {403: {"description": "Caller is not the owner", "model": ErrorResponse}}
_INVALID = {422: {"description": "Malformed setup payload", "model": ErrorResponse}}


def _serialize(setup: Setup) -> SetupResponse:
    return SetupResponse.model_validate(setup.to_dict())


@router.get(
    "/setups",
    response_model=SetupListEnvelope,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all setups",
)
async def list_setups(db: AsyncSession = Depends(get_db_session)) -> SetupListEnvelope:
    setups = await setup_service.list_setups(db)
    return SetupListEnvelope(setups=[_serialize(s) for s in setups])


@router.get(
    "/setups/{setup_id}",
    response_model=SetupEnvelope,
    responses={**_AUTH_ERRORS, **_NOT_FOUND},
    summary="Get a single setup by ID",
)
async def get_setup(
    setup_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SetupEnvelope:
    setup = await setup_service.get_setup(db, setup_id)
    return SetupEnvelope(setup=_serialize(setup))


@router.post(
    "/setups",
    response_model=SetupEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={**_AUTH_ERRORS, **_INVALID},
    summary="Create a setup owned by the caller",
)
async def create_setup(
    user: User = Depends(get_current_user),
    fields: Dict[str, Any] = Depends(get_create_fields),
    db: AsyncSession = Depends(get_db_session),
) -> SetupEnvelope:
    """
    Create a setup. Any `owner` in the body is ignored; the caller becomes the owner.
    """
    setup = await setup_service.create_setup(db, user, fields)
    return SetupEnvelope(setup=_serialize(setup))


@router.patch(
    "/setups/{setup_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_AUTH_ERRORS, **_FORBIDDEN, **_NOT_FOUND, **_INVALID},
    summary="Update fields of an owned setup",
)
async def update_setup(
    setup_id: str,
    user: User = Depends(get_current_user),
    body: Dict[str, Any] = Depends(get_update_body),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    Merge the given fields into the setup.

    Blank strings are dropped (they never blank out a stored value) and
    `owner` is ignored.
    """
    await setup_service.update_setup(db, setup_id, user, body.get("setup"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/setups/{setup_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_AUTH_ERRORS, **_FORBIDDEN, **_NOT_FOUND},
    summary="Delete an owned setup",
)
async def delete_setup(
    setup_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await setup_service.delete_setup(db, setup_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
