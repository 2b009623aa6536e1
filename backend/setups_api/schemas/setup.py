"""
Setups API - Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the API contract.
Why:   Input validation, serialization and OpenAPI docs from one definition.
How:   Request bodies wrap the record under a `setup` key and responses wrap
       it under `setup` / `setups`, matching what clients already send.

Design Decision:
    Setups are documents: only `title` is declared, any other JSON field is
    accepted (`extra="allow"`) and stored untouched. Server-owned keys
    (id, owner, timestamps) are dropped by the service before persistence.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SetupCreate(BaseModel):
    """Fields of a new setup. `title` is required; anything else is kept as-is."""

    title: str = Field(min_length=1, description="Display title of the setup")

    model_config = ConfigDict(extra="allow")


class SetupCreateRequest(BaseModel):
    """Body of POST /setups."""

    setup: SetupCreate


class SetupPatch(BaseModel):
    """
    Partial update of a setup.

    Blank strings are removed before this model sees the payload, so an
    empty form input never reaches validation. An explicit null title is
    rejected since every stored setup keeps a title.
    """

    title: Optional[str] = Field(default=None, min_length=1)

    model_config = ConfigDict(extra="allow")

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v


class SetupUpdateRequest(BaseModel):
    """Body of PATCH /setups/{id}."""

    setup: SetupPatch


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SetupResponse(BaseModel):
    """
    Serialized setup: server fields plus every stored document field.
    """

    id: uuid.UUID = Field(description="Unique setup identifier (UUID)")
    owner: str = Field(description="Identity of the user who created the setup")
    created_at: datetime = Field(description="Creation timestamp (UTC ISO 8601)")
    updated_at: datetime = Field(description="Last modification timestamp (UTC ISO 8601)")

    model_config = ConfigDict(extra="allow")


class SetupEnvelope(BaseModel):
    setup: SetupResponse


class SetupListEnvelope(BaseModel):
    setups: List[SetupResponse]


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "forbidden",
            "message": "You do not have permission to modify this resource",
            "details": null,
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
