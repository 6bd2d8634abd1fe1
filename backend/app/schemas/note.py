"""
Notes API — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract.
Why:   Input validation, serialization, and OpenAPI doc generation.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate Swagger/OpenAPI documentation automatically.

Stored shape:
    notes/<id> → {"id": <id>, "title": <str>, "content": <str>}
    The same three fields are what the API returns.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Domain / Response Models
# ══════════════════════════════════════════════════════════════════════════


class Note(BaseModel):
    """
    A note record, as stored under notes/<id> and as returned by the API.

    `id` is assigned by the server at creation and always equals the key the
    note is stored under.
    """
    id: str = Field(default="", description="Server-assigned note key")
    title: str = Field(default="", description="Free-form title")
    content: str = Field(default="", description="Free-form body")

    @field_validator("id", "title", "content", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


# ══════════════════════════════════════════════════════════════════════════
# Request Models: JSON bodies sent by the client
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /notes.

    Omitted fields default to empty strings. An `id` sent by the client is
    accepted by the parser and then discarded; the server assigns the key.
    """
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note content")

    model_config = {"extra": "ignore"}

    @field_validator("title", "content", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class NoteUpdate(NoteCreate):
    """
    Body of PUT /notes/{id}: the full replacement for a note.

    Fields left out are cleared, not preserved. A body `id` is ignored;
    the path id is authoritative.
    """
    id: Optional[str] = Field(default=None, description="Ignored; the path id is used")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "store_error",
            "message": "Permission denied",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and store status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
