"""
Posts & Comments API — Shared Pydantic Schemas
================================================

What:  Base classes for record schemas plus the generic response bodies
       (errors, delete confirmation, liveness, health).
How:   Record schemas validate ORM rows via `from_attributes` and serialize
       with the wire names clients see (`_id`, `createdAt`, `postId`).
       Request bodies treat an explicit null like a missing field; partial
       updates additionally make every field optional.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


# ══════════════════════════════════════════════════════════════════════════
# Record Bases
# ══════════════════════════════════════════════════════════════════════════


class RecordSchema(BaseModel):
    """
    Serialized form of a stored record.

    `id` and `created_at` are store-assigned; subclasses add the resource's
    own fields. Serialize with `model_dump(by_alias=True, mode="json")`.
    """

    id: str = Field(
        validation_alias=AliasChoices("_id", "id"),
        serialization_alias="_id",
        description="Store-assigned identifier",
    )
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
        description="Insertion timestamp (UTC ISO 8601)",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; every stored timestamp is UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class BodySchema(BaseModel):
    """
    Base for request bodies: an explicit null counts as a missing field.

    `{"title": null}` fails with the same "Field required" error as a body
    without `title`.
    """

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise PydanticCustomError("missing", "Field required")
        return v


class PartialUpdateSchema(BodySchema):
    """
    Base for update bodies: all fields optional, none nullable once supplied.

    Only fields present in the body are validated (defaults are skipped),
    so `{"content": null}` is rejected while `{}` is accepted.
    """

    model_config = ConfigDict(populate_by_name=False)


# ══════════════════════════════════════════════════════════════════════════
# Response Bodies
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str = Field(description="Human-readable error description")


class MessageResponse(BaseModel):
    """Body of a successful delete and of the liveness probe."""
    message: str = Field(description="Status message")


class HealthResponse(BaseModel):
    """
    Who:   Returned by GET /health for monitoring and container probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
    detail: Optional[str] = Field(default=None, description="Failure detail when unhealthy")
