"""
Blog API Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models defining the API contract with the browser client.
Why:   Input parsing, serialization, and OpenAPI doc generation.
How:   FastAPI parses request bodies into PostInput and serializes responses
       through PostResponse / DeleteResponse (by alias, so fields come out
       camelCase: createdAt, updatedAt).

Design Decision:
    PostInput declares title and content as Optional. A missing field must
    produce 400 "Title and content are required" from the service layer,
    not FastAPI's field-level 422, so the required-field rule lives in
    PostService rather than in the schema.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from blog_api.models.post import Post, ensure_utc


def format_timestamp(value: datetime) -> str:
    """
    ISO-8601 UTC with millisecond precision and a trailing Z.

    Example: 2024-01-15T12:00:00.000Z (the shape of JavaScript's
    Date.prototype.toISOString, which the browser client parses).
    """
    return ensure_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostInput(BaseModel):
    """
    Body of POST /api/posts and PUT /api/posts/{id}.

    Update is a full replace: an omitted author resets to "Anonymous".
    """
    title: Optional[str] = Field(default=None, description="Post title (required, non-empty)")
    content: Optional[str] = Field(default=None, description="Post body (required, non-empty)")
    author: Optional[str] = Field(
        default=None,
        description="Author name; defaults to 'Anonymous' when missing or empty",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(BaseModel):
    """
    Full representation of a blog post.

    Every Post returned to a client carries all six fields, timestamps as
    ISO-8601 strings.
    """
    id: int = Field(description="Server-assigned identifier (never reused)")
    title: str
    content: str
    author: str
    created_at: datetime = Field(alias="createdAt", description="Creation time (UTC)")
    updated_at: datetime = Field(alias="updatedAt", description="Last update time (UTC)")

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_model(cls, post: Post) -> "PostResponse":
        """
        Row-to-entity conversion.

        Timestamps are normalized to aware UTC here. A stored value SQLite
        cannot parse never reaches this point: SQLAlchemy raises while
        loading the row, and the service reports it as a DatabaseError.
        """
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author=post.author,
            created_at=ensure_utc(post.created_at),
            updated_at=ensure_utc(post.updated_at),
        )


class DeleteResponse(BaseModel):
    """Confirmation body for DELETE /api/posts/{id}."""
    message: str = Field(default="Post deleted successfully")
    id: int = Field(description="Identifier of the deleted post")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body returned for every 4xx/5xx produced by this service.

    Example:
        {"error": "Title and content are required"}

    Correlation id travels in the X-Request-ID response header.
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
