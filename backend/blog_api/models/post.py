"""
Blog API Backend — Post SQLAlchemy Model
==========================================

What:  ORM model representing the `posts` table in SQLite.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from the shared DeclarativeBase; `create_all` builds the table
       on startup (there are no migrations).
Who:   Used by PostService for CRUD operations and by the database initializer.

Table Design Rationale:
    - INTEGER PRIMARY KEY AUTOINCREMENT: SQLite never hands out an id again
      after the row holding it is deleted (plain INTEGER PRIMARY KEY may reuse
      the highest id once it is freed).
    - author: NOT NULL with a server default of 'Anonymous'.
    - created_at / updated_at: stored as UTC. SQLite has no timezone-aware
      type, so values come back naive; `ensure_utc` re-attaches UTC.

    Index on created_at:
        The list endpoint always sorts newest first; SQLite walks the
        index backwards for ORDER BY created_at DESC.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from blog_api.database import Base

DEFAULT_AUTHOR = "Anonymous"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime read from SQLite to aware UTC.

    Naive values are assumed to already be UTC (that is how they were written).
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Post(Base):
    """
    Represents a blog post.

    Lifecycle:
        1. Created by POST /api/posts or by the one-time seed on first startup
        2. Mutated only by PUT /api/posts/{id} (title/content/author replaced,
           updated_at bumped; id and created_at never change)
        3. Hard-deleted by DELETE /api/posts/{id}
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_AUTHOR,
        server_default=text(f"'{DEFAULT_AUTHOR}'"),
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    # Defaults only apply when the service does not pass an explicit value;
    # the service always does so created_at == updated_at on insert.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        # AUTOINCREMENT keyword: ids are never reused after deletion
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title={self.title!r}, author={self.author!r})>"
