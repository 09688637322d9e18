"""
Blog API Backend — Post Service (Business Logic)
==================================================

What:  CRUD operations for blog posts: validate → execute → read back.
Why:   Keeps SQL and validation out of the route handlers, so the rules can be
       tested against a mock session or a temporary SQLite file without HTTP.
How:   Each method receives an AsyncSession (injected per request), performs
       one logical statement (or a write followed by a read-back), and returns
       a response schema.
Who:   Called by the /api/posts route handlers.

Error Handling Strategy:
    - Missing title/content  → ValidationError (400), nothing executed
    - No row for the id      → NotFoundError (404)
    - Anything the database raises → logged with traceback, re-raised as
      DatabaseError (500) carrying a generic per-operation message

Design Decision:
    The clock is injected. Production uses the wall clock; tests pass a
    deterministic one so updatedAt ordering can be asserted exactly.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import delete, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.exceptions import BlogAPIError, DatabaseError, NotFoundError, ValidationError
from blog_api.models.post import DEFAULT_AUTHOR, Post, ensure_utc, utcnow
from blog_api.schemas.post import DeleteResponse, PostInput, PostResponse

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; no row can carry an id outside it
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1


class PostService:
    """
    Business logic layer for post operations.

    Responsibilities:
        - list_posts(): all posts, newest first
        - get_post(): single post with not-found handling
        - create_post(): validated insert, returns the stored row
        - update_post(): validated full replace, bumps updated_at
        - delete_post(): hard delete with not-found handling
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def _validate(payload: PostInput) -> None:
        """Title and content must both be present and non-empty."""
        if not payload.title or not payload.content:
            raise ValidationError(
                message="Title and content are required",
                field="title" if not payload.title else "content",
                context={
                    "title_present": bool(payload.title),
                    "content_present": bool(payload.content),
                },
            )

    @staticmethod
    def _ensure_addressable(post_id: int) -> None:
        """Ids the driver cannot bind cannot exist, so they are simply not found."""
        if not SQLITE_MIN_INTEGER <= post_id <= SQLITE_MAX_INTEGER:
            raise NotFoundError(resource="Post", resource_id=post_id)

    @staticmethod
    def _author(payload: PostInput) -> str:
        return payload.author or DEFAULT_AUTHOR

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_posts(self, db: AsyncSession) -> List[PostResponse]:
        """
        Every post, most recent first.

        Query plan:
            SELECT * FROM posts ORDER BY created_at DESC, id DESC
            Ties on created_at fall back to insertion order (newest id first).
        """
        try:
            result = await db.execute(
                select(Post).order_by(desc(Post.created_at), desc(Post.id))
            )
            return [PostResponse.from_model(post) for post in result.scalars().all()]
        except Exception as e:
            logger.error("Error fetching posts: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch posts",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_post(self, db: AsyncSession, post_id: int) -> PostResponse:
        """
        Retrieve a single post by id.

        Raises:
            NotFoundError: No post with that id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            self._ensure_addressable(post_id)
            post = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="Post", resource_id=post_id)
            return PostResponse.from_model(post)
        except BlogAPIError:
            raise
        except Exception as e:
            logger.error("Error fetching post %s: %s", post_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch post",
                context={"post_id": post_id, "error_type": type(e).__name__},
            ) from e

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_post(self, db: AsyncSession, payload: PostInput) -> PostResponse:
        """
        Insert a new post and return it as stored.

        created_at and updated_at share one clock reading, so a fresh post
        always reports createdAt == updatedAt.

        Raises:
            ValidationError: title or content missing/empty (→ 400)
            DatabaseError: insert or read-back failed (→ 500)
        """
        self._validate(payload)

        now = self._clock()
        post = Post(
            title=payload.title,
            content=payload.content,
            author=self._author(payload),
            created_at=now,
            updated_at=now,
        )

        try:
            db.add(post)
            await db.flush()  # assigns the AUTOINCREMENT id
            await db.commit()
            logger.info("Post created with ID: %s", post.id)

            # Read back so the response reflects what the database holds
            await db.refresh(post)
            return PostResponse.from_model(post)
        except Exception as e:
            logger.error("Error creating post: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to create post",
                context={"error_type": type(e).__name__},
            ) from e

    async def update_post(
        self, db: AsyncSession, post_id: int, payload: PostInput
    ) -> PostResponse:
        """
        Replace title, content and author of an existing post.

        id and created_at are never touched. updated_at becomes the current
        time, clamped so it is never earlier than created_at.

        Raises:
            ValidationError: title or content missing/empty (→ 400)
            NotFoundError: No post with that id (→ 404)
            DatabaseError: update or read-back failed (→ 500)
        """
        self._validate(payload)

        try:
            self._ensure_addressable(post_id)
            post: Optional[Post] = await db.get(Post, post_id)
            if post is None:
                raise NotFoundError(resource="Post", resource_id=post_id)

            post.title = payload.title
            post.content = payload.content
            post.author = self._author(payload)
            post.updated_at = max(self._clock(), ensure_utc(post.created_at))

            await db.commit()
            logger.info("Post updated with ID: %s", post_id)

            await db.refresh(post)
            return PostResponse.from_model(post)
        except BlogAPIError:
            raise
        except Exception as e:
            logger.error("Error updating post %s: %s", post_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to update post",
                context={"post_id": post_id, "error_type": type(e).__name__},
            ) from e

    async def delete_post(self, db: AsyncSession, post_id: int) -> DeleteResponse:
        """
        Hard-delete a post.

        Raises:
            NotFoundError: No row matched (→ 404). Deleting twice gives 200, then 404.
            DatabaseError: Statement failed (→ 500)
        """
        try:
            self._ensure_addressable(post_id)
            result = await db.execute(delete(Post).where(Post.id == post_id))
            if result.rowcount == 0:
                logger.info("Post not found with ID: %s", post_id)
                raise NotFoundError(resource="Post", resource_id=post_id)

            await db.commit()
            logger.info("Post deleted with ID: %s", post_id)
            return DeleteResponse(message="Post deleted successfully", id=post_id)
        except BlogAPIError:
            raise
        except Exception as e:
            logger.error("Error deleting post %s: %s", post_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to delete post",
                context={"post_id": post_id, "error_type": type(e).__name__},
            ) from e


# ── Default Instance ──────────────────────────────────────────────────────
# PostService is stateless apart from its clock; one instance serves all requests
post_service = PostService()


def get_post_service() -> PostService:
    """
    FastAPI dependency returning the service.

    Tests swap it via `app.dependency_overrides[get_post_service]`.
    """
    return post_service
