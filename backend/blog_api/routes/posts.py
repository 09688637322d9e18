"""
Blog API Backend — Posts Route Handlers
=========================================

What:  CRUD endpoints for blog posts under /api/posts.
Why:   The browser client's Model layer talks to these endpoints only.
How:   Each handler logs the call, delegates to PostService with an injected
       session, and returns a response schema. Errors are raised as
       BlogAPIError subclasses and mapped to status codes in main.py.
Who:   Called by the client (fetch) and by API tests via httpx.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.database import get_db_session
from blog_api.schemas.post import DeleteResponse, ErrorResponse, PostInput, PostResponse
from blog_api.services.post_service import PostService, get_post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Posts"])


@router.get(
    "/posts",
    response_model=List[PostResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all blog posts, newest first",
)
async def list_posts(
    db: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> List[PostResponse]:
    logger.info("GET /api/posts - Fetching all blog posts")
    return await service.list_posts(db)


@router.get(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Invalid id", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single blog post by ID",
)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    logger.info("GET /api/posts/%s - Fetching blog post", post_id)
    return await service.get_post(db, post_id)


@router.post(
    "/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Title or content missing", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a blog post",
    description=(
        "Creates a post from {title, content, author?}. Author defaults to "
        "'Anonymous'. Returns the stored post including its assigned id."
    ),
)
async def create_post(
    payload: PostInput,
    db: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    logger.info("POST /api/posts - Creating new blog post")
    return await service.create_post(db, payload)


@router.put(
    "/posts/{post_id}",
    response_model=PostResponse,
    responses={
        400: {"description": "Title or content missing", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Replace a blog post's title, content and author",
)
async def update_post(
    post_id: int,
    payload: PostInput,
    db: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    logger.info("PUT /api/posts/%s - Updating blog post", post_id)
    return await service.update_post(db, post_id, payload)


@router.delete(
    "/posts/{post_id}",
    response_model=DeleteResponse,
    responses={
        404: {"description": "Post not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a blog post",
)
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: PostService = Depends(get_post_service),
) -> DeleteResponse:
    logger.info("DELETE /api/posts/%s - Deleting blog post", post_id)
    return await service.delete_post(db, post_id)
