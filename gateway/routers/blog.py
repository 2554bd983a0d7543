"""Blog post endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, status

from gateway.dependencies import get_blog_service, require_token
from gateway.errors import BadRequest
from gateway.models.blog import PostCreated, PostEnvelope, PostList
from gateway.services.blog import BlogService

router = APIRouter(prefix="/blogs", tags=["blogs"])


@router.get("", response_model=PostList, response_model_exclude_none=True)
async def list_blog_posts(
    service: Annotated[BlogService, Depends(get_blog_service)],
    limit: Annotated[
        str | None,
        Query(description="Maximum number of posts to return (1-100)"),
    ] = None,
):
    """List posts, newest first."""
    return PostList(posts=await service.list_posts(limit))


@router.get("/{slug}", response_model=PostEnvelope, response_model_exclude_none=True)
async def get_blog_post(
    service: Annotated[BlogService, Depends(get_blog_service)],
    slug: Annotated[str, Path()],
):
    """Get a single post by its slug."""
    return PostEnvelope(post=await service.get_post(slug))


@router.post(
    "",
    response_model=PostCreated,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_token)],
)
async def create_blog_post(
    request: Request,
    service: Annotated[BlogService, Depends(get_blog_service)],
):
    """Create a post. Requires a bearer token from ``/auth/login``.

    The body is read here rather than declared as a parameter so the token
    check runs before any parsing.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise BadRequest("Malformed request body.") from e
    return PostCreated(slug=await service.create(payload))
