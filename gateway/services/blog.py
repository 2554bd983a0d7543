"""Blog post service: the write pipeline and the read path."""

import logging
from typing import Any

from gateway.errors import (
    DuplicateKeyError,
    PersistenceFailed,
    PostNotFound,
    RepositoryError,
    SlugConflict,
)
from gateway.models.blog import PublicPost
from gateway.services.presenter import to_public_post
from gateway.services.repository import DESCENDING, ContentRepository, SortSpec
from gateway.services.validation import derive_slug_candidate, validate_post_payload

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 100

# Newest first by publish date (creation time when undated), then creation time
LIST_SORT: SortSpec = [
    (("publishedAt", "createdAt"), DESCENDING),
    ("createdAt", DESCENDING),
]


def parse_limit(raw: Any) -> int | None:
    """Positive integer capped at MAX_LIST_LIMIT; anything else means no cap."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    if value <= 0:
        return None
    return min(value, MAX_LIST_LIMIT)


class BlogService:
    """Validates, stores and presents blog posts.

    Holds no per-request state. Store failures are logged here and turned
    into PersistenceFailed; nothing is retried.
    """

    def __init__(self, repository: ContentRepository, default_author: str) -> None:
        self._repository = repository
        self._default_author = default_author

    async def create(self, payload: Any) -> str:
        """Store a new post and return its slug."""
        slug = derive_slug_candidate(payload)
        post = validate_post_payload(payload, slug, self._default_author)

        try:
            await self._repository.insert_unique(post.to_document())
        except DuplicateKeyError as e:
            logger.info("Rejected duplicate slug %s", post.slug)
            raise SlugConflict(post.slug) from e
        except RepositoryError as e:
            logger.exception("Failed to save post %s", post.slug)
            raise PersistenceFailed("Failed to save post.") from e

        logger.info("Created post %s", post.slug)
        return post.slug

    async def list_posts(self, limit_param: Any = None) -> list[PublicPost]:
        limit = parse_limit(limit_param)
        try:
            docs = await self._repository.find(sort=LIST_SORT, limit=limit)
        except RepositoryError as e:
            logger.exception("Failed to list posts")
            raise PersistenceFailed("Failed to load posts.") from e
        return [to_public_post(d, self._default_author) for d in docs]

    async def get_post(self, slug: str) -> PublicPost:
        try:
            doc = await self._repository.find_one(slug)
        except RepositoryError as e:
            logger.exception("Failed to load post %s", slug)
            raise PersistenceFailed("Failed to load post.") from e
        if doc is None:
            raise PostNotFound(slug)
        return to_public_post(doc, self._default_author)
