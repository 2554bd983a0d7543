"""FastAPI dependencies: shared components and the bearer-token gate."""

import logging
from typing import Annotated, Any

from fastapi import Depends, Header

from gateway.config import Settings, get_settings
from gateway.errors import MissingCredential
from gateway.services.blob_storage import BlobContentRepository, create_container_client
from gateway.services.blog import BlogService
from gateway.services.repository import ContentRepository, InMemoryContentRepository
from gateway.services.tokens import TokenCodec

logger = logging.getLogger(__name__)

MEMORY_STORE_SCHEME = "memory://"

# Lazy singleton, lives for the process lifetime
_repository: ContentRepository | None = None


def create_repository(settings: Settings) -> ContentRepository:
    """Build the repository named by ``CONTENT_STORE_URI``."""
    uri = settings.content_store_uri.strip()
    if uri.startswith(MEMORY_STORE_SCHEME):
        logger.warning("Using in-memory content store; posts will not persist")
        return InMemoryContentRepository()
    client = create_container_client(
        uri, settings.content_container, settings.managed_identity_client_id
    )
    return BlobContentRepository(client)


def get_repository() -> ContentRepository:
    """Return the shared content repository (lazy singleton)."""
    global _repository
    if _repository is None:
        _repository = create_repository(get_settings())
    return _repository


def get_token_codec(settings: Annotated[Settings, Depends(get_settings)]) -> TokenCodec:
    return TokenCodec(settings.signing_secret, settings.token_expiry)


def get_blog_service(
    settings: Annotated[Settings, Depends(get_settings)],
    repository: Annotated[ContentRepository, Depends(get_repository)],
) -> BlogService:
    return BlogService(repository, settings.default_author)


def require_token(
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    authorization: Annotated[str | None, Header()] = None,
) -> dict[str, Any]:
    """Reject the request unless it carries a valid ``Bearer`` token.

    Any valid token is accepted; scopes are not checked per route.
    """
    if not authorization:
        raise MissingCredential()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise MissingCredential()
    return codec.verify(token)
