"""Azure Blob Storage content repository.

Each post is one JSON blob at ``posts/{slug}.json``. Uploads use
``overwrite=False`` so the storage service itself rejects a second post
with the same slug, which makes concurrent creates safe without any
locking on our side.
"""

import logging
import re
from typing import Any
from urllib.parse import urlparse

from azure.core.exceptions import (
    AzureError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.identity import ManagedIdentityCredential
from azure.storage.blob import ContainerClient, ContentSettings
from pydantic import ValidationError

from gateway.errors import DuplicateKeyError, RepositoryError
from gateway.models.blog import StoredPost
from gateway.services.repository import (
    ContentRepository,
    SortSpec,
    apply_query,
    utcnow,
)
from gateway.services.slugs import SLUG_PATTERN

logger = logging.getLogger(__name__)

POST_PREFIX = "posts/"
_SLUG_RE = re.compile(SLUG_PATTERN)
JSON_CONTENT = ContentSettings(content_type="application/json")


def create_container_client(
    store_uri: str, container_name: str, managed_identity_client_id: str = ""
) -> ContainerClient:
    """Create a ContainerClient from a connection string or an account URL.

    ``https://<account>.blob.core.windows.net/<container>`` authenticates with
    managed identity; the path segment, when present, names the container.
    """
    if store_uri.startswith("https://"):
        parsed = urlparse(store_uri)
        account_url = f"{parsed.scheme}://{parsed.netloc}"
        container = parsed.path.strip("/").split("/")[0] or container_name
        credential = ManagedIdentityCredential(
            client_id=managed_identity_client_id or None
        )
        return ContainerClient(
            account_url=account_url,
            container_name=container,
            credential=credential,
        )
    return ContainerClient.from_connection_string(
        store_uri, container_name=container_name
    )


def _blob_name(slug: str) -> str:
    if not _SLUG_RE.match(slug):
        raise ValueError(f"Invalid slug for blob path: {slug!r}")
    return f"{POST_PREFIX}{slug}.json"


def _serialize(doc: dict[str, Any]) -> str:
    return StoredPost.model_validate(doc).model_dump_json(
        by_alias=True, exclude_none=True, indent=2
    )


def _deserialize(raw: bytes) -> dict[str, Any]:
    return StoredPost.model_validate_json(raw).to_document()


class BlobContentRepository(ContentRepository):
    """Posts stored as individual blobs in one container."""

    def __init__(self, container_client: ContainerClient) -> None:
        self._client = container_client

    async def ping(self) -> None:
        """Lightweight connectivity check; lists at most one blob."""
        try:
            next(iter(self._client.list_blobs(results_per_page=1)), None)
        except AzureError as e:
            raise RepositoryError(f"Blob storage unreachable: {e}") from e

    async def find(
        self,
        filter: dict[str, Any] | None = None,
        sort: SortSpec | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        try:
            docs = []
            for props in self._client.list_blobs(name_starts_with=POST_PREFIX):
                blob = self._client.get_blob_client(props.name)
                docs.append(_deserialize(blob.download_blob().readall()))
        except AzureError as e:
            raise RepositoryError(f"Failed to list posts: {e}") from e
        except ValidationError as e:
            raise RepositoryError(f"Corrupt post blob: {e}") from e
        return apply_query(docs, filter=filter, sort=sort, limit=limit)

    async def find_one(self, slug: str) -> dict[str, Any] | None:
        try:
            name = _blob_name(slug)
        except ValueError:
            return None
        try:
            blob = self._client.get_blob_client(name)
            return _deserialize(blob.download_blob().readall())
        except ResourceNotFoundError:
            return None
        except AzureError as e:
            raise RepositoryError(f"Failed to read post {slug}: {e}") from e
        except ValidationError as e:
            raise RepositoryError(f"Corrupt post blob {slug}: {e}") from e

    async def insert_unique(self, doc: dict[str, Any]) -> dict[str, Any]:
        slug = doc["slug"]
        now = utcnow()
        stored = {**doc, "createdAt": now, "updatedAt": now}
        try:
            body = _serialize(stored)
        except ValidationError as e:
            raise RepositoryError(f"Refusing to store invalid post {slug}: {e}") from e
        try:
            blob = self._client.get_blob_client(_blob_name(slug))
            blob.upload_blob(body, overwrite=False, content_settings=JSON_CONTENT)
        except ResourceExistsError as e:
            raise DuplicateKeyError(slug) from e
        except AzureError as e:
            raise RepositoryError(f"Failed to write post {slug}: {e}") from e
        logger.info("Stored post %s in blob storage", slug)
        return stored

    async def close(self) -> None:
        self._client.close()
