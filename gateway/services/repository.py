"""Content repository interface and the in-process implementation.

A repository stores post documents keyed by ``slug`` and guarantees that
``insert_unique`` never lets two documents share a slug, however many
requests race for it. Both ``createdAt`` and ``updatedAt`` are assigned by
the repository on insert.

Sorting: ``find`` takes a list of ``(field, direction)`` pairs where
direction is ``ASCENDING`` or ``DESCENDING``. A field may be a tuple of
names, in which case the first one present on the document is used. Missing
values order below every present value.
"""

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from gateway.errors import DuplicateKeyError

logger = logging.getLogger(__name__)

ASCENDING = 1
DESCENDING = -1

SortField = str | tuple[str, ...]
SortSpec = list[tuple[SortField, int]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sort_value(doc: dict[str, Any], field: SortField) -> Any:
    names = (field,) if isinstance(field, str) else field
    for name in names:
        value = doc.get(name)
        if value is not None:
            return value
    return None


def apply_query(
    docs: list[dict[str, Any]],
    filter: dict[str, Any] | None = None,
    sort: SortSpec | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Filter by field equality, sort, then truncate a list of documents."""
    result = [
        d for d in docs if all(d.get(k) == v for k, v in (filter or {}).items())
    ]
    # Stable sorts applied from the least to the most significant key
    for field, direction in reversed(sort or []):
        present = [d for d in result if _sort_value(d, field) is not None]
        missing = [d for d in result if _sort_value(d, field) is None]
        present.sort(
            key=lambda d: _sort_value(d, field), reverse=direction == DESCENDING
        )
        result = present + missing if direction == DESCENDING else missing + present
    if limit:
        result = result[:limit]
    return result


class ContentRepository(ABC):
    """Persistence boundary for post documents."""

    @abstractmethod
    async def find(
        self,
        filter: dict[str, Any] | None = None,
        sort: SortSpec | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return matching documents; ``limit`` of None means all."""

    @abstractmethod
    async def find_one(self, slug: str) -> dict[str, Any] | None:
        """Return the document with this slug, or None."""

    @abstractmethod
    async def insert_unique(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Insert a new document and return it with timestamps applied.

        Raises DuplicateKeyError if the slug exists, RepositoryError for any
        other store failure.
        """

    async def ping(self) -> None:
        """Raise RepositoryError if the store is unreachable."""

    async def close(self) -> None:
        """Release any client resources."""


class InMemoryContentRepository(ContentRepository):
    """Process-local store, used for development and tests."""

    def __init__(self) -> None:
        self._docs: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def find(
        self,
        filter: dict[str, Any] | None = None,
        sort: SortSpec | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        docs = [copy.deepcopy(d) for d in self._docs.values()]
        return apply_query(docs, filter=filter, sort=sort, limit=limit)

    async def find_one(self, slug: str) -> dict[str, Any] | None:
        doc = self._docs.get(slug)
        return copy.deepcopy(doc) if doc is not None else None

    async def insert_unique(self, doc: dict[str, Any]) -> dict[str, Any]:
        async with self._lock:
            slug = doc["slug"]
            if slug in self._docs:
                raise DuplicateKeyError(slug)
            now = utcnow()
            stored = {**copy.deepcopy(doc), "createdAt": now, "updatedAt": now}
            self._docs[slug] = stored
        logger.debug("Stored post %s in memory", slug)
        return copy.deepcopy(stored)
