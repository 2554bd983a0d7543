"""Seed sample blog posts into the configured content store.

Usage:
    python -m scripts.seed_posts

Goes through BlogService, so posts are validated exactly like API writes.
Posts whose slug already exists are skipped.
"""

import asyncio
import logging

from gateway.config import get_settings
from gateway.dependencies import create_repository
from gateway.errors import SlugConflict
from gateway.logging_config import configure_logging
from gateway.services.blog import BlogService

logger = logging.getLogger("scripts.seed_posts")

SEED_POSTS = [
    {
        "title": "Welcome to the Blog",
        "author": "Editorial Team",
        "publishedAt": "2026-01-05",
        "content": (
            "# Welcome\n\nThis is the first post on the new blog. "
            "Posts are written in markdown and published through the API."
        ),
    },
    {
        "title": "Publishing With Bearer Tokens",
        "publishedAt": "2026-01-12",
        "image": "https://images.unsplash.com/photo-1515879218367-8466d910aaa4?w=600&h=400&fit=crop",
        "content": (
            "Log in with the admin secret at `/auth/login`, then send the token "
            "as `Authorization: Bearer <token>` when creating posts. "
            "See [the API notes](https://example.com/api) for details."
        ),
    },
    {
        "title": "Slugs, Explained",
        "slug": "slugs-explained",
        "excerpt": "How post URLs are derived from titles.",
        "content": (
            "Every post gets a slug: lowercase letters and digits joined by "
            "single hyphens. When no slug is supplied it comes from the title."
        ),
    },
]


async def seed() -> int:
    settings = get_settings()
    repository = create_repository(settings)
    service = BlogService(repository, settings.default_author)
    created = 0
    try:
        for payload in SEED_POSTS:
            try:
                slug = await service.create(payload)
            except SlugConflict as e:
                logger.info("Skipping existing post %s", e.slug)
                continue
            logger.info("Seeded post %s", slug)
            created += 1
    finally:
        await repository.close()
    return created


def main() -> None:
    configure_logging()
    created = asyncio.run(seed())
    logger.info("Seeded %d post(s)", created)


if __name__ == "__main__":
    main()
