"""Map stored post documents to their public representation."""

import re
from datetime import datetime, timezone
from typing import Any

from gateway.models.blog import PublicPost

EXCERPT_LENGTH = 180
ELLIPSIS = "..."

_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_MARKDOWN_PUNCT_RE = re.compile(r"[#>*_`-]")
_WHITESPACE_RE = re.compile(r"\s+")


def derive_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    """Plain-text summary of markdown-ish content.

    Link syntax keeps only its text; heading, quote, emphasis, code and
    list punctuation is dropped.
    """
    text = _LINK_RE.sub(r"\1", content)
    text = _MARKDOWN_PUNCT_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text).strip()
    if len(text) <= length:
        return text
    return text[:length].rstrip() + ELLIPSIS


def _coerce_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def format_display_date(value: Any) -> str:
    """Long-form UTC date such as ``January 5, 2024``; ``""`` if unusable."""
    dt = _coerce_datetime(value)
    if dt is None:
        return ""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return f"{dt:%B} {dt.day}, {dt.year}"


def to_public_post(doc: dict[str, Any], default_author: str) -> PublicPost:
    content = doc.get("content") or ""
    return PublicPost(
        slug=doc["slug"],
        title=doc.get("title") or "",
        author=doc.get("author") or default_author,
        excerpt=doc.get("excerpt") or derive_excerpt(content),
        image=doc.get("image") or None,
        content=content,
        date=format_display_date(doc.get("publishedAt") or doc.get("createdAt")),
    )
