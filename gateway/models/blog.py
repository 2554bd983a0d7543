"""Blog post data models."""

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from gateway.services.slugs import SLUG_PATTERN

# Accepted in addition to ISO-8601 dates and datetimes
_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%d %B %Y", "%Y/%m/%d")


def _parse_date_string(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_publish_date(value: Any) -> datetime | None:
    """Parse a publish date and return the start of its UTC calendar day.

    Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        parsed = _parse_date_string(value.strip())
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return datetime.combine(parsed.date(), time.min, tzinfo=timezone.utc)


class BlogPostCreate(BaseModel):
    """Create-post payload. ``slug`` is filled in from the title upstream."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    slug: str = Field(..., min_length=1, max_length=160, pattern=SLUG_PATTERN)
    title: str = Field(..., min_length=3, max_length=160)
    author: str | None = Field(None, max_length=120)
    excerpt: str | None = Field(None, max_length=320)
    image: HttpUrl | None = None
    content: str = Field(..., min_length=20)
    published_at: datetime | None = Field(None, alias="publishedAt")

    @field_validator("author", "excerpt", "image", mode="before")
    @classmethod
    def blank_as_absent(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("published_at", mode="before")
    @classmethod
    def lenient_publish_date(cls, value: Any) -> datetime | None:
        """Unparseable dates are dropped rather than rejected."""
        return parse_publish_date(value)

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "slug": self.slug,
            "title": self.title,
            "author": self.author,
            "content": self.content,
        }
        if self.excerpt:
            doc["excerpt"] = self.excerpt
        if self.image is not None:
            doc["image"] = str(self.image)
        if self.published_at is not None:
            doc["publishedAt"] = self.published_at
        return doc


class StoredPost(BaseModel):
    """Blog post as persisted in the content store."""

    model_config = ConfigDict(populate_by_name=True)

    slug: str = Field(..., pattern=SLUG_PATTERN)
    title: str
    author: str | None = None
    content: str
    excerpt: str | None = None
    image: str | None = None
    published_at: datetime | None = Field(None, alias="publishedAt")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PublicPost(BaseModel):
    """Blog post as returned to clients."""

    model_config = ConfigDict(frozen=True)

    slug: str
    title: str
    author: str
    excerpt: str
    image: str | None = None
    content: str
    date: str


class PostList(BaseModel):
    posts: list[PublicPost]


class PostEnvelope(BaseModel):
    post: PublicPost


class PostCreated(BaseModel):
    slug: str
