"""Slug normalization for post URLs."""

import re

_DISALLOWED_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-{2,}")

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def normalize_slug(text: str) -> str:
    """Turn arbitrary text into a lowercase, hyphen-separated slug.

    Never fails; text with no usable characters yields ``""``. Applying it
    to its own output returns the same string.
    """
    slug = _DISALLOWED_RE.sub("", text.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")
