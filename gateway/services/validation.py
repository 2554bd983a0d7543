"""Blog payload validation.

The rules themselves are the ``Field`` constraints on ``BlogPostCreate``.
This module derives the slug, runs the model and turns pydantic's error
list into ``ValidationIssue`` records, so a client sees every problem with
a payload in one response.
"""

from typing import Any

from pydantic import ValidationError

from gateway.errors import ValidationFailed, ValidationIssue
from gateway.models.blog import BlogPostCreate
from gateway.services.slugs import normalize_slug

# pydantic error type -> rule name reported to clients
_RULE_NAMES = {
    "missing": "required",
    "string_too_short": "min_length",
    "string_too_long": "max_length",
    "string_pattern_mismatch": "pattern",
    "string_type": "type",
    "model_type": "type",
}


def derive_slug_candidate(payload: Any) -> str:
    """Normalized slug from the explicit ``slug`` field, else from ``title``."""
    if not isinstance(payload, dict):
        return ""
    for key in ("slug", "title"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return normalize_slug(value)
    return ""


def _issue_from_error(error: dict[str, Any]) -> ValidationIssue:
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else "body"
    kind = error["type"]
    if kind.startswith("url_"):
        rule = "url"
    elif kind == "string_too_short" and not str(error.get("input", "")).strip():
        rule = "required"
    else:
        rule = _RULE_NAMES.get(kind, kind)
    return ValidationIssue(field, rule, f"{field}: {error['msg']}")


def validate_post_payload(
    payload: Any, slug: str, default_author: str
) -> BlogPostCreate:
    """Check a raw create-post payload and apply defaults.

    Raises ValidationFailed listing every violated rule.
    """
    if not isinstance(payload, dict):
        raise ValidationFailed(
            [ValidationIssue("body", "type", "payload must be a JSON object")]
        )

    data = {
        **payload,
        "slug": slug,
        "publishedAt": payload.get("publishedAt", payload.get("date")),
    }
    try:
        post = BlogPostCreate.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed([_issue_from_error(err) for err in e.errors()]) from e

    if not post.author:
        post = post.model_copy(update={"author": default_author})
    return post
