"""Tests for blog payload validation."""

from datetime import datetime, timezone

import pytest

from gateway.errors import ValidationFailed
from gateway.models.blog import BlogPostCreate, parse_publish_date
from gateway.services.validation import (
    derive_slug_candidate,
    validate_post_payload,
)

DEFAULT_AUTHOR = "Editorial Team"
CONTENT = "This content is comfortably longer than twenty characters."


def _validate(payload):
    return validate_post_payload(payload, derive_slug_candidate(payload), DEFAULT_AUTHOR)


def _fields(exc: ValidationFailed) -> set[str]:
    return {i.field for i in exc.issues}


class TestDeriveSlugCandidate:
    def test_prefers_explicit_slug(self):
        assert derive_slug_candidate({"slug": "My Slug", "title": "Other"}) == "my-slug"

    def test_falls_back_to_title(self):
        assert derive_slug_candidate({"title": "Hello, World!"}) == "hello-world"

    def test_blank_slug_uses_title(self):
        assert derive_slug_candidate({"slug": "   ", "title": "Title Here"}) == "title-here"

    def test_non_dict_payload(self):
        assert derive_slug_candidate(["not", "a", "dict"]) == ""


class TestValidatePostPayload:
    def test_valid_payload_gets_defaults(self):
        post = _validate({"title": "  A Fine Title  ", "content": CONTENT})

        assert post.slug == "a-fine-title"
        assert post.title == "A Fine Title"
        assert post.author == DEFAULT_AUTHOR
        assert post.excerpt is None
        assert post.image is None
        assert post.published_at is None

    def test_short_content_reports_content_field(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate({"title": "A Fine Title", "content": "too short"})

        issues = exc_info.value.issues
        assert [(i.field, i.rule) for i in issues] == [("content", "min_length")]

    def test_collects_every_issue(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate(
                {
                    "title": "Hi",
                    "author": "x" * 121,
                    "excerpt": "y" * 321,
                    "image": "/relative/path.png",
                }
            )

        assert _fields(exc_info.value) == {"title", "author", "excerpt", "image", "content"}

    def test_missing_title_and_slug(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate({"content": CONTENT})

        assert _fields(exc_info.value) == {"title", "slug"}

    def test_title_that_normalizes_to_nothing(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate({"title": "?!?!", "content": CONTENT})

        assert _fields(exc_info.value) == {"slug"}

    def test_non_string_field_is_type_issue(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate({"title": "A Fine Title", "content": 12345})

        assert [(i.field, i.rule) for i in exc_info.value.issues] == [("content", "type")]

    def test_non_object_payload(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_post_payload("nope", "", DEFAULT_AUTHOR)

        assert _fields(exc_info.value) == {"body"}

    def test_slug_too_long(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate({"slug": "a" * 161, "title": "A Fine Title", "content": CONTENT})

        assert _fields(exc_info.value) == {"slug"}

    def test_absolute_image_url_accepted(self):
        post = _validate(
            {"title": "A Fine Title", "content": CONTENT, "image": "https://cdn.example.com/a.png"}
        )
        assert str(post.image) == "https://cdn.example.com/a.png"
        assert post.to_document()["image"] == "https://cdn.example.com/a.png"

    def test_blank_optional_fields_treated_as_absent(self):
        post = _validate(
            {"title": "A Fine Title", "content": CONTENT, "author": "  ", "image": ""}
        )
        assert post.author == DEFAULT_AUTHOR
        assert post.image is None

    def test_unparseable_date_is_omitted(self):
        post = _validate({"title": "A Fine Title", "content": CONTENT, "publishedAt": "someday"})
        assert post.published_at is None
        assert "publishedAt" not in post.to_document()

    def test_date_normalized_to_utc_midnight(self):
        post = _validate(
            {"title": "A Fine Title", "content": CONTENT, "date": "2024-01-05T18:30:00Z"}
        )
        assert post.published_at == datetime(2024, 1, 5, tzinfo=timezone.utc)

    def test_rules_are_data(self):
        schema = BlogPostCreate.model_json_schema(by_alias=False)
        title = schema["properties"]["title"]

        assert title["minLength"] == 3
        assert title["maxLength"] == 160
        assert schema["properties"]["content"]["minLength"] == 20
        assert {"slug", "title", "content"} <= set(schema["required"])

    def test_blank_title_is_required_issue(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_post_payload(
                {"title": "   ", "content": CONTENT}, "explicit-slug", DEFAULT_AUTHOR
            )

        assert [(i.field, i.rule) for i in exc_info.value.issues] == [("title", "required")]

    def test_non_http_image_is_url_issue(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate(
                {"title": "A Fine Title", "content": CONTENT, "image": "ftp://files/a.png"}
            )

        assert [(i.field, i.rule) for i in exc_info.value.issues] == [("image", "url")]

    def test_issue_messages_name_the_field(self):
        with pytest.raises(ValidationFailed) as exc_info:
            _validate({"title": "A Fine Title", "content": "short"})

        assert exc_info.value.issues[0].message.startswith("content:")


class TestParsePublishDate:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-01-05", datetime(2024, 1, 5, tzinfo=timezone.utc)),
            ("2024-01-05T23:59:59+00:00", datetime(2024, 1, 5, tzinfo=timezone.utc)),
            # 01:00 in UTC+02:00 is still the previous UTC day
            ("2024-01-05T01:00:00+02:00", datetime(2024, 1, 4, tzinfo=timezone.utc)),
            ("January 5, 2024", datetime(2024, 1, 5, tzinfo=timezone.utc)),
        ],
    )
    def test_parses_to_start_of_utc_day(self, value, expected):
        assert parse_publish_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "not a date", 42, "2024-13-45"])
    def test_unparseable_returns_none(self, value):
        assert parse_publish_date(value) is None
