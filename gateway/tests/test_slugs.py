"""Tests for slug normalization."""

import pytest

from gateway.services.slugs import normalize_slug


class TestNormalizeSlug:
    def test_punctuation_dropped(self):
        assert normalize_slug("Hello, World!") == "hello-world"

    def test_repeated_hyphens_and_edges(self):
        assert normalize_slug("  a--b  ") == "a-b"

    def test_empty(self):
        assert normalize_slug("") == ""

    def test_only_symbols_yields_empty(self):
        assert normalize_slug("!!! ???") == ""

    def test_whitespace_runs_become_single_hyphen(self):
        assert normalize_slug("one \t two\n\nthree") == "one-two-three"

    def test_digits_kept(self):
        assert normalize_slug("Top 10 Tips for 2024") == "top-10-tips-for-2024"

    def test_non_ascii_letters_dropped(self):
        assert normalize_slug("Café Olé") == "caf-ol"

    @pytest.mark.parametrize(
        "text",
        ["Hello, World!", "  a--b  ", "", "-x-", "Ünïcödé  & Friends", "a - - b", "__init__"],
    )
    def test_idempotent(self, text):
        once = normalize_slug(text)
        assert normalize_slug(once) == once
