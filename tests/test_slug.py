"""
Tests for job slug generation.
"""

import re

from hypothesis import given, strategies as st

from talentflow.utils.slug import generate_slug

SLUG_PATTERN = re.compile(r"^[a-z0-9-]*$")


class TestGenerateSlug:
    def test_simple_title(self):
        assert generate_slug("Backend Engineer") == "backend-engineer"

    def test_punctuation_is_dropped(self):
        assert generate_slug("C++ & C# Wizard") == "c-c-wizard"

    def test_existing_hyphens_are_kept_and_collapsed(self):
        assert generate_slug("Front-End -- Developer") == "front-end-developer"

    def test_surrounding_whitespace_and_hyphens_are_trimmed(self):
        assert generate_slug("  - Data Scientist -  ") == "data-scientist"

    def test_tabs_and_newlines_count_as_whitespace(self):
        assert generate_slug("QA\tEngineer\nII") == "qa-engineer-ii"

    def test_title_without_usable_characters(self):
        assert generate_slug("!!! ???") == ""


class TestSlugProperties:
    @given(title=st.text())
    def test_slug_charset(self, title):
        """Slugs only contain lowercase letters, digits and single inner hyphens."""
        slug = generate_slug(title)

        assert SLUG_PATTERN.match(slug)
        assert "--" not in slug
        assert not slug.startswith("-")
        assert not slug.endswith("-")

    @given(title=st.text())
    def test_slug_is_idempotent(self, title):
        slug = generate_slug(title)
        assert generate_slug(slug) == slug

    @given(words=st.lists(st.from_regex(r"[a-z0-9]+", fullmatch=True), min_size=1, max_size=6))
    def test_plain_words_join_with_hyphens(self, words):
        assert generate_slug(" ".join(words)) == "-".join(words)
