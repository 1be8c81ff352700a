# tests/unit/dedup/test_unit_text.py — v1
"""Tests for dedup/text.py — normalization and keyword extraction."""

from __future__ import annotations

import pytest

from reqintake.dedup.text import (
    category_slug,
    extract_keywords,
    normalize_text,
    ordered_keywords,
)


class TestNormalizeText:
    def test_lowercase_and_whitespace(self):
        assert normalize_text("  Road   REPAIR\n\tplan ") == "road repair plan"

    def test_typographic_quotes_and_dashes(self):
        text = "“City” ‘plan’ 2024–2025 — draft"
        assert normalize_text(text) == "city plan 2024-2025 - draft"

    def test_strips_urls_and_emails(self):
        text = "See https://example.gov/roads?id=1 or mail roads@example.gov now"
        assert normalize_text(text) == "see or mail now"

    def test_punctuation_becomes_space(self):
        assert normalize_text("roads,bridges;tunnels!") == "roads bridges tunnels"

    def test_keeps_hyphen(self):
        assert normalize_text("long-term plan") == "long-term plan"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty(self, value):
        assert normalize_text(value) == ""

    def test_deterministic(self):
        text = "Budget Request: Road Repair (2024)"
        assert normalize_text(text) == normalize_text(text)


class TestExtractKeywords:
    def test_filters(self):
        keywords = extract_keywords("the road to the new bridge in 2024 is ok")
        assert keywords == frozenset({"road", "new", "bridge"})

    def test_min_word_length(self):
        assert extract_keywords("bus road bridge", min_word_length=5) == frozenset({"bridge"})

    def test_lowercases(self):
        assert extract_keywords("Road BRIDGE") == frozenset({"road", "bridge"})

    def test_empty(self):
        assert extract_keywords("") == frozenset()
        assert extract_keywords(None) == frozenset()

    def test_ordered_first_occurrence(self):
        assert ordered_keywords("road bridge road tunnel bridge") == ["road", "bridge", "tunnel"]


class TestCategorySlug:
    def test_slug(self):
        assert category_slug("  Culture and  Tourism ") == "culture-and-tourism"
