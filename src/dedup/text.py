# src/dedup/text.py — v1
"""Text normalization and keyword extraction.

Both functions are pure: the same input always yields the same output.
"""

from __future__ import annotations

import re

DEFAULT_MIN_WORD_LENGTH = 3

STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the",
    "and", "but", "or", "nor", "for", "yet", "so",
    "in", "on", "at", "to", "of", "with", "by",
    "from", "into", "onto", "over", "under", "about", "than",
    "are", "was", "were", "been", "being", "has", "have", "had",
    "this", "that", "these", "those", "its", "our", "their", "his", "her",
    "which", "who", "whom", "will", "would", "shall", "should", "can",
    "could", "may", "might", "must", "not", "all", "any", "each",
})

_TYPOGRAPHIC = str.maketrans({
    "\u2018": "'", "\u2019": "'",
    "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-",
})
_URL_RE = re.compile(r"(?:https?://|www\.)\S+")
_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PUNCT_RE = re.compile(r"[^\w\s-]")
_SPACE_RE = re.compile(r"\s+")
_NUMERIC_RE = re.compile(r"^\d+$")


def normalize_text(text: str | None) -> str:
    """Canonical form of free text for comparison.

    Lower-cases, maps typographic quotes and dashes to ASCII, strips URLs and
    e-mail addresses, turns punctuation into spaces (hyphens are kept) and
    collapses whitespace.
    """
    if not text:
        return ""
    text = text.lower().translate(_TYPOGRAPHIC)
    text = _URL_RE.sub(" ", text)
    text = _EMAIL_RE.sub(" ", text)
    text = _PUNCT_RE.sub(" ", text)
    return _SPACE_RE.sub(" ", text).strip()


def is_numeric(token: str) -> bool:
    return bool(_NUMERIC_RE.match(token))


def ordered_keywords(
    text: str | None, min_word_length: int = DEFAULT_MIN_WORD_LENGTH
) -> list[str]:
    """Significant tokens of ``text``, de-duplicated, in first-occurrence order."""
    if not text:
        return []
    seen: set[str] = set()
    keywords: list[str] = []
    for token in text.split():
        if len(token) < min_word_length:
            continue
        word = token.lower()
        if word in STOP_WORDS or is_numeric(word) or word in seen:
            continue
        seen.add(word)
        keywords.append(word)
    return keywords


def extract_keywords(
    text: str | None, min_word_length: int = DEFAULT_MIN_WORD_LENGTH
) -> frozenset[str]:
    """Set of significant tokens: long enough, not a stop word, not numeric."""
    return frozenset(ordered_keywords(text, min_word_length))


def category_slug(category: str) -> str:
    """Lower-cased category with whitespace runs replaced by '-'."""
    return _SPACE_RE.sub("-", category.strip().lower())
