# src/dedup/metrics.py — v1
"""Pairwise text similarity metrics and weighted combination.

Three independent scorers, each returning a value in [0, 1] where 1 means
identical:

- edit_similarity: normalized Levenshtein distance (rapidfuzz).
- jaccard_similarity: overlap of keyword sets (see dedup.text).
- cosine_similarity: cosine of TF-IDF vectors over the two-document corpus.

All three are symmetric, score 1 for identical non-empty strings and 0 when
either side is empty. Inputs are expected to be normalized already.
"""

from __future__ import annotations

import logging
import math
import threading
from collections import Counter
from collections.abc import Callable, Collection, Mapping, Sequence

import numpy as np
from rapidfuzz.distance import Levenshtein

from reqintake.config.settings import check_weights
from reqintake.core.errors import InvalidConfiguration
from reqintake.dedup.text import DEFAULT_MIN_WORD_LENGTH, extract_keywords

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: dict[str, float] = {"edit": 0.4, "jaccard": 0.3, "cosine": 0.3}

# keyword_overlap = jaccard * (POSITION_BASE + POSITION_BOOST * positional)
POSITION_BASE = 0.8
POSITION_BOOST = 0.2


# === EDIT DISTANCE ===


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost insert / delete / substitute edit distance."""
    return Levenshtein.distance(a, b)


def edit_similarity(a: str, b: str) -> float:
    """1 - distance / max(len(a), len(b)); 0 when either string is empty."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


# === SET OVERLAP ===


def jaccard_similarity(
    a: str, b: str, min_word_length: int = DEFAULT_MIN_WORD_LENGTH
) -> float:
    """|K(a) & K(b)| / |K(a) | K(b)| over keyword sets."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    keywords_a = extract_keywords(a, min_word_length)
    keywords_b = extract_keywords(b, min_word_length)
    if not keywords_a or not keywords_b:
        return 0.0
    return len(keywords_a & keywords_b) / len(keywords_a | keywords_b)


# === TF-IDF COSINE ===


def tfidf_vectors(tokens_a: Sequence[str], tokens_b: Sequence[str]) -> tuple[np.ndarray, np.ndarray]:
    """TF-IDF vectors of two token lists over the corpus {a, b}.

    IDF is smoothed, ``ln((1 + N) / (1 + df)) + 1`` with N = 2, so that terms
    shared by both documents keep a non-zero weight.
    """
    tf_a = Counter(tokens_a)
    tf_b = Counter(tokens_b)
    vocabulary = sorted(tf_a.keys() | tf_b.keys())

    vec_a = np.array([tf_a.get(t, 0) for t in vocabulary], dtype=np.float64)
    vec_b = np.array([tf_b.get(t, 0) for t in vocabulary], dtype=np.float64)

    n_docs = 2
    df = (vec_a > 0).astype(np.float64) + (vec_b > 0).astype(np.float64)
    idf = np.log((1.0 + n_docs) / (1.0 + df)) + 1.0
    return vec_a * idf, vec_b * idf


def cosine_similarity(a: str, b: str) -> float:
    """Cosine of the TF-IDF vectors of ``a`` and ``b``; 0 for a zero vector."""
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    vec_a, vec_b = tfidf_vectors(a.lower().split(), b.lower().split())
    norm_a = float(np.linalg.norm(vec_a))
    norm_b = float(np.linalg.norm(vec_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    score = float(np.dot(vec_a, vec_b)) / (norm_a * norm_b)
    return min(1.0, max(0.0, score))


# === KEYWORD OVERLAP ===


def positional_importance(ordered: Sequence[str], matched: Collection[str]) -> float:
    """Share of harmonic position weight carried by matched keywords.

    Keyword i (0-based) of ``ordered`` weighs 1 / (i + 1), so a match on an
    early keyword counts more than a match on a late one.
    """
    if not ordered:
        return 0.0
    weights = [1.0 / (i + 1) for i in range(len(ordered))]
    matched_weight = sum(w for w, word in zip(weights, ordered) if word in matched)
    return matched_weight / sum(weights)


def keyword_overlap(candidate: Sequence[str], other: Collection[str]) -> float:
    """Jaccard overlap of two keyword collections, boosted by position.

    Args:
        candidate: Keywords of the incoming text in first-occurrence order.
        other: Keywords of the stored submission.
    """
    if not candidate or not other:
        return 0.0
    candidate_set = set(candidate)
    other_set = set(other)
    shared = candidate_set & other_set
    if not shared:
        return 0.0
    jaccard = len(shared) / len(candidate_set | other_set)
    boost = POSITION_BASE + POSITION_BOOST * positional_importance(candidate, shared)
    return min(1.0, jaccard * boost)


# === COMBINATION ===


def combine_scores(scores: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """Weighted sum of ``scores``.

    Raises:
        InvalidConfiguration: If weights do not sum to 1 or name a signal
            missing from ``scores``.
    """
    check_weights("similarity", dict(weights))
    missing = [name for name in weights if name not in scores]
    if missing:
        raise InvalidConfiguration(f"No score for weighted signal(s): {', '.join(missing)}")
    total = math.fsum(scores[name] * weight for name, weight in weights.items())
    return min(1.0, max(0.0, total))


class SimilarityMemo:
    """Memo of metric results for the duration of one duplicate check.

    Metrics are symmetric, so (a, b) and (b, a) share one entry. Pairs of one
    batch fill it from worker threads, so lookups and stores take a lock; the
    metric itself is computed outside it. A memo is never shared across checks.
    """

    def __init__(self) -> None:
        self._values: dict[tuple[str, str, str], float] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self, metric: str, a: str, b: str, fn: Callable[[str, str], float]
    ) -> float:
        key = (metric, a, b) if a <= b else (metric, b, a)
        with self._lock:
            cached = self._values.get(key)
            if cached is not None:
                self.hits += 1
                return cached
            self.misses += 1
        value = fn(a, b)
        with self._lock:
            self._values[key] = value
        return value

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


def similarity_components(
    a: str,
    b: str,
    memo: SimilarityMemo | None = None,
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
) -> dict[str, float]:
    """Edit, Jaccard and cosine scores of one pair, memoized when a memo is given."""
    memo = memo if memo is not None else SimilarityMemo()
    return {
        "edit": memo.get_or_compute("edit", a, b, edit_similarity),
        "jaccard": memo.get_or_compute(
            f"jaccard:{min_word_length}", a, b,
            lambda x, y: jaccard_similarity(x, y, min_word_length),
        ),
        "cosine": memo.get_or_compute("cosine", a, b, cosine_similarity),
    }


def combined_similarity(
    a: str,
    b: str,
    weights: Mapping[str, float] | None = None,
    memo: SimilarityMemo | None = None,
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
) -> float:
    """Weighted combination of the three metrics (default 0.4 / 0.3 / 0.3)."""
    components = similarity_components(a, b, memo, min_word_length)
    return combine_scores(components, weights or DEFAULT_WEIGHTS)
