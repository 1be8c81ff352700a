# src/dedup/semantic.py — v1
"""Pluggable semantic-similarity hook for the five-signal combined score.

The detector only depends on SemanticScorer. The default NullSemanticScorer
is disabled: it scores 0 and the semantic weight contributes nothing, so the
combined score of an identical pair tops out at 1 - weight("semantic"). EmbeddingSemanticScorer plugs in any
reqintake.embeddings BaseEmbedder.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

from reqintake.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)


class SemanticScorer(ABC):
    """Strategy interface: async similarity of two normalized texts in [0, 1]."""

    @abstractmethod
    async def score(self, text_a: str, text_b: str) -> float:
        """Semantic similarity of two texts."""

    @property
    def enabled(self) -> bool:
        """Whether the scorer is consulted at all (False = the signal is 0)."""
        return True

    @property
    def name(self) -> str:
        return type(self).__name__


class NullSemanticScorer(SemanticScorer):
    """Placeholder scorer: always 0, reported as disabled."""

    async def score(self, text_a: str, text_b: str) -> float:
        return 0.0

    @property
    def enabled(self) -> bool:
        return False


class EmbeddingSemanticScorer(SemanticScorer):
    """Cosine similarity of embedding vectors, negatives clipped to 0.

    Embeddings are cached per text for the scorer's lifetime, so the
    incoming text is embedded once per check rather than once per pair.
    """

    def __init__(self, embedder: BaseEmbedder, max_cached: int = 4096) -> None:
        self._embedder = embedder
        self._max_cached = max_cached
        self._vectors: dict[str, np.ndarray] = {}

    async def score(self, text_a: str, text_b: str) -> float:
        if not text_a or not text_b:
            return 0.0
        vec_a, vec_b = await self._embed_pair(text_a, text_b)
        norm = float(np.linalg.norm(vec_a) * np.linalg.norm(vec_b))
        if norm == 0.0:
            return 0.0
        return min(1.0, max(0.0, float(np.dot(vec_a, vec_b)) / norm))

    @property
    def name(self) -> str:
        return f"embedding:{self._embedder.model_name}"

    async def _embed_pair(self, text_a: str, text_b: str) -> tuple[np.ndarray, np.ndarray]:
        missing = [t for t in dict.fromkeys((text_a, text_b)) if t not in self._vectors]
        if missing:
            vectors = await self._embedder.embed_texts(missing)
            if len(self._vectors) + len(missing) > self._max_cached:
                self._vectors.clear()
            for text, vector in zip(missing, vectors):
                self._vectors[text] = np.asarray(vector, dtype=np.float64)
        return self._vectors[text_a], self._vectors[text_b]
