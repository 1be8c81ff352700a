# src/embeddings/base_embedder.py — v1
"""Abstract embeddings interface consumed by EmbeddingSemanticScorer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseEmbedder(ABC):
    """Unified interface for all embedding providers."""

    @abstractmethod
    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts into vectors."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier."""
