# src/llm/base_client.py — v1
"""Abstract text analysis provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from reqintake.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all text analysis providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Text completion."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic)."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier sent to the provider."""
