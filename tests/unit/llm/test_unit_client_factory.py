# tests/unit/llm/test_unit_client_factory.py — v1
"""Tests for llm/client_factory.py and the provider adapters."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from reqintake.config.settings import Settings
from reqintake.llm.adapters.anthropic_adapter import AnthropicAdapter
from reqintake.llm.adapters.openai_adapter import OpenAIAdapter
from reqintake.llm.client_factory import (
    UnsupportedProviderError,
    create_llm_client,
    register_provider,
)
from reqintake.llm.models import Message


class TestCreateLLMClient:
    def test_defaults_from_settings(self):
        settings = Settings(_env_file=None, openai_api_key="sk-test")
        client = create_llm_client(settings=settings)
        assert isinstance(client, OpenAIAdapter)
        assert client.model == "gpt-4"
        assert client.provider_name == "openai"

    def test_anthropic(self):
        settings = Settings(_env_file=None, llm_provider="anthropic", llm_model="claude-sonnet-4-20250514")
        client = create_llm_client(settings=settings)
        assert isinstance(client, AnthropicAdapter)
        assert client.model == "claude-sonnet-4-20250514"

    def test_explicit_provider_and_model(self):
        client = create_llm_client("anthropic", "claude-haiku")
        assert client.model == "claude-haiku"

    def test_unsupported(self):
        with pytest.raises(UnsupportedProviderError, match="Available"):
            create_llm_client("nope", "model")

    def test_register_provider(self):
        register_provider("openai-compatible", "reqintake.llm.adapters.openai_adapter.OpenAIAdapter")
        client = create_llm_client("openai-compatible", "local-model")
        assert isinstance(client, OpenAIAdapter)


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        adapter = OpenAIAdapter(model="gpt-4", api_key="sk-test")
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="analysis"))],
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=34),
            model="gpt-4-0613",
        )
        create = AsyncMock(return_value=response)
        adapter._OpenAIAdapter__client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(create=create))
        )

        result = await adapter.complete(
            [Message(role="user", content="hi")], system="be brief", max_tokens=50, temperature=0.1,
        )
        assert result.content == "analysis"
        assert result.input_tokens == 12
        assert result.output_tokens == 34
        assert result.provider == "openai"
        kwargs = create.await_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "be brief"}
        assert kwargs["max_tokens"] == 50


class TestAnthropicAdapter:
    @pytest.mark.asyncio
    async def test_complete(self):
        adapter = AnthropicAdapter(model="claude-sonnet-4-20250514", api_key="key")
        response = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="part one "), SimpleNamespace(type="text", text="two")],
            usage=SimpleNamespace(input_tokens=5, output_tokens=7),
            model="claude-sonnet-4-20250514",
        )
        create = AsyncMock(return_value=response)
        adapter._AnthropicAdapter__client = SimpleNamespace(messages=SimpleNamespace(create=create))

        result = await adapter.complete(
            [Message(role="user", content="hi")], system="sys", temperature=1.5,
        )
        assert result.content == "part one two"
        assert result.provider == "anthropic"
        kwargs = create.await_args.kwargs
        assert kwargs["system"] == "sys"
        assert kwargs["temperature"] == 1.0
