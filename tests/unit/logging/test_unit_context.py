# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from reqintake.logging.context import (
    clear_context,
    get_context,
    set_attempt,
    set_check_context,
)


class TestLogContext:
    def test_initial_state(self):
        ctx = get_context()
        assert ctx.check_id is None
        assert ctx.category is None
        assert ctx.attempt is None

    def test_set_check_context_resets_attempt(self):
        set_attempt(3)
        set_check_context("c1", "Education")
        ctx = get_context()
        assert ctx.check_id == "c1"
        assert ctx.category == "Education"
        assert ctx.attempt is None

    def test_as_dict_filters_none(self):
        set_check_context("c1", "Education")
        d = get_context().as_dict()
        assert d == {"check_id": "c1", "category": "Education"}

    def test_clear(self):
        set_check_context("c1", "Education")
        set_attempt(1)
        clear_context()
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self):
        async def run(check_id: str) -> str | None:
            set_check_context(check_id, "Housing")
            await asyncio.sleep(0)
            return get_context().check_id

        results = await asyncio.gather(run("a"), run("b"))
        assert results == ["a", "b"]
