# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from defview.logging.context import (
    clear_context,
    get_context,
    set_cycle_context,
    set_stage_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.document is None
        assert ctx.cycle is None
        assert ctx.stage is None

    def test_set_cycle_context(self):
        set_cycle_context(4, "main.py")
        ctx = get_context()
        assert ctx.cycle == 4
        assert ctx.document == "main.py"

    def test_as_dict_filters_none(self):
        set_cycle_context(1, None)
        d = get_context().as_dict()
        assert d == {"cycle": 1}

    def test_clear(self):
        set_cycle_context(2, "a.py")
        set_stage_context("render")
        clear_context()
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_tasks_do_not_share_context(self):
        async def cycle(n: int) -> int | None:
            set_cycle_context(n, f"doc{n}.py")
            await asyncio.sleep(0)
            return get_context().cycle

        results = await asyncio.gather(
            asyncio.create_task(cycle(1)), asyncio.create_task(cycle(2)),
        )
        assert results == [1, 2]
        assert get_context().cycle is None
