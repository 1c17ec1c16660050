# tests/unit/core/test_unit_loading.py — v1
"""Tests for core/loading.py — LoadingToken."""

from __future__ import annotations

import asyncio

import pytest

from defview.core.cache_key import CACHE_KEY_NONE
from defview.core.loading import LoadingToken


class TestLoadingToken:
    def test_initial_state(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        assert not token.cancelled
        assert not token.settled
        assert not token.done

    def test_cancel_runs_callbacks_once(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        calls = []
        token.on_cancel(lambda: calls.append("a"))
        token.on_cancel(lambda: calls.append("b"))
        token.cancel()
        token.cancel()
        assert calls == ["a", "b"]
        assert token.cancelled and token.done

    def test_callback_after_cancel_runs_immediately(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        token.cancel()
        calls = []
        token.on_cancel(lambda: calls.append(1))
        assert calls == [1]

    def test_removed_callback_not_called(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        calls = []
        remove = token.on_cancel(lambda: calls.append(1))
        remove()
        token.cancel()
        assert calls == []

    def test_settle_drops_callbacks(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        calls = []
        token.on_cancel(lambda: calls.append(1))
        token.settle()
        token.cancel()
        assert calls == []

    def test_failing_callback_does_not_block_others(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        calls = []

        def boom():
            raise RuntimeError("boom")

        token.on_cancel(boom)
        token.on_cancel(lambda: calls.append(1))
        token.cancel()
        assert calls == [1]

    @pytest.mark.asyncio
    async def test_wait_done_released_by_cancel(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        waiter = asyncio.create_task(token.wait_done())
        await asyncio.sleep(0)
        assert not waiter.done()
        token.cancel()
        await asyncio.wait_for(waiter, timeout=1)

    @pytest.mark.asyncio
    async def test_wait_done_released_by_settle(self):
        token = LoadingToken(1, CACHE_KEY_NONE)
        token.settle()
        await asyncio.wait_for(token.wait_done(), timeout=1)
