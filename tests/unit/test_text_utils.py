"""Unit tests for src.utils.text and src.utils.concurrency."""

from __future__ import annotations

import asyncio

import pytest

from src.utils.concurrency import throttled_gather
from src.utils.text import humanize_key, truncate


class TestTruncate:
    def test_short_text_unchanged(self) -> None:
        assert truncate("hello", 10) == "hello"

    def test_exact_limit_unchanged(self) -> None:
        assert truncate("a" * 500, 500) == "a" * 500

    def test_long_text_cut_with_ellipsis(self) -> None:
        result = truncate("a" * 501, 500)
        assert result == "a" * 500 + "..."
        assert len(result) == 503


class TestHumanizeKey:
    @pytest.mark.parametrize(
        ("key", "label"),
        [
            ("brandName", "Brand Name"),
            ("doNotSay", "Do Not Say"),
            ("competitiveDifferentiator", "Competitive Differentiator"),
            ("tone", "Tone"),
            ("HTMLParser", "HTML Parser"),
            ("", ""),
        ],
    )
    def test_labels(self, key: str, label: str) -> None:
        assert humanize_key(key) == label


class TestThrottledGather:
    @pytest.mark.asyncio
    async def test_preserves_order(self) -> None:
        async def _value(n: int) -> int:
            await asyncio.sleep(0.001 * (5 - n))
            return n

        result = await throttled_gather([_value(n) for n in range(5)], asyncio.Semaphore(2))
        assert result == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_respects_concurrency_limit(self) -> None:
        active = 0
        peak = 0

        async def _work() -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.005)
            active -= 1

        await throttled_gather([_work() for _ in range(10)], asyncio.Semaphore(3))
        assert peak <= 3

    @pytest.mark.asyncio
    async def test_first_failure_fails_batch_and_cancels_rest(self) -> None:
        cancelled = []

        async def _boom() -> None:
            raise RuntimeError("boom")

        async def _slow(i: int) -> int:
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                cancelled.append(i)
                raise
            return i

        with pytest.raises(RuntimeError, match="boom"):
            await throttled_gather([_boom(), _slow(1), _slow(2)], asyncio.Semaphore(3))
        await asyncio.sleep(0.01)
        assert sorted(cancelled) == [1, 2]
