"""Tests for batched rescoring: failure isolation, batching, reporting."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from pulse.batch import rescoreAll
from pulse.config import ScoringConfig
from pulse.models import StoredArticle
from pulse.scoring import scoreArticle
from tests.conftest import NOW


def _stored(article_id: int, title: str = "LLM tutorial", hours_old: float = 1) -> StoredArticle:
    return StoredArticle(
        id=article_id,
        title=title,
        published_date=NOW - timedelta(hours=hours_old),
    )


class _Recorder:
    def __init__(self, fail_ids: set[int] | None = None):
        self.saved: dict[int, float] = {}
        self.fail_ids = fail_ids or set()

    async def __call__(self, article_id: int, score: float) -> None:
        if article_id in self.fail_ids:
            raise RuntimeError(f"storage unavailable for {article_id}")
        self.saved[article_id] = score


class TestRescoreAll:
    @pytest.mark.asyncio
    async def test_persistsEveryArticle(self):
        articles = [_stored(i, hours_old=i * 10) for i in range(1, 6)]
        persist = _Recorder()
        result = await rescoreAll(articles, persist, ScoringConfig(batch_delay_seconds=0), now=NOW)
        assert result.total == 5
        assert result.updated == 5
        assert result.failed == 0
        for a in articles:
            assert persist.saved[a.id] == scoreArticle(a, now=NOW).total

    @pytest.mark.asyncio
    async def test_oneFailureDoesNotAbortBatch(self):
        articles = [_stored(i) for i in range(1, 8)]
        persist = _Recorder(fail_ids={3})
        result = await rescoreAll(
            articles, persist, ScoringConfig(batch_size=2, batch_delay_seconds=0), now=NOW
        )
        assert result.failed == 1
        assert result.failed_ids == [3]
        assert result.updated == 6
        assert set(persist.saved) == {1, 2, 4, 5, 6, 7}

    @pytest.mark.asyncio
    async def test_delayBetweenBatchesOnly(self):
        articles = [_stored(i) for i in range(1, 6)]
        sleep = AsyncMock()
        with patch("pulse.batch.asyncio.sleep", sleep):
            await rescoreAll(
                articles,
                _Recorder(),
                ScoringConfig(batch_size=2, batch_delay_seconds=0.5),
                now=NOW,
            )
        # 3 batches → 2 pauses, none after the last
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_emptyCollection(self):
        result = await rescoreAll([], _Recorder(), now=NOW)
        assert result.total == 0
        assert result.updated == 0
        assert result.top == []

    @pytest.mark.asyncio
    async def test_topDetailsSortedAndLimited(self):
        articles = [_stored(i, hours_old=i * 24) for i in range(1, 13)]
        result = await rescoreAll(articles, _Recorder(), ScoringConfig(batch_delay_seconds=0), now=NOW)
        assert len(result.top) == 10
        totals = [s.breakdown.total for s in result.top]
        assert totals == sorted(totals, reverse=True)
        assert result.top[0].article_id == 1

    @pytest.mark.asyncio
    async def test_sameInstantIsIdempotent(self):
        articles = [_stored(i, hours_old=i) for i in range(1, 4)]
        first, second = _Recorder(), _Recorder()
        await rescoreAll(articles, first, ScoringConfig(batch_delay_seconds=0), now=NOW)
        await rescoreAll(articles, second, ScoringConfig(batch_delay_seconds=0), now=NOW)
        assert first.saved == second.saved
