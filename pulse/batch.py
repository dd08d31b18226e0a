"""Batched rescoring with per-item failure isolation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone

from pulse.config import ScoringConfig
from pulse.models import RescoreResult, ScoredArticle, StoredArticle
from pulse.scoring import scoreArticle

logger = logging.getLogger("pulse")

Persist = Callable[[int, float], Awaitable[None]]

TOP_DETAILS = 10


async def rescoreAll(
    articles: Sequence[StoredArticle],
    persist: Persist,
    config: ScoringConfig | None = None,
    now: datetime | None = None,
) -> RescoreResult:
    """Recompute every article's score and persist it through `persist`.

    Articles go in groups of config.batch_size; each group runs concurrently,
    with config.batch_delay_seconds between groups. A failure to score or
    persist one article is logged and counted, never raised.
    """
    cfg = config or ScoringConfig()
    at = now or datetime.now(timezone.utc)
    batch_size = max(1, cfg.batch_size)
    result = RescoreResult(total=len(articles))
    scored: list[ScoredArticle] = []

    async def _one(article: StoredArticle) -> bool:
        try:
            breakdown = scoreArticle(article, now=at, config=cfg)
            await persist(article.id, breakdown.total)
        except Exception:
            logger.exception("Failed to rescore article %s", article.id)
            result.failed_ids.append(article.id)
            return False
        scored.append(
            ScoredArticle(
                article_id=article.id,
                title=article.title,
                source=article.source,
                breakdown=breakdown,
            )
        )
        return True

    batches = (len(articles) + batch_size - 1) // batch_size
    for n, i in enumerate(range(0, len(articles), batch_size), 1):
        batch = articles[i : i + batch_size]
        logger.info("Rescoring batch %d of %d (%d articles)", n, batches, len(batch))
        outcomes = await asyncio.gather(*(_one(a) for a in batch))
        result.updated += sum(outcomes)
        if i + batch_size < len(articles) and cfg.batch_delay_seconds > 0:
            await asyncio.sleep(cfg.batch_delay_seconds)

    result.failed = len(result.failed_ids)
    result.failed_ids.sort()
    scored.sort(key=lambda s: (-s.breakdown.total, s.article_id or 0))
    result.top = scored[:TOP_DETAILS]
    logger.info(
        "Rescore complete: %d articles, %d updated, %d failed",
        result.total,
        result.updated,
        result.failed,
    )
    return result
