"""Service layer — all business logic shared by the REST API and CLI."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone

import httpx

from pulse.batch import rescoreAll
from pulse.config import FeedSource
from pulse.db import (
    articleStats,
    getArticle,
    insertArticle,
    listArticles,
    topArticles,
    updateImportanceScore,
)
from pulse.ingest.feeds import fetchFeed
from pulse.models import Article, StoredArticle
from pulse.scoring import scoreArticle
from pulse.state import AppState

logger = logging.getLogger("pulse")


def _articleDict(a: StoredArticle) -> dict:
    return {
        "id": a.id,
        "title": a.title,
        "summary": a.summary,
        "url": a.url,
        "source": a.source,
        "language": a.language,
        "categories": sorted(c.value for c in a.categories),
        "published_date": a.published_date.isoformat(),
        "importance_score": a.importance_score,
    }


# ── Scoring ──────────────────────────────────────────────────


def svcScoreArticle(state: AppState, article: Article, now: datetime | None = None) -> dict:
    """Score an article without storing it."""
    breakdown = scoreArticle(article, now=now, config=state.config.scoring)
    return {"title": article.title, "source": article.source, **breakdown.model_dump()}


async def svcRescoreAll(
    state: AppState,
    language: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Recompute and persist importance_score for every stored article."""
    articles = listArticles(state.db, language=language)
    logger.info("Found %d articles. Updating scores...", len(articles))

    async def persist(article_id: int, score: float) -> None:
        updateImportanceScore(state.db, article_id, score)

    result = await rescoreAll(articles, persist, config=state.config.scoring, now=now)
    return result.model_dump()


# ── Articles ─────────────────────────────────────────────────


def svcAddArticle(state: AppState, article: Article) -> dict:
    """Score and store an article. Duplicate urls are not re-inserted."""
    breakdown = scoreArticle(article, config=state.config.scoring)
    article_id = insertArticle(state.db, article, importance_score=breakdown.total)
    return {
        "stored": article_id is not None,
        "article_id": article_id,
        "importance_score": breakdown.total,
    }


def svcGetArticle(state: AppState, article_id: int) -> dict | None:
    article = getArticle(state.db, article_id)
    return _articleDict(article) if article else None


def svcTopArticles(
    state: AppState,
    language: str = "en",
    limit: int | None = None,
    since_hours: float | None = None,
) -> dict:
    """Highest-scoring articles in a language partition."""
    n = state.config.scoring.default_top_limit if limit is None else limit
    since = None
    if since_hours is not None:
        since = datetime.now(timezone.utc) - timedelta(hours=since_hours)
    rows = topArticles(state.db, language, n, since=since)
    return {
        "language": language,
        "articles": [_articleDict(a) for a in rows],
        "count": len(rows),
    }


def svcStats(state: AppState) -> dict:
    """Get database statistics."""
    stats = articleStats(state.db)
    db_path = os.path.expanduser(state.config.db_path)
    db_size = os.path.getsize(db_path) if os.path.exists(db_path) else 0
    return {
        **stats,
        "db_size_bytes": db_size,
        "db_size_mb": round(db_size / (1024 * 1024), 2),
    }


# ── Ingestion ────────────────────────────────────────────────


async def svcIngestFeeds(
    state: AppState,
    feeds: list[FeedSource] | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict:
    """Fetch configured feeds, score and store new articles.

    A failing feed is logged and reported; the remaining feeds still run.
    """
    sources = state.config.feeds if feeds is None else feeds
    own_client = client is None
    http = client or httpx.AsyncClient(
        timeout=state.config.feed_timeout_seconds, follow_redirects=True
    )
    fetched = inserted = 0
    errors: list[dict] = []
    try:
        for source in sources:
            try:
                articles = await fetchFeed(http, source)
                new = sum(1 for a in articles if svcAddArticle(state, a)["stored"])
            except Exception as e:
                logger.warning("Feed %s failed: %s", source.name, e)
                errors.append({"source": source.name, "error": str(e)})
                continue
            fetched += len(articles)
            inserted += new
    finally:
        if own_client:
            await http.aclose()

    logger.info("Ingest complete: %d fetched, %d new", fetched, inserted)
    return {
        "feeds": len(sources),
        "fetched": fetched,
        "inserted": inserted,
        "errors": errors,
    }
