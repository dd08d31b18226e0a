"""FastAPI HTTP API — routes calling the shared service layer."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from pulse.server.api_models import ArticleRequest, RescoreRequest, ScoreRequest
from pulse.service import (
    svcAddArticle,
    svcGetArticle,
    svcIngestFeeds,
    svcRescoreAll,
    svcScoreArticle,
    svcStats,
    svcTopArticles,
)
from pulse.state import getState

router = APIRouter()


# ── Health ───────────────────────────────────────────────────


@router.get("/health")
async def health():
    return {"status": "ok"}


# ── Scoring ──────────────────────────────────────────────────


@router.post("/score")
async def api_score(req: ScoreRequest):
    return svcScoreArticle(getState(), req.toArticle(), now=req.now)


@router.post("/rescore")
async def api_rescore(req: RescoreRequest | None = None):
    language = req.language if req else None
    return await svcRescoreAll(getState(), language=language)


# ── Articles ─────────────────────────────────────────────────


@router.post("/articles")
async def api_add_article(req: ArticleRequest):
    return svcAddArticle(getState(), req)


@router.get("/articles/top")
async def api_top_articles(
    language: str = Query("en"),
    limit: int | None = Query(None, ge=0, le=500),
    since_hours: float | None = Query(None, gt=0),
):
    return svcTopArticles(getState(), language, limit, since_hours)


@router.get("/articles/{article_id}")
async def api_get_article(article_id: int):
    article = svcGetArticle(getState(), article_id)
    if article is None:
        raise HTTPException(status_code=404, detail=f"Article {article_id} not found")
    return article


@router.get("/stats")
async def api_stats():
    return svcStats(getState())


# ── Ingestion ────────────────────────────────────────────────


@router.post("/ingest")
async def api_ingest():
    return await svcIngestFeeds(getState())
