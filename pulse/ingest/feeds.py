"""RSS/Atom feed fetching and entry → Article conversion."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import feedparser
import httpx
from dateutil import parser as dtparser

from pulse.config import FeedSource
from pulse.ingest.classify import classifyPriorities, cleanText
from pulse.models import Article

logger = logging.getLogger("pulse")

USER_AGENT = "Pulse-Collector/1.0"
MAX_SUMMARY_CHARS = 2000


def _parseDate(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return dtparser.parse(value)
    except (ValueError, OverflowError):
        return None


def parseFeed(
    content: str | bytes,
    source: FeedSource,
    fetched_at: datetime | None = None,
) -> list[Article]:
    """Convert feed entries into articles. Entries without title or link are skipped."""
    parsed = feedparser.parse(content)
    fallback_date = fetched_at or datetime.now(timezone.utc)
    articles: list[Article] = []
    for e in parsed.entries:
        title = cleanText(e.get("title"))
        link = (e.get("link") or "").strip()
        if not title or not link:
            continue
        summary = cleanText(e.get("summary") or e.get("description"))[:MAX_SUMMARY_CHARS]
        published = _parseDate(e.get("published") or e.get("updated")) or fallback_date
        articles.append(
            Article(
                title=title,
                summary=summary or None,
                url=link,
                source=source.name,
                language=source.language,
                published_date=published,
                categories=classifyPriorities(title, summary),
            )
        )
    return articles


async def fetchFeed(client: httpx.AsyncClient, source: FeedSource) -> list[Article]:
    """GET a feed and parse it. HTTP errors propagate to the caller."""
    resp = await client.get(str(source.url), headers={"User-Agent": USER_AGENT})
    resp.raise_for_status()
    articles = parseFeed(resp.content, source)
    logger.info("Fetched %d entries from %s", len(articles), source.name)
    return articles
