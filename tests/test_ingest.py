"""Tests for feed parsing, text cleaning, and priority classification."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from pulse.config import FeedSource
from pulse.ingest import classifyPriorities, cleanText, fetchFeed, parseFeed
from pulse.models import ContentPriority

RSS_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
<title>Example AI News</title>
<item>
  <title>Startup raises $20 million for LLM tooling</title>
  <link>https://example.com/a</link>
  <description>&lt;p&gt;A &lt;b&gt;tutorial&lt;/b&gt; on deploying models&lt;/p&gt;</description>
  <pubDate>Sun, 31 Dec 2023 13:00:00 GMT</pubDate>
</item>
<item>
  <link>https://example.com/no-title</link>
</item>
<item>
  <title>Weather update</title>
  <link>https://example.com/b</link>
  <pubDate>not a date</pubDate>
</item>
</channel>
</rss>
"""

FETCHED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestCleanText:
    def test_stripsTagsAndEntities(self):
        assert cleanText("<p>Fast &amp; <b>cheap</b></p>") == "Fast & cheap"

    def test_dropsScripts(self):
        assert cleanText("before<script>alert(1)</script>after") == "beforeafter"

    def test_empty(self):
        assert cleanText(None) == ""


class TestClassifyPriorities:
    def test_multipleTags(self):
        tags = classifyPriorities("Startup raises funding", "A tutorial for the SDK")
        assert tags == frozenset({ContentPriority.BUSINESS, ContentPriority.IMPLEMENTATION})

    def test_industry(self):
        assert ContentPriority.INDUSTRY in classifyPriorities("EU regulation for enterprise AI", None)

    def test_wholeWordsOnly(self):
        # "api" must not match inside "rapid"
        assert classifyPriorities("Rapid progress", None) == frozenset({ContentPriority.GENERAL})

    def test_defaultsToGeneral(self):
        assert classifyPriorities("Weather update", "") == frozenset({ContentPriority.GENERAL})


class TestParseFeed:
    def test_entriesConverted(self):
        source = FeedSource(name="TechCrunch", url="https://tc/rss", language="en")
        articles = parseFeed(RSS_FEED, source, fetched_at=FETCHED_AT)
        assert [a.url for a in articles] == ["https://example.com/a", "https://example.com/b"]

        first = articles[0]
        assert first.title == "Startup raises $20 million for LLM tooling"
        assert first.summary == "A tutorial on deploying models"
        assert first.source == "TechCrunch"
        assert first.published_date == datetime(2023, 12, 31, 13, tzinfo=timezone.utc)
        assert first.categories == frozenset(
            {ContentPriority.BUSINESS, ContentPriority.IMPLEMENTATION}
        )

    def test_badDateFallsBackToFetchTime(self):
        source = FeedSource(name="X", url="https://x/rss", language="ja")
        second = parseFeed(RSS_FEED, source, fetched_at=FETCHED_AT)[1]
        assert second.published_date == FETCHED_AT
        assert second.summary is None
        assert second.language == "ja"

    def test_emptyDocument(self):
        assert parseFeed("", FeedSource(name="X", url="https://x")) == []


class TestFetchFeed:
    @pytest.mark.asyncio
    async def test_fetchParses(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["User-Agent"].startswith("Pulse")
            return httpx.Response(200, text=RSS_FEED)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            articles = await fetchFeed(client, FeedSource(name="X", url="https://x/rss"))
        assert len(articles) == 2

    @pytest.mark.asyncio
    async def test_httpErrorPropagates(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await fetchFeed(client, FeedSource(name="X", url="https://x/rss"))
