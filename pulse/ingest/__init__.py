"""Feed ingestion: fetch, clean, classify."""

from pulse.ingest.classify import classifyPriorities, cleanText
from pulse.ingest.feeds import fetchFeed, parseFeed

__all__ = ["classifyPriorities", "cleanText", "fetchFeed", "parseFeed"]
