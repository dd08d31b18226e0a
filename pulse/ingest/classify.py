"""Keyword rules assigning priority tags to incoming articles."""

from __future__ import annotations

import html
import re

from pulse.models import ContentPriority
from pulse.scoring.keywords import normalizeText

PRIORITY_RULES: tuple[tuple[ContentPriority, tuple[str, ...]], ...] = (
    (
        ContentPriority.BUSINESS,
        ("startup", "funding", "seed round", "series a", "venture", "revenue",
         "acquisition", "investment", "ipo"),
    ),
    (
        ContentPriority.INDUSTRY,
        ("industry", "enterprise", "business", "adoption", "regulation", "policy",
         "government", "compliance"),
    ),
    (
        ContentPriority.IMPLEMENTATION,
        ("tutorial", "how to", "guide", "deploy", "open source", "sdk", "api",
         "framework", "library", "implementation"),
    ),
)


def cleanText(text: str | None) -> str:
    """Strip HTML tags and unescape entities."""
    if not text:
        return ""
    stripped = re.sub(r"(?is)<(script|style).*?>.*?</\1>", "", text)
    stripped = re.sub(r"<[^>]*>", " ", stripped)
    return re.sub(r"\s+", " ", html.unescape(stripped)).strip()


def classifyPriorities(title: str | None, summary: str | None) -> frozenset[ContentPriority]:
    """Priority tags whose keywords appear in title or summary; {general} if none."""
    text = normalizeText(f"{title or ''} {summary or ''}")
    tags = {
        priority
        for priority, keywords in PRIORITY_RULES
        if any(re.search(rf"\b{re.escape(k)}\b", text) for k in keywords)
    }
    return frozenset(tags) if tags else frozenset({ContentPriority.GENERAL})
