"""Keyword-group relevance and headline/impact bonuses."""

from __future__ import annotations

import re
import unicodedata

from pulse.scoring.weights import (
    BREAKING_CAP,
    BREAKING_KEYWORDS,
    BREAKING_STEP,
    HEADLINE_CAP,
    HEADLINE_PATTERNS,
    HEADLINE_STEP,
    IMPACT_CAP,
    IMPACT_KEYWORDS,
    IMPACT_STEP,
    KEYWORD_GROUPS,
    KeywordGroup,
)


def normalizeText(text: str | None) -> str:
    """NFKC-fold (full-width → ASCII), lowercase, collapse whitespace."""
    folded = unicodedata.normalize("NFKC", text or "")
    return re.sub(r"\s+", " ", folded.lower()).strip()


def groupScore(text: str, group: KeywordGroup) -> float:
    """max_score * fraction of the group's keywords present in text."""
    if not text or not group.keywords:
        return 0.0
    hits = sum(1 for k in group.keywords if k in text)
    return group.max_score * hits / len(group.keywords)


def keywordScore(text: str | None, groups: tuple[KeywordGroup, ...] = KEYWORD_GROUPS) -> float:
    """Sum of per-group scores over normalized text, capped at 1."""
    normalized = normalizeText(text)
    return min(sum(groupScore(normalized, g) for g in groups), 1.0)


def impactBonus(text: str | None) -> float:
    normalized = normalizeText(text)
    if not normalized:
        return 0.0
    impact = sum(1 for k in IMPACT_KEYWORDS if k in normalized)
    breaking = sum(1 for k in BREAKING_KEYWORDS if k in normalized)
    return min(impact * IMPACT_STEP, IMPACT_CAP) + min(breaking * BREAKING_STEP, BREAKING_CAP)


def headlineWorthiness(title: str | None, summary: str | None) -> float:
    """25% per matching headline pattern over title+summary, capped at 50%."""
    text = normalizeText(f"{title or ''} {summary or ''}")
    if not text:
        return 0.0
    matched = sum(1 for p in HEADLINE_PATTERNS if p.search(text))
    return min(matched * HEADLINE_STEP, HEADLINE_CAP)
