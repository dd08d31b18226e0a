"""Importance scorer: keyword relevance × source weighting × bonuses × time decay."""

from __future__ import annotations

import math
from datetime import datetime

from pulse.config import ScoringConfig
from pulse.models import Article, ContentPriority, ScoreBreakdown
from pulse.scoring.decay import timeDecay
from pulse.scoring.keywords import headlineWorthiness, impactBonus, keywordScore
from pulse.scoring.weights import (
    NEUTRAL_BASE_WEIGHT,
    NEUTRAL_PRIORITY_WEIGHT,
    SOURCE_WEIGHTS,
)

_DEFAULT_SCORING = ScoringConfig()


def _finite(value: float, default: float = 0.0) -> float:
    """Replace NaN/inf/negative with default."""
    if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
        return default
    return max(0.0, float(value))


def sourceWeights(
    source: str | None, categories: frozenset[ContentPriority]
) -> tuple[float, float]:
    """(base_weight, priority_weight) for a source and its priority tags.

    Unknown source or untagged article → neutral weights. With several tags,
    the strongest multiplier the source defines wins.
    """
    weight = SOURCE_WEIGHTS.get((source or "").strip())
    if weight is None:
        return NEUTRAL_BASE_WEIGHT, NEUTRAL_PRIORITY_WEIGHT
    multipliers = [weight.priorities[c] for c in categories if c in weight.priorities]
    priority = max(multipliers) if multipliers else NEUTRAL_PRIORITY_WEIGHT
    return weight.base_weight, priority


def scoreArticle(
    article: Article,
    now: datetime | None = None,
    config: ScoringConfig | None = None,
) -> ScoreBreakdown:
    """Score one article at the given instant (defaults to now).

    total = cap * min(baseline + keyword_score, 1) * source_weight
            * priority_weight * (1 + impact + headline) * time_decay,
    clamped into [0, cap].
    """
    cfg = config or _DEFAULT_SCORING
    cap = _finite(cfg.cap)

    title = article.title or ""
    summary = article.summary or ""
    combined = f"{title} {summary}"

    kw = keywordScore(combined)
    title_kw = keywordScore(title)
    summary_kw = keywordScore(summary)

    base_weight, priority_weight = sourceWeights(article.source, article.categories)
    base_weight = _finite(base_weight, NEUTRAL_BASE_WEIGHT)
    priority_weight = _finite(priority_weight, NEUTRAL_PRIORITY_WEIGHT)

    impact = max(impactBonus(title), impactBonus(summary))
    headline = headlineWorthiness(title, summary)
    decay = timeDecay(article.published_date, now)

    relevance = min(_finite(cfg.baseline_relevance) + kw, 1.0)
    raw = cap * relevance * base_weight * priority_weight * (1 + impact + headline) * decay
    total = min(_finite(raw), cap)

    return ScoreBreakdown(
        keyword_score=kw,
        title_score=title_kw,
        summary_score=summary_kw,
        source_weight=base_weight,
        priority_weight=priority_weight,
        impact_bonus=impact,
        headline_worthiness=headline,
        time_decay=decay,
        total=total,
    )
