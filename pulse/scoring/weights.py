"""Static keyword groups and source weight tables used by the scorer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from pulse.models import ContentPriority


@dataclass(frozen=True)
class KeywordGroup:
    name: str
    keywords: tuple[str, ...]
    max_score: float


@dataclass(frozen=True)
class SourceWeight:
    base_weight: float
    priorities: MappingProxyType[ContentPriority, float]


NEUTRAL_BASE_WEIGHT = 0.5
NEUTRAL_PRIORITY_WEIGHT = 0.5

KEYWORD_GROUPS: tuple[KeywordGroup, ...] = (
    KeywordGroup(
        name="ai",
        keywords=(
            "ai",
            "artificial intelligence",
            "machine learning",
            "deep learning",
            "neural",
            "gpt",
            "llm",
        ),
        max_score=0.4,
    ),
    KeywordGroup(
        name="business",
        keywords=(
            "business",
            "enterprise",
            "startup",
            "company",
            "industry",
            "market",
            "corporate",
        ),
        max_score=0.3,
    ),
    KeywordGroup(
        name="implementation",
        keywords=(
            "implementation",
            "tutorial",
            "guide",
            "how to",
            "deploy",
            "integrate",
            "example",
        ),
        max_score=0.3,
    ),
)


def _source(base: float, business: float, industry: float, impl: float, general: float):
    return SourceWeight(
        base_weight=base,
        priorities=MappingProxyType(
            {
                ContentPriority.BUSINESS: business,
                ContentPriority.INDUSTRY: industry,
                ContentPriority.IMPLEMENTATION: impl,
                ContentPriority.GENERAL: general,
            }
        ),
    )


SOURCE_WEIGHTS: MappingProxyType[str, SourceWeight] = MappingProxyType(
    {
        "Hacker News": _source(0.9, 1.0, 0.9, 0.8, 0.7),
        "TechCrunch": _source(0.8, 1.0, 0.9, 0.7, 0.6),
        "Techmeme": _source(0.85, 1.0, 0.9, 0.7, 0.6),
        "GitHub": _source(0.75, 0.9, 1.0, 0.9, 0.7),
        "The Verge": _source(0.7, 0.8, 0.9, 0.7, 0.6),
        "Product Hunt": _source(0.75, 0.9, 1.0, 0.8, 0.7),
        "Dev.to": _source(0.7, 0.8, 0.8, 1.0, 0.7),
    }
)

# Impact and dynamics indicators: 2.5% each, capped at 20%
IMPACT_KEYWORDS: tuple[str, ...] = (
    "impact",
    "transform",
    "disrupt",
    "revolutionize",
    "improve",
    "enhance",
    "accelerate",
    "boost",
    "growth",
    "expansion",
    "adoption",
    "deployment",
    "integration",
    "market share",
    "market leader",
    "industry leader",
    "competitive advantage",
    "business impact",
    "economic impact",
    "commercial application",
)
IMPACT_STEP = 0.025
IMPACT_CAP = 0.20

# Breaking-news indicators: 7.5% each, capped at 35%
BREAKING_KEYWORDS: tuple[str, ...] = (
    "breaking",
    "just in",
    "exclusive",
    "announcement",
    "launches",
    "releases",
    "unveils",
    "introduces",
    "reveals",
    "debuts",
    "just announced",
    "first look",
    "global launch",
    "officially launches",
    "officially announces",
)
BREAKING_STEP = 0.075
BREAKING_CAP = 0.35

HEADLINE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # Major company announcements
        r"\b(google|microsoft|apple|amazon|meta|openai|anthropic|nvidia|tesla|ibm)\b.{0,30}"
        r"\b(announce|launch|unveil|reveal|introduce|release)",
        # Partnerships
        r"\b(partner|partnership|collaboration|alliance)\b.{0,30}\b(with|between)\b",
        # Acquisitions
        r"\b(acquire|acquisition|buy|purchase|takeover)\b.{0,30}\b(for|worth|valued at)\b"
        r".{0,15}(\$|\busd\b|\bmillion\b|\bbillion\b)",
        # Funding rounds
        r"\b(raise|raises|secure|secures|close|closes)\b.{0,30}"
        r"\b(funding|investment|capital|round)\b.{0,15}(\$|\busd\b|\bmillion\b|\bbillion\b)",
        # Product launches
        r"\b(launch|unveil|introduce|debut)\w*\b.{0,30}"
        r"\b(new|next-gen|revolutionary|groundbreaking)\b",
        # Industry shifts
        r"\b(transform|revolutionize|disrupt|change)\w*\b.{0,30}"
        r"\b(industry|market|sector|landscape)\b",
        # Exclusive or breaking
        r"\b(exclusive|breaking|first look|just in)\b",
    )
)
HEADLINE_STEP = 0.25
HEADLINE_CAP = 0.50
