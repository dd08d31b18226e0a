"""Pydantic models for articles, score breakdowns, and rescoring reports."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentPriority(str, Enum):
    BUSINESS = "business"
    INDUSTRY = "industry"
    IMPLEMENTATION = "implementation"
    GENERAL = "general"


def parsePriorities(value: Any) -> frozenset[ContentPriority]:
    """Accept a list/set of tags or a comma-separated string; drop unknown tags."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(
            f"categories must be a list or comma-separated string, got {type(value).__name__}"
        )
    tags: set[ContentPriority] = set()
    for raw in value:
        if isinstance(raw, ContentPriority):
            tags.add(raw)
            continue
        name = str(raw).strip().lower()
        try:
            tags.add(ContentPriority(name))
        except ValueError:
            continue
    return frozenset(tags)


def asUtc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Article(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    published_date: datetime
    summary: str | None = None
    source: str | None = None
    categories: frozenset[ContentPriority] = Field(default_factory=frozenset)
    language: str = "en"
    url: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _titleOrEmpty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("categories", mode="before")
    @classmethod
    def _categories(cls, v: Any) -> frozenset[ContentPriority]:
        return parsePriorities(v)

    @field_validator("published_date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return asUtc(v)


class StoredArticle(Article):
    id: int
    importance_score: float = 0.0
    created_at: int = 0


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    keyword_score: float = 0.0
    title_score: float = 0.0
    summary_score: float = 0.0
    source_weight: float = 0.0
    priority_weight: float = 0.0
    impact_bonus: float = 0.0
    headline_worthiness: float = 0.0
    time_decay: float = 0.0
    total: float = 0.0


class ScoredArticle(BaseModel):
    article_id: int | None = None
    title: str
    source: str | None = None
    breakdown: ScoreBreakdown


class RescoreResult(BaseModel):
    total: int = 0
    updated: int = 0
    failed: int = 0
    failed_ids: list[int] = Field(default_factory=list)
    top: list[ScoredArticle] = Field(default_factory=list)  # best 10 by total
