"""Pydantic request models for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from pulse.models import Article


class ArticleRequest(Article):
    pass


class ScoreRequest(Article):
    now: datetime | None = None  # evaluation instant, defaults to server time

    def toArticle(self) -> Article:
        return Article(**self.model_dump(exclude={"now"}))


class RescoreRequest(BaseModel):
    language: str | None = None
