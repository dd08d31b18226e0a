"""Sync HTTP client for the Pulse API."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_BASE_URL = "http://localhost:7710/api"


class PulseClient:
    """Thin wrapper over the /api routes; every call returns the decoded JSON body.

    Non-2xx responses raise httpx.HTTPStatusError.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 30.0):
        self._client = httpx.Client(base_url=base_url or DEFAULT_BASE_URL, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> PulseClient:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _call(
        self, method: str, path: str, *, body: dict | None = None, params: dict | None = None
    ) -> Any:
        resp = self._client.request(method, path, json=body, params=params)
        resp.raise_for_status()
        return resp.json()

    # ── health ────────────────────────────────────────────────

    def health(self) -> dict:
        return self._call("GET", "/health")

    # ── scoring ───────────────────────────────────────────────

    def score(
        self,
        title: str,
        published_date: str,
        summary: str | None = None,
        source: str | None = None,
        categories: list[str] | None = None,
        now: str | None = None,
    ) -> dict:
        body = {
            "title": title,
            "published_date": published_date,
            "summary": summary,
            "source": source,
            "categories": categories or [],
            "now": now,
        }
        return self._call("POST", "/score", body=body)

    def rescore(self, language: str | None = None) -> dict:
        return self._call("POST", "/rescore", body={"language": language})

    # ── articles ──────────────────────────────────────────────

    def addArticle(
        self,
        title: str,
        published_date: str,
        url: str | None = None,
        summary: str | None = None,
        source: str | None = None,
        categories: list[str] | None = None,
        language: str = "en",
    ) -> dict:
        body = {
            "title": title,
            "published_date": published_date,
            "url": url,
            "summary": summary,
            "source": source,
            "categories": categories or [],
            "language": language,
        }
        return self._call("POST", "/articles", body=body)

    def getArticle(self, article_id: int) -> dict:
        return self._call("GET", f"/articles/{article_id}")

    def top(
        self,
        language: str = "en",
        limit: int | None = None,
        since_hours: float | None = None,
    ) -> dict:
        params = {"language": language, "limit": limit, "since_hours": since_hours}
        params = {k: v for k, v in params.items() if v is not None}
        return self._call("GET", "/articles/top", params=params)

    def stats(self) -> dict:
        return self._call("GET", "/stats")

    def ingest(self) -> dict:
        return self._call("POST", "/ingest", body={})
