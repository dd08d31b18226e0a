"""SQLite article store: schema setup and operations."""

from __future__ import annotations

import sqlite3
import time
from datetime import datetime, timezone
from pathlib import Path

from pulse.config import PulseConfig
from pulse.models import Article, StoredArticle, asUtc

SCHEMA_VERSION = 1


def connect(config: PulseConfig, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open DB and create tables."""
    db_path = Path(config.db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    db = sqlite3.connect(str(db_path), check_same_thread=check_same_thread)
    db.row_factory = sqlite3.Row
    db.execute("PRAGMA journal_mode=WAL")
    db.execute("PRAGMA busy_timeout=5000")
    _migrate(db)
    return db


def _migrate(db: sqlite3.Connection) -> None:
    db.executescript("""
        CREATE TABLE IF NOT EXISTS news_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            summary TEXT,
            url TEXT UNIQUE,
            source TEXT,
            categories TEXT NOT NULL DEFAULT '',
            language TEXT NOT NULL DEFAULT 'en',
            published_date INTEGER NOT NULL,
            importance_score REAL NOT NULL DEFAULT 0,
            created_at INTEGER NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_news_language_score
            ON news_items(language, importance_score DESC, published_date DESC);
        CREATE INDEX IF NOT EXISTS idx_news_published ON news_items(published_date);
    """)
    db.execute("CREATE TABLE IF NOT EXISTS meta (key TEXT PRIMARY KEY, value TEXT)")
    db.execute(
        "INSERT OR REPLACE INTO meta (key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    db.commit()


def _toMs(value: datetime) -> int:
    return round(asUtc(value).timestamp() * 1000)


def _fromMs(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def rowToArticle(row: sqlite3.Row) -> StoredArticle:
    return StoredArticle(
        id=row["id"],
        title=row["title"],
        summary=row["summary"],
        url=row["url"],
        source=row["source"],
        categories=row["categories"],
        language=row["language"],
        published_date=_fromMs(row["published_date"]),
        importance_score=row["importance_score"],
        created_at=row["created_at"],
    )


# -- Article CRUD --


def insertArticle(
    db: sqlite3.Connection, article: Article, importance_score: float = 0.0
) -> int | None:
    """Insert an article. Returns its ID, or None if the url is already stored."""
    now = int(time.time() * 1000)
    categories = ",".join(sorted(c.value for c in article.categories))
    cursor = db.execute(
        """INSERT OR IGNORE INTO news_items
           (title, summary, url, source, categories, language, published_date,
            importance_score, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            article.title,
            article.summary,
            article.url,
            article.source,
            categories,
            article.language,
            _toMs(article.published_date),
            importance_score,
            now,
        ),
    )
    db.commit()
    if cursor.rowcount == 0:
        return None
    return cursor.lastrowid


def getArticle(db: sqlite3.Connection, article_id: int) -> StoredArticle | None:
    """Fetch a single article by ID."""
    row = db.execute("SELECT * FROM news_items WHERE id = ?", (article_id,)).fetchone()
    return rowToArticle(row) if row else None


def listArticles(
    db: sqlite3.Connection,
    language: str | None = None,
    since: datetime | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[StoredArticle]:
    """List articles (newest first) with optional language/time-window filters."""
    conditions: list[str] = []
    params: list[str | int] = []
    if language:
        conditions.append("language = ?")
        params.append(language)
    if since is not None:
        conditions.append("published_date >= ?")
        params.append(_toMs(since))
    where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    sql = f"SELECT * FROM news_items {where} ORDER BY published_date DESC, id ASC"
    if limit is not None:
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit, offset])
    return [rowToArticle(r) for r in db.execute(sql, params).fetchall()]


def updateImportanceScore(db: sqlite3.Connection, article_id: int, score: float) -> None:
    """Persist a recomputed score. Raises LookupError if the article is gone."""
    cursor = db.execute(
        "UPDATE news_items SET importance_score = ? WHERE id = ?", (score, article_id)
    )
    db.commit()
    if cursor.rowcount == 0:
        raise LookupError(f"Article {article_id} not found")


def topArticles(
    db: sqlite3.Connection,
    language: str,
    n: int,
    since: datetime | None = None,
) -> list[StoredArticle]:
    """Top-n articles in a language partition.

    Ordered by importance_score desc, then published_date desc, then id.
    """
    if n <= 0:
        return []
    conditions = ["language = ?"]
    params: list[str | int] = [language]
    if since is not None:
        conditions.append("published_date >= ?")
        params.append(_toMs(since))
    params.append(n)
    rows = db.execute(
        f"""SELECT * FROM news_items WHERE {" AND ".join(conditions)}
            ORDER BY importance_score DESC, published_date DESC, id ASC
            LIMIT ?""",
        params,
    ).fetchall()
    return [rowToArticle(r) for r in rows]


def articleStats(db: sqlite3.Connection) -> dict:
    """Return DB statistics."""
    total = db.execute("SELECT COUNT(*) FROM news_items").fetchone()[0]
    by_language = {
        row["language"]: row["c"]
        for row in db.execute(
            "SELECT language, COUNT(*) AS c FROM news_items GROUP BY language ORDER BY language"
        )
    }
    avg = db.execute("SELECT AVG(importance_score) FROM news_items").fetchone()[0]
    return {
        "total_articles": total,
        "by_language": by_language,
        "average_score": round(avg or 0.0, 2),
    }
