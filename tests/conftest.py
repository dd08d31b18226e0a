"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from pulse.config import PulseConfig, ScoringConfig
from pulse.db import connect
from pulse.models import Article

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def tmp_db_path(tmp_path: Path) -> str:
    return str(tmp_path / "test_pulse.db")


@pytest.fixture
def config(tmp_db_path: str) -> PulseConfig:
    return PulseConfig(
        db_path=tmp_db_path,
        scoring=ScoringConfig(batch_delay_seconds=0),  # no pauses in tests
        feeds=[],
    )


@pytest.fixture
def db(config: PulseConfig) -> sqlite3.Connection:
    conn = connect(config)
    yield conn
    conn.close()


def makeArticle(
    title: str = "Weather update for Tuesday",
    hours_old: float = 1,
    **kwargs,
) -> Article:
    """Article published `hours_old` hours before NOW."""
    kwargs.setdefault("published_date", NOW - timedelta(hours=hours_old))
    return Article(title=title, **kwargs)
