"""Config loading from ~/.pulse/config.json with env var overrides."""

from __future__ import annotations

import json
from pathlib import Path
from typing import ClassVar

from pydantic import AnyHttpUrl, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_DIR = Path.home() / ".pulse"
CONFIG_PATH = CONFIG_DIR / "config.json"


class ScoringConfig(BaseModel):
    cap: float = 100.0
    baseline_relevance: float = 0.1
    batch_size: int = 50
    batch_delay_seconds: float = 0.5
    default_top_limit: int = 10


class FeedSource(BaseModel):
    name: str
    url: AnyHttpUrl
    language: str = "en"


def _defaultFeeds() -> list[FeedSource]:
    return [
        FeedSource(
            name="TechCrunch",
            url="https://techcrunch.com/category/artificial-intelligence/feed/",
        ),
        FeedSource(name="Hacker News", url="https://hnrss.org/frontpage"),
        FeedSource(name="The Verge", url="https://www.theverge.com/rss/index.xml"),
    ]


class PulseConfig(BaseSettings):
    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="PULSE_",
        env_nested_delimiter="__",
        extra="ignore",
    )
    db_path: str = Field(default_factory=lambda: str(CONFIG_DIR / "pulse.db"))
    # HTTP server
    host: str = "127.0.0.1"
    port: int = 7710
    feed_timeout_seconds: float = 15.0
    # Sub-configs
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    feeds: list[FeedSource] = Field(default_factory=_defaultFeeds)


def loadConfig() -> PulseConfig:
    """Load config from ~/.pulse/config.json with env var overrides."""
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        return PulseConfig(**raw)
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    config = PulseConfig()
    CONFIG_PATH.write_text(config.model_dump_json(indent=2))
    return config
