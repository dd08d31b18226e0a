"""CLI command tests — non-interactive paths via typer.testing.CliRunner."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pulse.config import PulseConfig
from pulse.db import connect, getArticle, insertArticle
from pulse.server.cli import _cli
from tests.conftest import makeArticle

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: Path):
    """Redirect CONFIG_DIR / CONFIG_PATH to tmp_path for every test."""
    cfg_dir = tmp_path / ".pulse"
    cfg_dir.mkdir()
    cfg_path = cfg_dir / "config.json"
    with (
        patch("pulse.config.CONFIG_DIR", cfg_dir),
        patch("pulse.config.CONFIG_PATH", cfg_path),
    ):
        yield cfg_dir


def _seedDb(cfg_dir: Path) -> list[int]:
    conn = connect(PulseConfig(db_path=str(cfg_dir / "pulse.db")))
    try:
        return [
            insertArticle(conn, makeArticle(title="LLM tutorial", url="https://a"), 1.0),
            insertArticle(conn, makeArticle(url="https://b"), 30.0),
            insertArticle(conn, makeArticle(url="https://c", language="ja"), 50.0),
        ]
    finally:
        conn.close()


# ── score ────────────────────────────────────────────────────


def test_score_json():
    result = runner.invoke(
        _cli,
        [
            "score", "Weather update for Tuesday",
            "--published", "2023-12-31T13:00:00Z",
            "--now", "2024-01-01T00:00:00Z",
            "--format", "json",
        ],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["time_decay"] == 1.2
    assert data["total"] == pytest.approx(3.0)


def test_score_badDate():
    result = runner.invoke(_cli, ["score", "x", "--published", "yesterday-ish"])
    assert result.exit_code != 0


def test_score_badFormat():
    result = runner.invoke(_cli, ["score", "x", "--format", "xml"])
    assert result.exit_code != 0


# ── top / rescore / stats ────────────────────────────────────


def test_top_json(_isolate_config: Path):
    _seedDb(_isolate_config)
    result = runner.invoke(_cli, ["top", "--language", "en", "--limit", "5", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["count"] == 2
    assert [a["importance_score"] for a in data["articles"]] == [30.0, 1.0]


def test_top_human(_isolate_config: Path):
    _seedDb(_isolate_config)
    result = runner.invoke(_cli, ["top"])
    assert result.exit_code == 0
    assert "LLM tutorial" in result.output


def test_rescore_json(_isolate_config: Path):
    ids = _seedDb(_isolate_config)
    result = runner.invoke(_cli, ["rescore", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["total"] == 3
    assert data["updated"] == 3
    assert data["failed"] == 0

    conn = connect(PulseConfig(db_path=str(_isolate_config / "pulse.db")))
    try:
        # seeded placeholder scores were replaced
        assert getArticle(conn, ids[1]).importance_score != 30.0
    finally:
        conn.close()


def test_stats_json(_isolate_config: Path):
    _seedDb(_isolate_config)
    result = runner.invoke(_cli, ["stats", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["by_language"] == {"en": 2, "ja": 1}


# ── config ───────────────────────────────────────────────────


def test_configList_json():
    result = runner.invoke(_cli, ["config", "list", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert "scoring" in data
    assert data["scoring"]["batch_size"] == 50
    assert "feeds" in data


def test_configGet_json():
    result = runner.invoke(_cli, ["config", "get", "scoring.cap", "--format", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data == {"key": "scoring.cap", "value": 100.0, "type": "float"}


def test_configGet_missing_json():
    result = runner.invoke(_cli, ["config", "get", "nonexistent.key", "--format", "json"])
    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["ok"] is False


def test_configSet_json(_isolate_config: Path):
    result = runner.invoke(
        _cli, ["config", "set", "scoring.batch_size", "25", "--format", "json"]
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data == {"ok": True, "key": "scoring.batch_size", "value": 25}

    saved = json.loads((_isolate_config / "config.json").read_text())
    assert saved["scoring"]["batch_size"] == 25


def test_configSet_invalid_json():
    result = runner.invoke(
        _cli, ["config", "set", "scoring.batch_size", "lots", "--format", "json"]
    )
    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["ok"] is False


def test_configSet_floatAndGetType(_isolate_config: Path):
    result = runner.invoke(_cli, ["config", "set", "scoring.cap", "80.5", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["value"] == 80.5

    result = runner.invoke(_cli, ["config", "get", "port", "--format", "json"])
    assert json.loads(result.output)["type"] == "int"
