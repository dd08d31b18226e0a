"""Application state container — singleton shared by the REST API and CLI."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from pulse.config import PulseConfig, loadConfig
from pulse.db import connect

logger = logging.getLogger("pulse")

# ── Singleton ────────────────────────────────────────────────

_state: AppState | None = None


@dataclass(frozen=True)
class AppState:
    db: sqlite3.Connection
    config: PulseConfig


def getState() -> AppState:
    """Return current state or raise if not initialised."""
    assert _state is not None, "AppState not initialized — call initState() first"
    return _state


def initState(config: PulseConfig | None = None) -> AppState:
    """Create + store singleton. HTTP uses threads so check_same_thread=False."""
    global _state
    _state = createAppState(config=config)
    return _state


def closeState() -> None:
    """Close DB and clear global."""
    global _state
    if _state and _state.db:
        _state.db.close()
    _state = None
    logger.info("Pulse shut down.")


def setState(s: AppState | None) -> None:
    """Inject state directly (for tests)."""
    global _state
    _state = s


def createAppState(
    config: PulseConfig | None = None,
    check_same_thread: bool = False,
) -> AppState:
    """Create AppState — loads config, opens DB."""
    cfg = config or loadConfig()
    db = connect(cfg, check_same_thread=check_same_thread)
    logger.info("Pulse starting — db: %s", cfg.db_path)
    return AppState(db=db, config=cfg)
