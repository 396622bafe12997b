"""SQLite database utilities for the shopping planner.

Provides connection management and table initialization for the
plan cache.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .config import settings

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS plan_cache (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    location_key TEXT NOT NULL,
    category TEXT NOT NULL,
    plan_json TEXT NOT NULL,
    generated_at TEXT NOT NULL,
    expires_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_plan_cache_lookup
    ON plan_cache(location_key, category, expires_at);
"""


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    """Get a SQLite connection with row factory enabled."""
    path = db_path or settings.cache.db_path
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db(db_path: str | None = None) -> None:
    """Create all tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        conn.executescript(_CREATE_TABLES_SQL)
        conn.commit()
    finally:
        conn.close()
