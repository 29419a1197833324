"""
SQLite database integration.

This module provides functions for opening a database connection
(``get_connection``), creating the schema (``init_db``) and a FastAPI
dependency (``get_db``) that hands one connection to each request.
Services never open connections themselves; the connection is passed
in explicitly, which lets the test suite run every service against an
in-memory database.

Tables are created idempotently with ``CREATE TABLE IF NOT EXISTS``.
There is no versioned migration system.
"""

import logging
import os
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS mood_journal_entries (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    entry_date TIMESTAMP NOT NULL,
    mood_score INTEGER,
    mood_label TEXT,
    tags TEXT,
    title TEXT,
    body TEXT,
    prompt_id TEXT,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_mood_journal_entries_user_date
    ON mood_journal_entries(user_id, entry_date);

CREATE TABLE IF NOT EXISTS mood_prompts (
    id TEXT PRIMARY KEY,
    user_id TEXT,
    title TEXT NOT NULL,
    prompt_text TEXT NOT NULL,
    category TEXT,
    is_system INTEGER NOT NULL DEFAULT 0,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TIMESTAMP NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_mood_prompts_user_id ON mood_prompts(user_id);
"""

# Global prompts inserted by ``init_db``: (title, prompt_text, category).
SYSTEM_PROMPTS = [
    ("Gratitude check-in", "What are three things you are grateful for today?", "gratitude"),
    ("Daily reflection", "What moment from today would you like to remember, and why?", "reflection"),
    ("Stress release", "What is weighing on you right now, and what is one small step you could take?", "stress"),
    ("Energy scan", "When did you feel most energised today? When did you feel drained?", "reflection"),
]


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate an opaque unique identifier for a new record."""
    return str(uuid.uuid4())


def format_timestamp(value: datetime) -> str:
    """Serialise a datetime for storage.

    Naive values are taken to be UTC.  A fixed microsecond precision
    keeps lexical order identical to chronological order, which the
    ``ORDER BY`` clauses rely on.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path (or the special
    ``:memory:`` name), use it directly.  Otherwise resolve it relative
    to the project root.
    """
    db_url = settings.database_url
    if db_url == ":memory:" or os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(database: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  ``check_same_thread`` is disabled because FastAPI may run a
    request's dependency and its handler on different threads.
    """
    conn = sqlite3.connect(database or get_database_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def get_db() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency yielding one connection per request."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


def init_db(conn: Optional[sqlite3.Connection] = None, seed: Optional[bool] = None) -> None:
    """Create the schema and seed the global system prompts.

    Parameters
    ----------
    conn : Optional[sqlite3.Connection]
        Connection to initialise.  When omitted, a connection to the
        configured database is opened and closed again.
    seed : Optional[bool]
        Whether to insert ``SYSTEM_PROMPTS``.  Defaults to
        ``settings.seed_system_prompts``.  Seeding only happens when
        no system prompt exists yet.
    """
    own_connection = conn is None
    if own_connection:
        conn = get_connection()
    if seed is None:
        seed = settings.seed_system_prompts
    try:
        conn.executescript(SCHEMA)
        if seed:
            _seed_system_prompts(conn)
        conn.commit()
    finally:
        if own_connection:
            conn.close()


def _seed_system_prompts(conn: sqlite3.Connection) -> None:
    row = conn.execute(
        "SELECT COUNT(*) AS count FROM mood_prompts WHERE is_system = 1"
    ).fetchone()
    if row["count"]:
        return
    now = format_timestamp(utcnow())
    for title, prompt_text, category in SYSTEM_PROMPTS:
        conn.execute(
            """
            INSERT INTO mood_prompts
                (id, user_id, title, prompt_text, category, is_system, is_active, created_at, updated_at)
            VALUES (?, NULL, ?, ?, ?, 1, 1, ?, ?)
            """,
            (new_id(), title, prompt_text, category, now, now),
        )
    logger.info("Seeded %d system prompts", len(SYSTEM_PROMPTS))
