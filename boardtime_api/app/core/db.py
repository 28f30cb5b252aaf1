"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), running a write transaction (``transaction``),
applying migrations on application start (``init_db``) and a cursor
helper for read‑only queries.  It uses SQLite as a lightweight
embedded database; to switch to another DBMS you would replace the
connection logic and adapt SQL syntax accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings

logger = logging.getLogger(__name__)


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the package root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # boardtime_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Timestamps are stored and returned as text.  Foreign keys
    are switched on for every connection; SQLite leaves them off by
    default and the ``ON DELETE CASCADE`` clauses below rely on them.
    """
    conn = sqlite3.connect(get_database_path(), timeout=settings.db_timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


@contextmanager
def transaction() -> Iterator[sqlite3.Connection]:
    """Run a block inside a ``BEGIN IMMEDIATE`` transaction.

    The write lock is taken up front, before any read, so two
    transactions that read a row and then rewrite it cannot
    interleave: the second one waits (up to ``settings.db_timeout``)
    until the first has committed and then sees its result.  Any
    exception rolls the whole block back.
    """
    conn = get_connection()
    conn.isolation_level = None
    try:
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
    finally:
        conn.close()


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS meetings (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            deadline TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS date_options (
            id TEXT PRIMARY KEY,
            meeting_id TEXT NOT NULL,
            date TEXT NOT NULL,
            UNIQUE(meeting_id, date),
            FOREIGN KEY(meeting_id) REFERENCES meetings(id) ON DELETE CASCADE
        );

        -- One row per (meeting, nickname).  The password hash is the
        -- participant's credential for replacing their vote.
        CREATE TABLE IF NOT EXISTS participants (
            id TEXT PRIMARY KEY,
            meeting_id TEXT NOT NULL,
            nickname TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(meeting_id, nickname),
            FOREIGN KEY(meeting_id) REFERENCES meetings(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS votes (
            participant_id TEXT NOT NULL,
            date_option_id TEXT NOT NULL,
            PRIMARY KEY(participant_id, date_option_id),
            FOREIGN KEY(participant_id) REFERENCES participants(id) ON DELETE CASCADE,
            FOREIGN KEY(date_option_id) REFERENCES date_options(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS audit_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            meeting_id TEXT,
            actor TEXT,
            action TEXT NOT NULL,
            object_type TEXT,
            object_id TEXT,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            details TEXT
        );
        """,
    ),
    # Migration 2: lookup indices for tallies and the audit trail
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_date_options_meeting_id ON date_options(meeting_id);
        CREATE INDEX IF NOT EXISTS idx_votes_date_option_id ON votes(date_option_id);
        CREATE INDEX IF NOT EXISTS idx_audit_logs_meeting_id ON audit_logs(meeting_id);
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a migration, append it with an
    incremented version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied database migration %s", version)
                current_version = version
