"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a FastAPI dependency that scopes one connection
to one request (``get_db``), an explicit transaction boundary
(``transaction``) and the migration runner applied on application start
(``init_db``).

Connections run in autocommit mode: nothing is wrapped in a
transaction unless a caller opens one with ``transaction``.  The
database uses WAL journaling so that readers keep seeing the last
committed state while a writer holds the write lock.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .config import settings
from .errors import InternalError

logger = logging.getLogger(__name__)

# Text timestamps in this format sort the same way the instants do.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

TRANSACTION_MODES = {"DEFERRED", "IMMEDIATE", "EXCLUSIVE"}


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # playlist_share_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by
    name.  ``check_same_thread`` is disabled because FastAPI may open
    the connection in a worker thread and use it on the event loop;
    a connection is still only ever used by one request at a time.
    """
    conn = sqlite3.connect(
        get_database_path(),
        timeout=settings.db_timeout_seconds,
        isolation_level=None,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def get_db() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency yielding a per-request connection."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection, mode: str = "DEFERRED") -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements as one all-or-nothing unit.

    ``DEFERRED`` is used for read snapshots: the snapshot is fixed by
    the first read and stays stable until the block exits.
    ``IMMEDIATE`` takes the write lock up front, so two writers never
    interleave their check-then-write sequences.

    Any exception rolls the transaction back.  Driver errors are
    logged and re-raised as ``InternalError`` so callers only ever see
    the service error taxonomy.
    """
    mode = mode.upper()
    if mode not in TRANSACTION_MODES:
        raise ValueError(f"unknown transaction mode {mode!r}")
    try:
        conn.execute(f"BEGIN {mode}")
    except sqlite3.Error as exc:
        logger.exception("Failed to open %s transaction", mode)
        raise InternalError() from exc
    try:
        yield conn
    except sqlite3.Error as exc:
        conn.rollback()
        logger.exception("Storage failure, transaction rolled back")
        raise InternalError() from exc
    except BaseException:
        conn.rollback()
        raise
    else:
        try:
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Commit failed, transaction rolled back")
            raise InternalError() from exc


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the form stored in the database)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            account TEXT NOT NULL UNIQUE,
            display_name TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            is_ban INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            last_logged_in_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS artists (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS songs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            ulid TEXT NOT NULL UNIQUE,
            title TEXT NOT NULL,
            artist_id INTEGER NOT NULL,
            album TEXT NOT NULL,
            track_number INTEGER NOT NULL,
            is_public INTEGER NOT NULL DEFAULT 1,
            FOREIGN KEY(artist_id) REFERENCES artists(id)
        );

        CREATE TABLE IF NOT EXISTS playlists (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            ulid TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            user_account TEXT NOT NULL,
            is_public INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        -- No foreign keys on the association tables: playlist deletion
        -- cleans them up with explicit statements.
        CREATE TABLE IF NOT EXISTS playlist_songs (
            playlist_id INTEGER NOT NULL,
            sort_order INTEGER NOT NULL,
            song_id INTEGER NOT NULL,
            PRIMARY KEY (playlist_id, sort_order)
        );

        CREATE TABLE IF NOT EXISTS playlist_favorites (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            playlist_id INTEGER NOT NULL,
            favorite_user_account TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: indexes for the listing queries
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_playlists_public_created ON playlists(is_public, created_at);
        CREATE INDEX IF NOT EXISTS idx_playlists_user_created ON playlists(user_account, created_at);
        CREATE INDEX IF NOT EXISTS idx_playlist_favorites_playlist ON playlist_favorites(playlist_id);
        CREATE INDEX IF NOT EXISTS idx_playlist_favorites_user_created
            ON playlist_favorites(favorite_user_account, created_at);
        CREATE INDEX IF NOT EXISTS idx_songs_artist ON songs(artist_id);
        """,
    ),
]


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any migration from
    ``MIGRATIONS`` with a higher version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
