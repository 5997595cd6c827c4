"""
Thin accessors over the persisted entities.

Every function takes the connection it should use as its first
argument; nothing here opens connections or transactions, so callers
decide whether a sequence of lookups runs inside one snapshot or as
independent reads.

Lookups return ``None`` when the row is absent.  Absence is not an
error at this level.  No joins happen here: composing rows from several
tables is the job of ``PlaylistViewService``.
"""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from ..core.db import format_timestamp, parse_timestamp


@dataclass(frozen=True)
class UserRecord:
    id: int
    account: str
    display_name: str
    password_hash: str
    is_ban: bool
    created_at: datetime
    last_logged_in_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "UserRecord":
        return cls(
            id=row["id"],
            account=row["account"],
            display_name=row["display_name"],
            password_hash=row["password_hash"],
            is_ban=bool(row["is_ban"]),
            created_at=parse_timestamp(row["created_at"]),
            last_logged_in_at=parse_timestamp(row["last_logged_in_at"]),
        )


@dataclass(frozen=True)
class ArtistRecord:
    id: int
    name: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ArtistRecord":
        return cls(id=row["id"], name=row["name"])


@dataclass(frozen=True)
class SongRecord:
    id: int
    ulid: str
    title: str
    artist_id: int
    album: str
    track_number: int
    is_public: bool

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "SongRecord":
        return cls(
            id=row["id"],
            ulid=row["ulid"],
            title=row["title"],
            artist_id=row["artist_id"],
            album=row["album"],
            track_number=row["track_number"],
            is_public=bool(row["is_public"]),
        )


@dataclass(frozen=True)
class PlaylistRecord:
    id: int
    ulid: str
    name: str
    user_account: str
    is_public: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "PlaylistRecord":
        return cls(
            id=row["id"],
            ulid=row["ulid"],
            name=row["name"],
            user_account=row["user_account"],
            is_public=bool(row["is_public"]),
            created_at=parse_timestamp(row["created_at"]),
            updated_at=parse_timestamp(row["updated_at"]),
        )


@dataclass(frozen=True)
class PlaylistSongRecord:
    playlist_id: int
    sort_order: int
    song_id: int

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "PlaylistSongRecord":
        return cls(
            playlist_id=row["playlist_id"],
            sort_order=row["sort_order"],
            song_id=row["song_id"],
        )


@dataclass(frozen=True)
class PlaylistFavoriteRecord:
    id: int
    playlist_id: int
    favorite_user_account: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "PlaylistFavoriteRecord":
        return cls(
            id=row["id"],
            playlist_id=row["playlist_id"],
            favorite_user_account=row["favorite_user_account"],
            created_at=parse_timestamp(row["created_at"]),
        )


# Point lookups


def get_user_by_account(conn: sqlite3.Connection, account: str) -> Optional[UserRecord]:
    row = conn.execute("SELECT * FROM users WHERE account = ?", (account,)).fetchone()
    return UserRecord.from_row(row) if row else None


def get_playlist_by_ulid(conn: sqlite3.Connection, playlist_ulid: str) -> Optional[PlaylistRecord]:
    row = conn.execute("SELECT * FROM playlists WHERE ulid = ?", (playlist_ulid,)).fetchone()
    return PlaylistRecord.from_row(row) if row else None


def get_playlist_by_id(conn: sqlite3.Connection, playlist_id: int) -> Optional[PlaylistRecord]:
    row = conn.execute("SELECT * FROM playlists WHERE id = ?", (playlist_id,)).fetchone()
    return PlaylistRecord.from_row(row) if row else None


def get_song_by_ulid(conn: sqlite3.Connection, song_ulid: str) -> Optional[SongRecord]:
    row = conn.execute("SELECT * FROM songs WHERE ulid = ?", (song_ulid,)).fetchone()
    return SongRecord.from_row(row) if row else None


def get_song_by_id(conn: sqlite3.Connection, song_id: int) -> Optional[SongRecord]:
    row = conn.execute("SELECT * FROM songs WHERE id = ?", (song_id,)).fetchone()
    return SongRecord.from_row(row) if row else None


def get_artist_by_id(conn: sqlite3.Connection, artist_id: int) -> Optional[ArtistRecord]:
    row = conn.execute("SELECT * FROM artists WHERE id = ?", (artist_id,)).fetchone()
    return ArtistRecord.from_row(row) if row else None


def get_playlist_favorite(
    conn: sqlite3.Connection, playlist_id: int, favorite_user_account: str
) -> Optional[PlaylistFavoriteRecord]:
    row = conn.execute(
        "SELECT * FROM playlist_favorites WHERE playlist_id = ? AND favorite_user_account = ?",
        (playlist_id, favorite_user_account),
    ).fetchone()
    return PlaylistFavoriteRecord.from_row(row) if row else None


# Counts


def count_playlist_favorites(conn: sqlite3.Connection, playlist_id: int) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS cnt FROM playlist_favorites WHERE playlist_id = ?", (playlist_id,)
    ).fetchone()
    return row["cnt"]


def count_playlist_songs(conn: sqlite3.Connection, playlist_id: int) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS cnt FROM playlist_songs WHERE playlist_id = ?", (playlist_id,)
    ).fetchone()
    return row["cnt"]


def is_favorited_by(conn: sqlite3.Connection, account: str, playlist_id: int) -> bool:
    row = conn.execute(
        "SELECT COUNT(*) AS cnt FROM playlist_favorites WHERE favorite_user_account = ? AND playlist_id = ?",
        (account, playlist_id),
    ).fetchone()
    return row["cnt"] > 0


# Predicate scans.  These are generators so listings can stop reading
# once they have collected enough visible entries.


def iter_public_playlists_by_recency(conn: sqlite3.Connection) -> Iterator[PlaylistRecord]:
    cursor = conn.execute(
        "SELECT * FROM playlists WHERE is_public = 1 ORDER BY created_at DESC, id DESC"
    )
    try:
        for row in cursor:
            yield PlaylistRecord.from_row(row)
    finally:
        cursor.close()


def iter_playlists_by_user(conn: sqlite3.Connection, account: str) -> Iterator[PlaylistRecord]:
    cursor = conn.execute(
        "SELECT * FROM playlists WHERE user_account = ? ORDER BY created_at DESC, id DESC",
        (account,),
    )
    try:
        for row in cursor:
            yield PlaylistRecord.from_row(row)
    finally:
        cursor.close()


def iter_favorites_by_user(conn: sqlite3.Connection, account: str) -> Iterator[PlaylistFavoriteRecord]:
    cursor = conn.execute(
        "SELECT * FROM playlist_favorites WHERE favorite_user_account = ? ORDER BY created_at DESC, id DESC",
        (account,),
    )
    try:
        for row in cursor:
            yield PlaylistFavoriteRecord.from_row(row)
    finally:
        cursor.close()


def list_playlist_songs(conn: sqlite3.Connection, playlist_id: int) -> list[PlaylistSongRecord]:
    rows = conn.execute(
        "SELECT * FROM playlist_songs WHERE playlist_id = ? ORDER BY sort_order ASC",
        (playlist_id,),
    ).fetchall()
    return [PlaylistSongRecord.from_row(row) for row in rows]


# Inserts


def insert_playlist_song(conn: sqlite3.Connection, playlist_id: int, sort_order: int, song_id: int) -> None:
    conn.execute(
        "INSERT INTO playlist_songs (playlist_id, sort_order, song_id) VALUES (?, ?, ?)",
        (playlist_id, sort_order, song_id),
    )


def insert_playlist_favorite(
    conn: sqlite3.Connection, playlist_id: int, favorite_user_account: str, created_at: datetime
) -> None:
    conn.execute(
        "INSERT INTO playlist_favorites (playlist_id, favorite_user_account, created_at) VALUES (?, ?, ?)",
        (playlist_id, favorite_user_account, format_timestamp(created_at)),
    )
