"""
Write side of the playlist domain.

``PlaylistService`` owns every change to a playlist: creation, content
replacement, favorite toggling and deletion.  Each change runs inside
one ``IMMEDIATE`` transaction, so it either commits completely or
leaves the previously committed state untouched.

Callers other than the owner get ``NotFoundError`` for owner-only
operations, the same error a missing playlist produces.  Request
payloads are validated before the transaction starts.
"""

import logging
import re
import sqlite3
from datetime import timezone
from typing import Sequence

from ulid import ULID

from ..core.config import settings
from ..core.db import format_timestamp, transaction, utcnow
from ..core.errors import NotFoundError, ValidationError
from ..schemas.playlist import PlaylistDetail
from . import entity_store
from .playlist_view_service import PlaylistViewService
from .visibility import is_exposable, is_owner

logger = logging.getLogger(__name__)

PLAYLIST_ULID_RE = re.compile(r"^[a-zA-Z0-9]+$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 191


def validate_playlist_ulid(playlist_ulid: str) -> None:
    if not playlist_ulid or not PLAYLIST_ULID_RE.match(playlist_ulid):
        raise ValidationError("bad playlist ulid")


def validate_playlist_name(name: str) -> None:
    if not name or not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationError("invalid name")


def validate_song_ulids(song_ulids: Sequence[str]) -> None:
    if len(song_ulids) > settings.max_playlist_songs:
        raise ValidationError("invalid song_ulids")
    if len(set(song_ulids)) != len(song_ulids):
        raise ValidationError("invalid song_ulids")


class PlaylistService:
    """Owner operations on playlists."""

    @classmethod
    async def create_playlist(cls, conn: sqlite3.Connection, actor_account: str, name: str) -> str:
        """Create an empty private playlist and return its ulid."""
        validate_playlist_name(name)
        created_at = utcnow()
        playlist_ulid = str(ULID.from_timestamp(created_at.replace(tzinfo=timezone.utc).timestamp()))
        with transaction(conn, "IMMEDIATE"):
            conn.execute(
                """
                INSERT INTO playlists (ulid, name, user_account, is_public, created_at, updated_at)
                VALUES (?, ?, ?, 0, ?, ?)
                """,
                (
                    playlist_ulid,
                    name,
                    actor_account,
                    format_timestamp(created_at),
                    format_timestamp(created_at),
                ),
            )
        logger.info("User %s created playlist %s", actor_account, playlist_ulid)
        return playlist_ulid

    @classmethod
    async def replace_content(
        cls,
        conn: sqlite3.Connection,
        actor_account: str,
        playlist_ulid: str,
        name: str,
        song_ulids: Sequence[str],
        is_public: bool,
    ) -> PlaylistDetail:
        """Replace name, visibility and the whole song list of a playlist.

        Songs are stored with ``sort_order`` 1..n in the given order.  If
        any ulid does not resolve to a song the transaction is rolled
        back and the playlist keeps its previous name, flag and songs.
        """
        validate_playlist_ulid(playlist_ulid)
        if not name:
            raise ValidationError("name, song_ulids and is_public is required")
        validate_playlist_name(name)
        validate_song_ulids(song_ulids)

        with transaction(conn, "IMMEDIATE"):
            playlist = entity_store.get_playlist_by_ulid(conn, playlist_ulid)
            if playlist is None or not is_owner(playlist, actor_account):
                raise NotFoundError("playlist not found")

            conn.execute(
                "UPDATE playlists SET name = ?, is_public = ?, updated_at = ? WHERE id = ?",
                (name, int(is_public), format_timestamp(utcnow()), playlist.id),
            )
            conn.execute("DELETE FROM playlist_songs WHERE playlist_id = ?", (playlist.id,))
            for sort_order, song_ulid in enumerate(song_ulids, start=1):
                song = entity_store.get_song_by_ulid(conn, song_ulid)
                if song is None:
                    raise ValidationError(f"song not found. ulid: {song_ulid}")
                entity_store.insert_playlist_song(conn, playlist.id, sort_order, song.id)

        logger.info(
            "User %s replaced playlist %s: %s songs, public=%s",
            actor_account, playlist_ulid, len(song_ulids), is_public,
        )
        return await cls._detail_for(conn, playlist_ulid, actor_account)

    @classmethod
    async def set_favorite(
        cls, conn: sqlite3.Connection, actor_account: str, playlist_ulid: str, is_favorited: bool
    ) -> PlaylistDetail:
        """Favorite or unfavorite a playlist; both directions are idempotent.

        The existence check and the insert share one write transaction,
        so concurrent favorite calls for the same pair cannot both
        insert.
        """
        validate_playlist_ulid(playlist_ulid)

        with transaction(conn, "IMMEDIATE"):
            playlist = entity_store.get_playlist_by_ulid(conn, playlist_ulid)
            if playlist is None:
                raise NotFoundError("playlist not found")
            actor = entity_store.get_user_by_account(conn, actor_account)
            if actor is None or actor.is_ban:
                raise NotFoundError("playlist not found")
            owner = entity_store.get_user_by_account(conn, playlist.user_account)
            if not is_exposable(playlist, owner, actor_account):
                raise NotFoundError("playlist not found")

            if is_favorited:
                existing = entity_store.get_playlist_favorite(conn, playlist.id, actor_account)
                if existing is None:
                    entity_store.insert_playlist_favorite(conn, playlist.id, actor_account, utcnow())
            else:
                conn.execute(
                    "DELETE FROM playlist_favorites WHERE playlist_id = ? AND favorite_user_account = ?",
                    (playlist.id, actor_account),
                )

        logger.info("User %s set favorite=%s on playlist %s", actor_account, is_favorited, playlist_ulid)
        return await cls._detail_for(conn, playlist_ulid, actor_account)

    @classmethod
    async def delete_playlist(cls, conn: sqlite3.Connection, actor_account: str, playlist_ulid: str) -> None:
        """Delete a playlist, then its songs, then its favorites."""
        validate_playlist_ulid(playlist_ulid)

        with transaction(conn, "IMMEDIATE"):
            playlist = entity_store.get_playlist_by_ulid(conn, playlist_ulid)
            if playlist is None or not is_owner(playlist, actor_account):
                raise NotFoundError("playlist not found")
            conn.execute("DELETE FROM playlists WHERE id = ?", (playlist.id,))
            conn.execute("DELETE FROM playlist_songs WHERE playlist_id = ?", (playlist.id,))
            conn.execute("DELETE FROM playlist_favorites WHERE playlist_id = ?", (playlist.id,))

        logger.info("User %s deleted playlist %s", actor_account, playlist_ulid)

    @staticmethod
    async def _detail_for(conn: sqlite3.Connection, playlist_ulid: str, viewer_account: str) -> PlaylistDetail:
        detail = await PlaylistViewService.detail(conn, playlist_ulid, viewer_account)
        if detail is None:
            # Hidden again by a concurrent ban or delete after our commit.
            raise NotFoundError("playlist not found")
        return detail
