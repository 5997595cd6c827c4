"""
Read side of the playlist domain.

``PlaylistViewService`` turns playlist rows into the ``PlaylistSummary``
and ``PlaylistDetail`` projections.  It looks up the owner, the counts
and the songs one row at a time through ``entity_store``; callers only
depend on the method contracts, so a batched implementation can replace
this one without touching them.

Listings never fail because one entry became invisible: candidates are
paired with their owners, passed through ``filter_exposable`` and only
the survivors are summarized.
"""

import logging
import sqlite3
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple

from ..core.config import settings
from ..schemas.playlist import PlaylistDetail, PlaylistSummary, SongRead
from . import entity_store
from .entity_store import PlaylistRecord, UserRecord
from .visibility import filter_exposable, is_exposable

logger = logging.getLogger(__name__)


class PlaylistViewService:
    """Compose playlist projections for a given viewer."""

    @classmethod
    async def summarize(
        cls, conn: sqlite3.Connection, playlist: PlaylistRecord, viewer_account: str
    ) -> Optional[PlaylistSummary]:
        """Return the summary of ``playlist`` or ``None`` if the viewer may not see it."""
        owner = entity_store.get_user_by_account(conn, playlist.user_account)
        if not is_exposable(playlist, owner, viewer_account):
            return None
        return cls._build_summary(conn, playlist, owner, viewer_account)

    @classmethod
    async def detail(
        cls, conn: sqlite3.Connection, playlist_ulid: str, viewer_account: str
    ) -> Optional[PlaylistDetail]:
        """Return the playlist with its songs in ``sort_order``.

        ``None`` covers a missing playlist, a private playlist seen by
        someone other than its owner and a playlist whose owner is
        banned.  Callers must not distinguish between these.
        """
        playlist = entity_store.get_playlist_by_ulid(conn, playlist_ulid)
        if playlist is None:
            return None
        owner = entity_store.get_user_by_account(conn, playlist.user_account)
        if not is_exposable(playlist, owner, viewer_account):
            return None

        songs = cls._load_songs(conn, playlist)
        summary = cls._build_summary(conn, playlist, owner, viewer_account, song_count=len(songs))
        return PlaylistDetail(**summary.model_dump(), songs=songs)

    @classmethod
    async def recent_playlists(cls, conn: sqlite3.Connection, viewer_account: str) -> List[PlaylistSummary]:
        """Newest public playlists first."""
        candidates = entity_store.iter_public_playlists_by_recency(conn)
        return cls.summarize_candidates(conn, candidates, viewer_account)

    @classmethod
    async def created_by_user(
        cls, conn: sqlite3.Connection, account: str, viewer_account: Optional[str] = None
    ) -> List[PlaylistSummary]:
        """Playlists created by ``account``, newest first.

        When ``viewer_account`` is omitted the owner is the viewer, so
        private playlists are included.  A missing or banned owner
        yields an empty list.
        """
        owner = entity_store.get_user_by_account(conn, account)
        if owner is None or owner.is_ban:
            logger.debug("Created playlists of %s hidden: owner missing or banned", account)
            return []
        viewer = viewer_account if viewer_account is not None else account
        candidates = entity_store.iter_playlists_by_user(conn, account)
        return cls.summarize_candidates(conn, candidates, viewer)

    @classmethod
    async def favorited_by_user(
        cls, conn: sqlite3.Connection, account: str, viewer_account: Optional[str] = None
    ) -> List[PlaylistSummary]:
        """Playlists favorited by ``account``, most recently favorited first."""
        viewer = viewer_account if viewer_account is not None else account
        return cls.summarize_candidates(conn, cls._favorited_playlists(conn, account), viewer)

    @classmethod
    def summarize_candidates(
        cls,
        conn: sqlite3.Connection,
        candidates: Iterable[PlaylistRecord],
        viewer_account: str,
        limit: Optional[int] = None,
    ) -> List[PlaylistSummary]:
        """Summarize the visible candidates in order, stopping at ``limit``."""
        limit = settings.listing_limit if limit is None else limit
        visible = filter_exposable(cls._with_owners(conn, candidates), viewer_account)
        return [
            cls._build_summary(conn, playlist, owner, viewer_account)
            for playlist, owner in islice(visible, limit)
        ]

    @staticmethod
    def _with_owners(
        conn: sqlite3.Connection, playlists: Iterable[PlaylistRecord]
    ) -> Iterator[Tuple[PlaylistRecord, Optional[UserRecord]]]:
        for playlist in playlists:
            yield playlist, entity_store.get_user_by_account(conn, playlist.user_account)

    @staticmethod
    def _favorited_playlists(conn: sqlite3.Connection, account: str) -> Iterator[PlaylistRecord]:
        for favorite in entity_store.iter_favorites_by_user(conn, account):
            playlist = entity_store.get_playlist_by_id(conn, favorite.playlist_id)
            if playlist is None:
                # Deleted between the two reads.
                continue
            yield playlist

    @staticmethod
    def _build_summary(
        conn: sqlite3.Connection,
        playlist: PlaylistRecord,
        owner: UserRecord,
        viewer_account: str,
        song_count: Optional[int] = None,
    ) -> PlaylistSummary:
        if song_count is None:
            song_count = entity_store.count_playlist_songs(conn, playlist.id)
        is_favorited = False
        if viewer_account != settings.anonymous_account:
            is_favorited = entity_store.is_favorited_by(conn, viewer_account, playlist.id)
        return PlaylistSummary(
            ulid=playlist.ulid,
            name=playlist.name,
            owner_display_name=owner.display_name,
            owner_account=owner.account,
            song_count=song_count,
            favorite_count=entity_store.count_playlist_favorites(conn, playlist.id),
            is_favorited=is_favorited,
            is_public=playlist.is_public,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    @staticmethod
    def _load_songs(conn: sqlite3.Connection, playlist: PlaylistRecord) -> List[SongRead]:
        songs: List[SongRead] = []
        for entry in entity_store.list_playlist_songs(conn, playlist.id):
            song = entity_store.get_song_by_id(conn, entry.song_id)
            if song is None:
                logger.warning("Playlist %s references missing song id %s", playlist.ulid, entry.song_id)
                continue
            artist = entity_store.get_artist_by_id(conn, song.artist_id)
            songs.append(
                SongRead(
                    ulid=song.ulid,
                    title=song.title,
                    artist_name=artist.name if artist else "",
                    album=song.album,
                    track_number=song.track_number,
                    is_public=song.is_public,
                )
            )
        return songs
