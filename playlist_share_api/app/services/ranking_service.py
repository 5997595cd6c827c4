"""
Popularity ranking.

The ranking and the favorite counts shown next to each entry come from
separate queries.  Both run inside one read transaction so they see the
same snapshot: a favorite committed by another request in between can
not reorder the list relative to the counts it displays.  The
transaction is committed before the result is handed back.
"""

import logging
import sqlite3
from typing import Iterator, List

from ..core.db import transaction
from ..schemas.playlist import PlaylistSummary
from . import entity_store
from .entity_store import PlaylistRecord
from .playlist_view_service import PlaylistViewService

logger = logging.getLogger(__name__)


class RankingService:

    @classmethod
    async def popular_playlists(cls, conn: sqlite3.Connection, viewer_account: str) -> List[PlaylistSummary]:
        """Public playlists ordered by favorite count, highest first.

        Only playlists with at least one favorite are ranked.  Ties keep
        the older playlist first.
        """
        with transaction(conn, "DEFERRED"):
            candidates = cls._ranked_public_playlists(conn)
            playlists = PlaylistViewService.summarize_candidates(conn, candidates, viewer_account)
        logger.debug("Popular ranking built with %s entries", len(playlists))
        return playlists

    @staticmethod
    def _ranked_public_playlists(conn: sqlite3.Connection) -> Iterator[PlaylistRecord]:
        rows = conn.execute(
            """
            SELECT playlist_id, COUNT(*) AS favorite_count
            FROM playlist_favorites
            GROUP BY playlist_id
            ORDER BY favorite_count DESC, playlist_id ASC
            """
        ).fetchall()
        for row in rows:
            playlist = entity_store.get_playlist_by_id(conn, row["playlist_id"])
            if playlist is None or not playlist.is_public:
                continue
            yield playlist
