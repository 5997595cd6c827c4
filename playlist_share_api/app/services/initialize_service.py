"""
Reset hook restoring the datastore to its baseline.

Everything created after ``settings.initialize_cutoff`` is removed, then
rows whose parent is gone are cleaned up.  Running it twice in a row is
the same as running it once.
"""

import logging
import sqlite3

from ..core.config import settings
from ..core.db import format_timestamp, parse_timestamp, transaction


class InitializeService:

    @classmethod
    async def reset(cls, conn: sqlite3.Connection) -> None:
        logger = logging.getLogger(__name__)
        cutoff = format_timestamp(parse_timestamp(settings.initialize_cutoff))
        with transaction(conn, "IMMEDIATE"):
            conn.execute("DELETE FROM users WHERE ? < created_at", (cutoff,))
            conn.execute(
                "DELETE FROM playlists WHERE ? < created_at OR user_account NOT IN (SELECT account FROM users)",
                (cutoff,),
            )
            conn.execute("DELETE FROM playlist_songs WHERE playlist_id NOT IN (SELECT id FROM playlists)")
            conn.execute(
                """
                DELETE FROM playlist_favorites
                WHERE ? < created_at
                   OR playlist_id NOT IN (SELECT id FROM playlists)
                   OR favorite_user_account NOT IN (SELECT account FROM users)
                """,
                (cutoff,),
            )
        logger.info("Datastore reset to baseline %s", cutoff)
