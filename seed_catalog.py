#!/usr/bin/env python3
"""
Load the song catalog (artists and songs) into the SQLite database.

Songs are never created through the API; this script inserts them from
a JSON file of the form::

    {
      "artists": [{"id": 1, "name": "The Drivers"}],
      "songs": [
        {"ulid": "01G3...", "title": "Road Song", "artist_id": 1,
         "album": "Highway", "track_number": 1, "is_public": true}
      ]
    }

Rows whose id (artists) or ulid (songs) already exist are left alone,
so the script can be re-run safely.

Usage:
    python seed_catalog.py --catalog ./catalog.json [--db ./playlist_share_api/playlist_share.db]
"""

import argparse
import json
import logging
import os
import sys

from playlist_share_api.app.core.config import settings
from playlist_share_api.app.core.db import get_connection, init_db, transaction
from playlist_share_api.app.core.logging_config import setup_logging

logger = logging.getLogger("seed_catalog")


def main():
    ap = argparse.ArgumentParser(description="Load artists and songs into the playlist share database.")
    ap.add_argument("--catalog", required=True, help="Path to the catalog JSON file")
    ap.add_argument("--db", help="Path to the SQLite DB file (defaults to DATABASE_URL)")
    args = ap.parse_args()

    setup_logging()

    if not os.path.exists(args.catalog):
        print(f"[!] Catalog not found: {args.catalog}", file=sys.stderr)
        sys.exit(1)
    if args.db:
        settings.database_url = os.path.abspath(args.db)

    with open(args.catalog, "r", encoding="utf-8") as f:
        catalog = json.load(f)

    init_db()
    conn = get_connection()
    try:
        with transaction(conn, "IMMEDIATE"):
            for artist in catalog.get("artists", []):
                conn.execute(
                    "INSERT OR IGNORE INTO artists (id, name) VALUES (?, ?)",
                    (artist["id"], artist["name"]),
                )
            for song in catalog.get("songs", []):
                conn.execute(
                    """
                    INSERT OR IGNORE INTO songs (ulid, title, artist_id, album, track_number, is_public)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        song["ulid"],
                        song["title"],
                        song["artist_id"],
                        song.get("album", ""),
                        song.get("track_number", 0),
                        int(song.get("is_public", True)),
                    ),
                )
    finally:
        conn.close()
    logger.info(
        "Loaded %s artists and %s songs",
        len(catalog.get("artists", [])),
        len(catalog.get("songs", [])),
    )


if __name__ == "__main__":
    main()
