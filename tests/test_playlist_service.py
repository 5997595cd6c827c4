"""
Tests for PlaylistService: creation, replacement, favorites and deletion.
"""

import sqlite3

import pytest

from playlist_share_api.app.core.config import settings
from playlist_share_api.app.core.db import get_connection, transaction
from playlist_share_api.app.core.errors import InternalError, NotFoundError, ValidationError
from playlist_share_api.app.services import entity_store
from playlist_share_api.app.services.playlist_service import (
    PlaylistService,
    validate_playlist_name,
    validate_playlist_ulid,
    validate_song_ulids,
)
from playlist_share_api.app.services.playlist_view_service import PlaylistViewService

from factories import BASE_TIME, add_favorite, add_playlist, add_playlist_songs, favorite_rows, song_ulids_of


def playlist_row(conn, ulid):
    return entity_store.get_playlist_by_ulid(conn, ulid)


class TestValidators:
    @pytest.mark.parametrize("ulid", ["", "abc-def", "../etc", "01G3 NFG", "ulid!"])
    def test_bad_ulids(self, ulid):
        with pytest.raises(ValidationError, match="bad playlist ulid"):
            validate_playlist_ulid(ulid)

    def test_good_ulid(self):
        validate_playlist_ulid("01G3NFGRFMQ7BWW2YZ1HMKTQ5Y")

    @pytest.mark.parametrize("name", ["", "x", "y" * 192])
    def test_bad_names(self, name):
        with pytest.raises(ValidationError, match="invalid name"):
            validate_playlist_name(name)

    @pytest.mark.parametrize("name", ["ok", "z" * 191])
    def test_name_bounds(self, name):
        validate_playlist_name(name)

    def test_song_list_limits(self):
        validate_song_ulids([])
        validate_song_ulids([f"S{i}" for i in range(80)])
        with pytest.raises(ValidationError, match="invalid song_ulids"):
            validate_song_ulids([f"S{i}" for i in range(81)])
        with pytest.raises(ValidationError, match="invalid song_ulids"):
            validate_song_ulids(["S1", "S2", "S1"])


class TestCreate:
    @pytest.mark.asyncio
    async def test_new_playlist_is_private_and_empty(self, conn, users):
        ulid = await PlaylistService.create_playlist(conn, "alice", "Road Trip")

        validate_playlist_ulid(ulid)
        assert len(ulid) == 26
        row = playlist_row(conn, ulid)
        assert row.name == "Road Trip"
        assert row.user_account == "alice"
        assert row.is_public is False
        assert song_ulids_of(conn, row.id) == []

    @pytest.mark.asyncio
    async def test_rejects_bad_name(self, conn, users):
        with pytest.raises(ValidationError):
            await PlaylistService.create_playlist(conn, "alice", "x")
        assert conn.execute("SELECT COUNT(*) FROM playlists").fetchone()[0] == 0


class TestReplaceContent:
    @pytest.mark.asyncio
    async def test_road_trip(self, conn, users, songs):
        ulid = await PlaylistService.create_playlist(conn, "alice", "Road Trip")

        detail = await PlaylistService.replace_content(
            conn, "alice", ulid, name="Road Trip 2", song_ulids=songs[:3], is_public=True
        )

        assert detail.name == "Road Trip 2"
        assert detail.is_public is True
        assert [s.ulid for s in detail.songs] == songs[:3]
        assert detail.song_count == 3

        seen_by_bob = await PlaylistViewService.detail(conn, ulid, "bob")
        assert [s.ulid for s in seen_by_bob.songs] == songs[:3]

    @pytest.mark.asyncio
    async def test_replaces_whole_list_and_order(self, conn, users, songs):
        playlist_id = add_playlist(conn, "PL1", "alice")
        add_playlist_songs(conn, playlist_id, songs[:5])

        await PlaylistService.replace_content(
            conn, "alice", "PL1", name="Mixtape", song_ulids=[songs[7], songs[2]], is_public=False
        )

        assert song_ulids_of(conn, playlist_id) == [songs[7], songs[2]]
        sort_orders = [e.sort_order for e in entity_store.list_playlist_songs(conn, playlist_id)]
        assert sort_orders == [1, 2]

    @pytest.mark.asyncio
    async def test_empty_song_list_clears_playlist(self, conn, users, songs):
        playlist_id = add_playlist(conn, "PL1", "alice")
        add_playlist_songs(conn, playlist_id, songs[:5])

        detail = await PlaylistService.replace_content(
            conn, "alice", "PL1", name="Mixtape", song_ulids=[], is_public=True
        )
        assert detail.songs == []
        assert song_ulids_of(conn, playlist_id) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_position", range(10))
    async def test_unknown_song_leaves_playlist_untouched(self, conn, users, songs, bad_position):
        playlist_id = add_playlist(conn, "PL1", "alice", name="Before", is_public=False)
        add_playlist_songs(conn, playlist_id, songs[:2])
        requested = list(songs[2:12])
        requested[bad_position] = "MISSINGSONG"

        with pytest.raises(ValidationError, match="MISSINGSONG"):
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="After", song_ulids=requested, is_public=True
            )

        row = playlist_row(conn, "PL1")
        assert row.name == "Before"
        assert row.is_public is False
        assert song_ulids_of(conn, playlist_id) == songs[:2]

    @pytest.mark.asyncio
    async def test_validation_runs_before_lookup(self, conn, users, songs):
        add_playlist(conn, "PL1", "alice")
        with pytest.raises(ValidationError, match="invalid song_ulids"):
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="Mixtape", song_ulids=[songs[0], songs[0]], is_public=True
            )
        with pytest.raises(ValidationError, match="invalid song_ulids"):
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="Mixtape", song_ulids=[f"S{i}" for i in range(81)], is_public=True
            )
        with pytest.raises(ValidationError, match="invalid name"):
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="x", song_ulids=[], is_public=True
            )
        with pytest.raises(ValidationError, match="name, song_ulids and is_public is required"):
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="", song_ulids=[], is_public=True
            )

    @pytest.mark.asyncio
    async def test_non_owner_gets_not_found(self, conn, users, songs):
        add_playlist(conn, "PL1", "alice", name="Mine")
        with pytest.raises(NotFoundError):
            await PlaylistService.replace_content(
                conn, "bob", "PL1", name="Stolen", song_ulids=[], is_public=True
            )
        with pytest.raises(NotFoundError):
            await PlaylistService.replace_content(
                conn, "alice", "NOSUCH", name="Ghost", song_ulids=[], is_public=True
            )
        assert playlist_row(conn, "PL1").name == "Mine"

    @pytest.mark.asyncio
    async def test_storage_failure_rolls_back(self, conn, users, songs, monkeypatch):
        playlist_id = add_playlist(conn, "PL1", "alice", name="Before")
        add_playlist_songs(conn, playlist_id, songs[:2])

        original = entity_store.insert_playlist_song
        calls = []

        def failing_insert(c, pid, sort_order, song_id):
            calls.append(sort_order)
            if len(calls) == 3:
                raise sqlite3.OperationalError("disk I/O error")
            return original(c, pid, sort_order, song_id)

        monkeypatch.setattr(entity_store, "insert_playlist_song", failing_insert)

        with pytest.raises(InternalError):
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="After", song_ulids=songs[4:9], is_public=True
            )

        assert playlist_row(conn, "PL1").name == "Before"
        assert song_ulids_of(conn, playlist_id) == songs[:2]

    @pytest.mark.asyncio
    async def test_concurrent_reader_sees_old_list_until_commit(self, conn, users, songs, monkeypatch):
        playlist_id = add_playlist(conn, "PL1", "alice")
        add_playlist_songs(conn, playlist_id, songs[:3])
        reader = get_connection()

        original = entity_store.insert_playlist_song
        seen = []

        def insert_and_read(c, pid, sort_order, song_id):
            seen.append(song_ulids_of(reader, pid))
            return original(c, pid, sort_order, song_id)

        monkeypatch.setattr(entity_store, "insert_playlist_song", insert_and_read)

        try:
            await PlaylistService.replace_content(
                conn, "alice", "PL1", name="Mixtape", song_ulids=songs[5:9], is_public=True
            )
            after = song_ulids_of(reader, playlist_id)
        finally:
            reader.close()

        # old rows are already deleted inside the writer, yet never visible as gone
        assert seen == [songs[:3]] * 4
        assert after == songs[5:9]


class TestFavorite:
    @pytest.mark.asyncio
    async def test_count_goes_up_and_down(self, conn, users):
        playlist_id = add_playlist(conn, "PL1", "alice")
        add_favorite(conn, playlist_id, "alice")

        detail = await PlaylistService.set_favorite(conn, "bob", "PL1", True)
        assert detail.favorite_count == 2
        assert detail.is_favorited is True

        detail = await PlaylistService.set_favorite(conn, "bob", "PL1", False)
        assert detail.favorite_count == 1
        assert detail.is_favorited is False

    @pytest.mark.asyncio
    async def test_favorite_is_idempotent(self, conn, users):
        playlist_id = add_playlist(conn, "PL1", "alice")
        for _ in range(3):
            await PlaylistService.set_favorite(conn, "bob", "PL1", True)
        assert favorite_rows(conn, playlist_id, "bob") == 1

    @pytest.mark.asyncio
    async def test_rival_writer_locked_out_between_check_and_insert(self, conn, users, monkeypatch):
        playlist_id = add_playlist(conn, "PL1", "alice")
        monkeypatch.setattr(settings, "db_timeout_seconds", 0)
        rival = get_connection()

        original = entity_store.get_playlist_favorite
        rival_errors = []

        def check_while_rival_writes(c, pid, account):
            if not rival_errors:
                with pytest.raises(InternalError) as excinfo:
                    with transaction(rival, "IMMEDIATE"):
                        entity_store.insert_playlist_favorite(rival, pid, account, BASE_TIME)
                rival_errors.append(excinfo.value)
            return original(c, pid, account)

        monkeypatch.setattr(entity_store, "get_playlist_favorite", check_while_rival_writes)

        try:
            await PlaylistService.set_favorite(conn, "bob", "PL1", True)
            # the rival retries once the lock is released and finds the row
            await PlaylistService.set_favorite(rival, "bob", "PL1", True)
        finally:
            rival.close()

        assert len(rival_errors) == 1
        assert favorite_rows(conn, playlist_id, "bob") == 1

    @pytest.mark.asyncio
    async def test_unfavorite_without_favorite_is_noop(self, conn, users):
        playlist_id = add_playlist(conn, "PL1", "alice")
        detail = await PlaylistService.set_favorite(conn, "bob", "PL1", False)
        assert detail.is_favorited is False
        assert favorite_rows(conn, playlist_id) == 0

    @pytest.mark.asyncio
    async def test_owner_may_favorite_own_private_playlist(self, conn, users):
        playlist_id = add_playlist(conn, "PL1", "alice", is_public=False)
        await PlaylistService.set_favorite(conn, "alice", "PL1", True)
        assert favorite_rows(conn, playlist_id, "alice") == 1

    @pytest.mark.asyncio
    async def test_hidden_playlists_and_banned_actors_get_not_found(self, conn, users):
        private_id = add_playlist(conn, "PRIV", "alice", is_public=False)
        banned_id = add_playlist(conn, "BANNED", "mallory")
        public_id = add_playlist(conn, "PUB", "alice")

        with pytest.raises(NotFoundError):
            await PlaylistService.set_favorite(conn, "bob", "PRIV", True)
        with pytest.raises(NotFoundError):
            await PlaylistService.set_favorite(conn, "bob", "BANNED", True)
        with pytest.raises(NotFoundError):
            await PlaylistService.set_favorite(conn, "mallory", "PUB", True)
        with pytest.raises(NotFoundError):
            await PlaylistService.set_favorite(conn, "bob", "NOSUCH", True)

        for playlist_id in (private_id, banned_id, public_id):
            assert favorite_rows(conn, playlist_id) == 0


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_cascades(self, conn, users, songs):
        playlist_id = add_playlist(conn, "PL1", "alice")
        other_id = add_playlist(conn, "PL2", "alice")
        add_playlist_songs(conn, playlist_id, songs[:4])
        add_playlist_songs(conn, other_id, songs[:2])
        add_favorite(conn, playlist_id, "bob")
        add_favorite(conn, other_id, "bob")

        await PlaylistService.delete_playlist(conn, "alice", "PL1")

        assert playlist_row(conn, "PL1") is None
        assert song_ulids_of(conn, playlist_id) == []
        assert favorite_rows(conn, playlist_id) == 0
        assert song_ulids_of(conn, other_id) == songs[:2]
        assert favorite_rows(conn, other_id) == 1

        favorited = await PlaylistViewService.favorited_by_user(conn, "bob")
        assert [p.ulid for p in favorited] == ["PL2"]

    @pytest.mark.asyncio
    async def test_only_owner_may_delete(self, conn, users):
        add_playlist(conn, "PL1", "alice")
        with pytest.raises(NotFoundError):
            await PlaylistService.delete_playlist(conn, "bob", "PL1")
        with pytest.raises(NotFoundError):
            await PlaylistService.delete_playlist(conn, "alice", "NOSUCH")
        assert playlist_row(conn, "PL1") is not None
