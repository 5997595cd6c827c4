"""
Tests for the entity store accessors.
"""

from playlist_share_api.app.services import entity_store

from factories import BASE_TIME, add_favorite, add_playlist, add_playlist_songs, minutes


class TestPointLookups:
    def test_absent_rows_return_none(self, conn):
        assert entity_store.get_user_by_account(conn, "nobody") is None
        assert entity_store.get_playlist_by_ulid(conn, "NOPE") is None
        assert entity_store.get_playlist_by_id(conn, 999) is None
        assert entity_store.get_song_by_ulid(conn, "NOPE") is None
        assert entity_store.get_song_by_id(conn, 999) is None
        assert entity_store.get_artist_by_id(conn, 999) is None
        assert entity_store.get_playlist_favorite(conn, 1, "alice") is None

    def test_user_record_fields(self, conn, users):
        user = entity_store.get_user_by_account(conn, "mallory")
        assert user.account == "mallory"
        assert user.display_name == "Mallory"
        assert user.is_ban is True
        assert user.created_at == BASE_TIME

    def test_playlist_by_ulid_and_id_agree(self, conn, users):
        playlist_id = add_playlist(conn, "PL1", "alice", name="Road Trip", is_public=False)
        by_ulid = entity_store.get_playlist_by_ulid(conn, "PL1")
        by_id = entity_store.get_playlist_by_id(conn, playlist_id)
        assert by_ulid == by_id
        assert by_ulid.is_public is False
        assert by_ulid.user_account == "alice"

    def test_song_and_artist(self, conn, songs):
        song = entity_store.get_song_by_ulid(conn, "SONG0002")
        assert song.title == "Song 2"
        assert entity_store.get_song_by_id(conn, song.id) == song
        assert entity_store.get_artist_by_id(conn, song.artist_id).name == "Night Owls"


class TestCounts:
    def test_counts_and_favorite_check(self, conn, users, songs):
        playlist_id = add_playlist(conn, "PL1", "alice")
        add_playlist_songs(conn, playlist_id, songs[:3])
        add_favorite(conn, playlist_id, "bob")

        assert entity_store.count_playlist_songs(conn, playlist_id) == 3
        assert entity_store.count_playlist_favorites(conn, playlist_id) == 1
        assert entity_store.is_favorited_by(conn, "bob", playlist_id)
        assert not entity_store.is_favorited_by(conn, "alice", playlist_id)

    def test_counts_of_unknown_playlist_are_zero(self, conn):
        assert entity_store.count_playlist_songs(conn, 42) == 0
        assert entity_store.count_playlist_favorites(conn, 42) == 0


class TestScans:
    def test_public_playlists_newest_first(self, conn, users):
        add_playlist(conn, "OLD", "alice", created_at=BASE_TIME)
        add_playlist(conn, "NEW", "alice", created_at=BASE_TIME + minutes(5))
        add_playlist(conn, "HIDDEN", "alice", is_public=False, created_at=BASE_TIME + minutes(10))
        ulids = [p.ulid for p in entity_store.iter_public_playlists_by_recency(conn)]
        assert ulids == ["NEW", "OLD"]

    def test_playlists_by_user_include_private(self, conn, users):
        add_playlist(conn, "A1", "alice", is_public=False, created_at=BASE_TIME + minutes(1))
        add_playlist(conn, "A2", "alice", created_at=BASE_TIME + minutes(2))
        add_playlist(conn, "B1", "bob")
        ulids = [p.ulid for p in entity_store.iter_playlists_by_user(conn, "alice")]
        assert ulids == ["A2", "A1"]

    def test_favorites_by_user_most_recent_first(self, conn, users):
        first = add_playlist(conn, "P1", "alice")
        second = add_playlist(conn, "P2", "alice")
        add_favorite(conn, first, "bob", created_at=BASE_TIME)
        add_favorite(conn, second, "bob", created_at=BASE_TIME + minutes(1))
        ids = [f.playlist_id for f in entity_store.iter_favorites_by_user(conn, "bob")]
        assert ids == [second, first]

    def test_playlist_songs_follow_sort_order(self, conn, users, songs):
        playlist_id = add_playlist(conn, "PL1", "alice")
        # inserted out of order on purpose
        for sort_order, song_ulid in [(3, "SONG0005"), (1, "SONG0009"), (2, "SONG0001")]:
            song = entity_store.get_song_by_ulid(conn, song_ulid)
            entity_store.insert_playlist_song(conn, playlist_id, sort_order, song.id)
        entries = entity_store.list_playlist_songs(conn, playlist_id)
        assert [e.sort_order for e in entries] == [1, 2, 3]
        assert [entity_store.get_song_by_id(conn, e.song_id).ulid for e in entries] == [
            "SONG0009",
            "SONG0001",
            "SONG0005",
        ]


def test_insert_playlist_favorite_round_trips_timestamp(conn, users):
    playlist_id = add_playlist(conn, "PL1", "alice")
    entity_store.insert_playlist_favorite(conn, playlist_id, "bob", BASE_TIME + minutes(3))
    favorite = entity_store.get_playlist_favorite(conn, playlist_id, "bob")
    assert favorite.favorite_user_account == "bob"
    assert favorite.created_at == BASE_TIME + minutes(3)
