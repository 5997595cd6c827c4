"""
Playlist endpoints for API v1.

Listing and detail routes accept anonymous callers; everything that
changes a playlist requires a logged-in, non-banned user.  Handlers
only translate between HTTP and the services: visibility, ownership
and validation rules all live in the service layer.
"""

import sqlite3

from fastapi import APIRouter, Depends

from playlist_share_api.app.core.db import get_db
from playlist_share_api.app.core.errors import NotFoundError
from playlist_share_api.app.core.security import get_current_user, get_viewer_account
from playlist_share_api.app.schemas.playlist import (
    BasicResponse,
    PlaylistCreate,
    PlaylistCreatedResponse,
    PlaylistFavoriteUpdate,
    PlaylistsResponse,
    PlaylistUpdate,
    SinglePlaylistResponse,
    UserPlaylistsResponse,
)
from playlist_share_api.app.services.entity_store import UserRecord
from playlist_share_api.app.services.playlist_service import PlaylistService, validate_playlist_ulid
from playlist_share_api.app.services.playlist_view_service import PlaylistViewService
from playlist_share_api.app.services.ranking_service import RankingService


router = APIRouter()


@router.get("/recent_playlists", response_model=PlaylistsResponse)
async def recent_playlists(
    viewer_account: str = Depends(get_viewer_account),
    conn: sqlite3.Connection = Depends(get_db),
) -> PlaylistsResponse:
    """Newest public playlists, at most 100."""
    playlists = await PlaylistViewService.recent_playlists(conn, viewer_account)
    return PlaylistsResponse(playlists=playlists)


@router.get("/popular_playlists", response_model=PlaylistsResponse)
async def popular_playlists(
    viewer_account: str = Depends(get_viewer_account),
    conn: sqlite3.Connection = Depends(get_db),
) -> PlaylistsResponse:
    """Public playlists ranked by favorite count, at most 100."""
    playlists = await RankingService.popular_playlists(conn, viewer_account)
    return PlaylistsResponse(playlists=playlists)


@router.get("/playlists", response_model=UserPlaylistsResponse)
async def my_playlists(
    current_user: UserRecord = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> UserPlaylistsResponse:
    """Playlists the caller created and playlists the caller favorited."""
    created = await PlaylistViewService.created_by_user(conn, current_user.account)
    favorited = await PlaylistViewService.favorited_by_user(conn, current_user.account)
    return UserPlaylistsResponse(created_playlists=created, favorited_playlists=favorited)


@router.get("/playlist/{playlist_ulid}", response_model=SinglePlaylistResponse)
async def get_playlist(
    playlist_ulid: str,
    viewer_account: str = Depends(get_viewer_account),
    conn: sqlite3.Connection = Depends(get_db),
) -> SinglePlaylistResponse:
    validate_playlist_ulid(playlist_ulid)
    detail = await PlaylistViewService.detail(conn, playlist_ulid, viewer_account)
    if detail is None:
        raise NotFoundError("playlist not found")
    return SinglePlaylistResponse(playlist=detail)


@router.post("/playlist/add", response_model=PlaylistCreatedResponse)
async def add_playlist(
    payload: PlaylistCreate,
    current_user: UserRecord = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> PlaylistCreatedResponse:
    """Create a new private, empty playlist."""
    playlist_ulid = await PlaylistService.create_playlist(conn, current_user.account, payload.name)
    return PlaylistCreatedResponse(playlist_ulid=playlist_ulid)


@router.post("/playlist/{playlist_ulid}/update", response_model=SinglePlaylistResponse)
async def update_playlist(
    playlist_ulid: str,
    payload: PlaylistUpdate,
    current_user: UserRecord = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> SinglePlaylistResponse:
    """Replace name, visibility and song list in one step."""
    detail = await PlaylistService.replace_content(
        conn,
        current_user.account,
        playlist_ulid,
        name=payload.name,
        song_ulids=payload.song_ulids,
        is_public=payload.is_public,
    )
    return SinglePlaylistResponse(playlist=detail)


@router.post("/playlist/{playlist_ulid}/delete", response_model=BasicResponse)
async def delete_playlist(
    playlist_ulid: str,
    current_user: UserRecord = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> BasicResponse:
    await PlaylistService.delete_playlist(conn, current_user.account, playlist_ulid)
    return BasicResponse()


@router.post("/playlist/{playlist_ulid}/favorite", response_model=SinglePlaylistResponse)
async def favorite_playlist(
    playlist_ulid: str,
    payload: PlaylistFavoriteUpdate,
    current_user: UserRecord = Depends(get_current_user),
    conn: sqlite3.Connection = Depends(get_db),
) -> SinglePlaylistResponse:
    detail = await PlaylistService.set_favorite(conn, current_user.account, playlist_ulid, payload.is_favorited)
    return SinglePlaylistResponse(playlist=detail)
