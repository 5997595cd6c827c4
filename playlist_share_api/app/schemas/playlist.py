"""
Pydantic models for playlist data.

``PlaylistSummary`` is the row shown in listings; ``PlaylistDetail``
adds the ordered song list.  Request bodies only check that the fields
are present and of the right type: length limits and song list rules
are enforced by ``PlaylistService`` so they are reported the same way
no matter which caller reaches the service.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class SongRead(BaseModel):
    ulid: str = Field(..., examples=["01G3NFGRFMQ7BWW2YZ1HMKTQ5Y"])
    title: str = Field(..., examples=["Road Song"])
    artist_name: str = Field(..., examples=["The Drivers"])
    album: str
    track_number: int
    is_public: bool

    model_config = {
        "from_attributes": True,
    }


class PlaylistSummary(BaseModel):
    """Schema for a playlist row in listings."""

    ulid: str
    name: str = Field(..., examples=["Road Trip"])
    owner_display_name: str
    owner_account: str
    song_count: int
    favorite_count: int
    is_favorited: bool
    is_public: bool
    created_at: datetime
    updated_at: datetime


class PlaylistDetail(PlaylistSummary):
    """Schema for a single playlist, songs ordered by position."""

    songs: list[SongRead] = Field(default_factory=list)


class PlaylistCreate(BaseModel):
    name: str = Field(..., examples=["Road Trip"])


class PlaylistUpdate(BaseModel):
    """Schema for replacing a playlist's content.

    All three fields are required: the request replaces the name, the
    visibility flag and the whole song list at once.
    """

    name: str = Field(..., examples=["Road Trip"])
    song_ulids: list[str] = Field(..., description="Song ulids in playlist order")
    is_public: bool = Field(..., examples=[False])


class PlaylistFavoriteUpdate(BaseModel):
    is_favorited: bool = Field(..., examples=[True])


class BasicResponse(BaseModel):
    """Envelope shared by every response body."""

    result: bool = True
    status: int = 200
    error: str | None = None


class PlaylistsResponse(BasicResponse):
    playlists: list[PlaylistSummary]


class UserPlaylistsResponse(BasicResponse):
    created_playlists: list[PlaylistSummary]
    favorited_playlists: list[PlaylistSummary]


class SinglePlaylistResponse(BasicResponse):
    playlist: PlaylistDetail


class PlaylistCreatedResponse(BasicResponse):
    playlist_ulid: str
