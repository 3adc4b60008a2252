"""API schemas for playlists and their track order."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from focustracks.api.schemas.tracks import TrackResponse
from focustracks.application.services.playlist_service import (
    PlaylistDetail,
    PlaylistEntry,
)
from focustracks.domain.entities import Playlist, PlaylistMembership


class PlaylistCreateRequest(BaseModel):
    """Request schema for creating a playlist."""

    name: str = Field(..., description="Playlist name (1-100 characters, trimmed)")


class PlaylistUpdateRequest(BaseModel):
    """Request schema for renaming a playlist."""

    name: str = Field(..., description="New playlist name")


class AddTrackRequest(BaseModel):
    """Request schema for appending a track to a playlist."""

    track_id: UUID


class MoveTrackRequest(BaseModel):
    """Request schema for moving a track inside a playlist."""

    position: int = Field(
        ...,
        description="Target 1-based position. Values past the end move the track last.",
    )


class PlaylistResponse(BaseModel):
    """Playlist without tracks."""

    id: str
    name: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, playlist: Playlist) -> "PlaylistResponse":
        return cls(
            id=str(playlist.id),
            name=playlist.name,
            user_id=playlist.user_id,
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )


class MembershipResponse(BaseModel):
    """A track's slot in a playlist."""

    id: str
    playlist_id: str
    track_id: str
    position: int
    added_at: datetime

    @classmethod
    def from_entity(cls, membership: PlaylistMembership) -> "MembershipResponse":
        return cls(
            id=str(membership.id),
            playlist_id=str(membership.playlist_id),
            track_id=str(membership.track_id),
            position=membership.position,
            added_at=membership.added_at,
        )


class PlaylistOrderResponse(BaseModel):
    """Full playlist order after a move."""

    playlist_id: str
    memberships: list[MembershipResponse]


class PlaylistTrackResponse(BaseModel):
    """A catalog track at its playlist position."""

    position: int
    added_at: datetime
    track: TrackResponse

    @classmethod
    def from_entry(cls, entry: PlaylistEntry) -> "PlaylistTrackResponse":
        return cls(
            position=entry.position,
            added_at=entry.membership.added_at,
            track=TrackResponse.from_entity(entry.track),
        )


class PlaylistDetailResponse(PlaylistResponse):
    """Playlist with tracks sorted by position."""

    tracks: list[PlaylistTrackResponse]

    @classmethod
    def from_detail(cls, detail: PlaylistDetail) -> "PlaylistDetailResponse":
        base = PlaylistResponse.from_entity(detail.playlist)
        return cls(
            **base.model_dump(),
            tracks=[PlaylistTrackResponse.from_entry(e) for e in detail.entries],
        )
