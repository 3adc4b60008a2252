"""Playlist endpoints.

Every route works on the caller's own playlists only. Someone else's playlist
answers 404 exactly like a missing one.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response, status

from focustracks.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_playlist_service,
    parse_id,
)
from focustracks.api.schemas.playlists import (
    AddTrackRequest,
    MembershipResponse,
    MoveTrackRequest,
    PlaylistCreateRequest,
    PlaylistDetailResponse,
    PlaylistOrderResponse,
    PlaylistResponse,
    PlaylistUpdateRequest,
)
from focustracks.application.services.playlist_service import PlaylistService
from focustracks.domain.value_objects import PlaylistId, TrackId

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[PlaylistResponse])
async def list_playlists(
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> list[PlaylistResponse]:
    """List the caller's playlists, newest first."""
    playlists = await service.list_playlists(user.user_id)
    return [PlaylistResponse.from_entity(p) for p in playlists]


@router.post("", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    request: PlaylistCreateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    """Create an empty playlist."""
    playlist = await service.create_playlist(user.user_id, request.name)
    return PlaylistResponse.from_entity(playlist)


@router.get("/{playlist_id}", response_model=PlaylistDetailResponse)
async def get_playlist(
    playlist_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistDetailResponse:
    """Get a playlist with its tracks in position order."""
    detail = await service.get_playlist(
        user.user_id, parse_id(PlaylistId, playlist_id, "playlist")
    )
    return PlaylistDetailResponse.from_detail(detail)


@router.patch("/{playlist_id}", response_model=PlaylistResponse)
async def rename_playlist(
    playlist_id: str,
    request: PlaylistUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistResponse:
    """Rename a playlist."""
    playlist = await service.rename_playlist(
        user.user_id, parse_id(PlaylistId, playlist_id, "playlist"), request.name
    )
    return PlaylistResponse.from_entity(playlist)


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> dict[str, Any]:
    """Delete a playlist together with all of its memberships."""
    playlist_id_obj = parse_id(PlaylistId, playlist_id, "playlist")
    removed = await service.delete_playlist(user.user_id, playlist_id_obj)
    return {
        "message": "Playlist deleted",
        "playlist_id": str(playlist_id_obj),
        "memberships_removed": removed,
    }


@router.post(
    "/{playlist_id}/tracks",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_track(
    playlist_id: str,
    request: AddTrackRequest,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> MembershipResponse:
    """Append a catalog track at the end of the playlist (409 if already there)."""
    membership = await service.add_track(
        user.user_id,
        parse_id(PlaylistId, playlist_id, "playlist"),
        TrackId(request.track_id),
    )
    return MembershipResponse.from_entity(membership)


@router.delete(
    "/{playlist_id}/tracks/{track_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_track(
    playlist_id: str,
    track_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> Response:
    """Remove a track; the tracks after it close the gap."""
    await service.remove_track(
        user.user_id,
        parse_id(PlaylistId, playlist_id, "playlist"),
        parse_id(TrackId, track_id, "track"),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{playlist_id}/tracks/{track_id}/position", response_model=PlaylistOrderResponse
)
async def move_track(
    playlist_id: str,
    track_id: str,
    request: MoveTrackRequest,
    user: CurrentUser = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service),
) -> PlaylistOrderResponse:
    """Move a track to a new position and return the whole new order.

    Positions past the end move the track last; positions below 1 are a 422.
    """
    playlist_id_obj = parse_id(PlaylistId, playlist_id, "playlist")
    memberships = await service.move_track(
        user.user_id,
        playlist_id_obj,
        parse_id(TrackId, track_id, "track"),
        request.position,
    )
    return PlaylistOrderResponse(
        playlist_id=str(playlist_id_obj),
        memberships=[MembershipResponse.from_entity(m) for m in memberships],
    )
