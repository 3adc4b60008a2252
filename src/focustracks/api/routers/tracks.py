"""Catalog track endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, status

from focustracks.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_genre_filter,
    get_track_service,
    parse_id,
    require_admin,
)
from focustracks.api.schemas.tracks import (
    CatalogVerificationResponse,
    MediaUrlFields,
    NormalizeResponse,
    TrackCreateRequest,
    TrackListResponse,
    TrackResponse,
    VideoAvailabilityResponse,
)
from focustracks.application.services.track_service import MAX_PAGE_SIZE, TrackService
from focustracks.domain.value_objects import Genre, RawMediaFields, TrackId, normalize

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=TrackListResponse)
async def list_tracks(
    genre: Genre | None = Depends(get_genre_filter),
    search: str | None = Query(None, description="Case-insensitive title/artist match"),
    limit: int = Query(20, description=f"Page size (1-{MAX_PAGE_SIZE})"),
    offset: int = Query(0, description="Rows to skip"),
    _user: CurrentUser = Depends(get_current_user),
    service: TrackService = Depends(get_track_service),
) -> TrackListResponse:
    """Browse the catalog, newest first."""
    page = await service.list_tracks(
        genre=genre, search=search, limit=limit, offset=offset
    )
    return TrackListResponse(
        tracks=[TrackResponse.from_entity(t) for t in page.tracks],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


# Hey future me - only admins publish straight into the catalog. Everybody else goes through
# /submissions and waits for review.
@router.post("", response_model=TrackResponse, status_code=status.HTTP_201_CREATED)
async def create_track(
    request: TrackCreateRequest,
    _admin: CurrentUser = Depends(require_admin),
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    """Publish a track.

    At least one of youtube_url, spotify_url or the legacy audio_url must hold a
    valid URL. Every metadata and URL problem is reported in one 422 response.
    """
    track = await service.create_track(
        title=request.title,
        artist=request.artist,
        genre=request.genre,
        duration=request.duration,
        youtube_url=request.youtube_url,
        spotify_url=request.spotify_url,
        audio_url=request.audio_url,
    )
    return TrackResponse.from_entity(track)


# Literal paths must stay above /{track_id} or FastAPI matches them as an ID.
@router.post("/normalize", response_model=NormalizeResponse)
async def normalize_media_urls(
    request: MediaUrlFields,
    _user: CurrentUser = Depends(get_current_user),
) -> NormalizeResponse:
    """Preview what a track built from these URL fields would play.

    Always 200: problems come back in `errors` instead of as an error response,
    so forms can validate while the user types.
    """
    result = normalize(
        RawMediaFields(
            youtube_url=request.youtube_url,
            spotify_url=request.spotify_url,
            audio_url=request.audio_url,
        )
    )
    return NormalizeResponse.from_result(result)


@router.post("/verify", response_model=CatalogVerificationResponse)
async def verify_catalog(
    limit: int = Query(
        MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Newest tracks to check"
    ),
    _admin: CurrentUser = Depends(require_admin),
    service: TrackService = Depends(get_track_service),
) -> CatalogVerificationResponse:
    """Check the YouTube videos of the newest tracks in one batch."""
    result = await service.verify_catalog(limit=limit)
    return CatalogVerificationResponse.from_result(result)


@router.get("/{track_id}", response_model=TrackResponse)
async def get_track(
    track_id: str,
    _user: CurrentUser = Depends(get_current_user),
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    """Get one catalog track."""
    track = await service.get_track(parse_id(TrackId, track_id, "track"))
    return TrackResponse.from_entity(track)


@router.post("/{track_id}/verify", response_model=VideoAvailabilityResponse)
async def verify_track(
    track_id: str,
    _admin: CurrentUser = Depends(require_admin),
    service: TrackService = Depends(get_track_service),
) -> VideoAvailabilityResponse:
    """Check that the track's YouTube video still exists and is public.

    A missing or private video is a 200 with is_valid=false, not an error.
    """
    result = await service.verify_track(parse_id(TrackId, track_id, "track"))
    return VideoAvailabilityResponse.from_result(result)
