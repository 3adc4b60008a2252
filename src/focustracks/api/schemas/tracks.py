"""API schemas for the track catalog and media URL tools."""

from datetime import datetime

from pydantic import BaseModel, Field

from focustracks.domain.entities import Track
from focustracks.domain.value_objects import NormalizationResult
from focustracks.infrastructure.integrations.youtube_oembed_client import (
    BatchAvailability,
    VideoAvailability,
)


class MediaUrlFields(BaseModel):
    """Raw media URL fields as typed by the user. Blank strings count as absent."""

    youtube_url: str | None = Field(default=None, description="YouTube video URL")
    spotify_url: str | None = Field(default=None, description="Spotify track URL")
    audio_url: str | None = Field(
        default=None, description="Legacy single URL field (YouTube or Spotify)"
    )


class TrackCreateRequest(MediaUrlFields):
    """Request schema for publishing a catalog track."""

    title: str = Field(..., description="Track title (1-255 characters)")
    artist: str = Field(..., description="Artist name (1-255 characters)")
    genre: str = Field(..., description="Ambient, Classical, Electronic, Jazz or Other")
    duration: int = Field(..., description="Length in seconds (1-86400)")


class TrackResponse(BaseModel):
    """Catalog track."""

    id: str
    title: str
    artist: str
    genre: str
    duration: int
    audio_url: str = Field(..., description="Canonical playback URL")
    youtube_url: str | None = None
    spotify_url: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, track: Track) -> "TrackResponse":
        return cls(
            id=str(track.id),
            title=track.title,
            artist=track.artist,
            genre=track.genre.value,
            duration=track.duration,
            audio_url=track.audio_url,
            youtube_url=track.youtube_url,
            spotify_url=track.spotify_url,
            created_at=track.created_at,
        )


class TrackListResponse(BaseModel):
    """One page of catalog tracks."""

    tracks: list[TrackResponse]
    total: int
    limit: int
    offset: int


class MediaUrlErrorResponse(BaseModel):
    """One problem found by the normalizer."""

    field: str | None
    code: str
    message: str
    value: str | None = None


class NormalizeResponse(BaseModel):
    """Normalizer preview: what a track created from these fields would play."""

    ok: bool
    primary_url: str | None = None
    platform: str | None = None
    youtube_url: str | None = None
    spotify_url: str | None = None
    errors: list[MediaUrlErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: NormalizationResult) -> "NormalizeResponse":
        canonical = result.canonical
        return cls(
            ok=result.ok,
            primary_url=canonical.primary_url if canonical else None,
            platform=canonical.platform.value if canonical else None,
            youtube_url=canonical.youtube_url if canonical else None,
            spotify_url=canonical.spotify_url if canonical else None,
            errors=[
                MediaUrlErrorResponse(
                    field=error.field,
                    code=error.code.value,
                    message=error.message,
                    value=error.value,
                )
                for error in result.errors
            ],
        )


class VideoAvailabilityResponse(BaseModel):
    """YouTube oEmbed lookup result."""

    url: str
    is_valid: bool
    error: str | None = None
    title: str | None = None
    author: str | None = None

    @classmethod
    def from_result(cls, result: VideoAvailability) -> "VideoAvailabilityResponse":
        return cls(
            url=result.url,
            is_valid=result.is_valid,
            error=result.error,
            title=result.title,
            author=result.author,
        )


class CatalogVerificationResponse(BaseModel):
    """Batch YouTube check over the catalog."""

    valid: list[str]
    invalid: list[VideoAvailabilityResponse]

    @classmethod
    def from_result(cls, result: BatchAvailability) -> "CatalogVerificationResponse":
        return cls(
            valid=result.valid,
            invalid=[VideoAvailabilityResponse.from_result(r) for r in result.invalid],
        )
