"""Track catalog service."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from focustracks.domain.entities import Track
from focustracks.domain.exceptions import EntityNotFoundException, ValidationException
from focustracks.domain.value_objects import (
    Genre,
    RawMediaFields,
    TrackId,
    normalize,
    validate_track_metadata,
)
from focustracks.infrastructure.integrations.youtube_oembed_client import (
    BatchAvailability,
    VideoAvailability,
    YouTubeOEmbedClient,
)
from focustracks.infrastructure.observability.logger_template import log_operation
from focustracks.infrastructure.persistence.repositories import TrackRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass
class TrackPage:
    """One page of catalog results."""

    tracks: list[Track]
    total: int
    limit: int
    offset: int


class TrackService:
    """Create, browse and verify catalog tracks."""

    def __init__(
        self,
        session: AsyncSession,
        youtube_client: YouTubeOEmbedClient | None = None,
    ) -> None:
        """Initialize track service.

        Args:
            session: Database session
            youtube_client: oEmbed client, only needed for verification
        """
        self._session = session
        self._repository = TrackRepository(session)
        self._youtube_client = youtube_client

    # Hey future me - this is the ONE boundary where raw URLs become canonical. Metadata
    # problems and URL problems are reported together so the admin fixes the form once.
    # A valid YouTube URL next to a broken Spotify URL is still rejected - the submitter
    # typed something wrong and should hear about it.
    async def create_track(
        self,
        title: str,
        artist: str,
        genre: str,
        duration: int,
        youtube_url: str | None = None,
        spotify_url: str | None = None,
        audio_url: str | None = None,
    ) -> Track:
        """Validate and publish a track.

        Raises:
            NoValidMediaUrlException: If no media URL field yielded a playable URL
            ValidationException: For any other metadata or URL problem
        """
        metadata_errors = validate_track_metadata(title, artist, genre, duration)
        media = normalize(
            RawMediaFields(
                youtube_url=youtube_url, spotify_url=spotify_url, audio_url=audio_url
            )
        ).raise_for_errors(other_errors=metadata_errors)

        track = Track.from_media(
            title=title,
            artist=artist,
            genre=Genre(genre),
            duration=int(duration),
            media=media,
        )
        await self._repository.add(track)
        logger.info(
            "track.created",
            extra={"track_id": str(track.id), "platform": media.platform.value},
        )
        return track

    async def get_track(self, track_id: TrackId) -> Track:
        """Get a track by ID.

        Raises:
            EntityNotFoundException: If the track does not exist
        """
        track = await self._repository.get_by_id(track_id)
        if track is None:
            raise EntityNotFoundException("Track", track_id)
        return track

    async def list_tracks(
        self,
        genre: Genre | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> TrackPage:
        """List catalog tracks with optional genre filter and title/artist search."""
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationException(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationException("Offset cannot be negative")

        tracks = await self._repository.list_tracks(
            genre=genre, search=search, limit=limit, offset=offset
        )
        total = await self._repository.count_tracks(genre=genre, search=search)
        return TrackPage(tracks=tracks, total=total, limit=limit, offset=offset)

    async def verify_track(self, track_id: TrackId) -> VideoAvailability:
        """Check that the track's YouTube video still exists and is public.

        Raises:
            EntityNotFoundException: If the track does not exist
            ValidationException: If the track has no YouTube URL
        """
        track = await self.get_track(track_id)
        if not track.youtube_url:
            raise ValidationException("Track has no YouTube URL to verify")

        async with log_operation(logger, "track.verify", track_id=str(track_id)):
            return await self._require_client().check_video(track.youtube_url)

    async def verify_catalog(self, limit: int = MAX_PAGE_SIZE) -> BatchAvailability:
        """Batch-check the YouTube URLs of the newest `limit` tracks."""
        tracks = await self._repository.list_tracks(limit=limit)
        urls = [track.youtube_url for track in tracks if track.youtube_url]
        async with log_operation(logger, "track.verify_catalog", videos=len(urls)):
            return await self._require_client().check_videos(urls)

    def _require_client(self) -> YouTubeOEmbedClient:
        if self._youtube_client is None:
            raise RuntimeError("TrackService was built without a YouTube client")
        return self._youtube_client
