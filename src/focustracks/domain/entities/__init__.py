"""Domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from focustracks.domain.entities.playlist_membership import (
    PlaylistMembership,
    apply_positions,
    clamp_position,
    is_dense,
    next_position,
    plan_move,
    plan_removal,
    plan_renumber,
    sort_by_position,
)
from focustracks.domain.value_objects import (
    CanonicalMediaReference,
    Genre,
    PlaylistId,
    SubmissionId,
    SubmissionStatus,
    TrackId,
)

MAX_PLAYLIST_NAME_LENGTH = 100
MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 1000
MAX_ADMIN_NOTES_LENGTH = 500


# Listen, Track is a PUBLISHED catalog entry. audio_url is always the canonical playback
# URL produced by the media normalizer - never a raw user string. youtube_url/spotify_url
# are the canonical per-platform links (either may be None, not both).
@dataclass
class Track:
    """Track entity representing a catalog track."""

    id: TrackId
    title: str
    artist: str
    genre: Genre
    duration: int
    audio_url: str
    youtube_url: str | None = None
    spotify_url: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate track data."""
        if not self.title or not self.title.strip():
            raise ValueError("Track title cannot be empty")
        if not self.artist or not self.artist.strip():
            raise ValueError("Track artist cannot be empty")
        if self.duration <= 0:
            raise ValueError("Duration must be positive")
        if self.audio_url not in (self.youtube_url, self.spotify_url):
            raise ValueError("audio_url must be one of the track's source URLs")

    @classmethod
    def from_media(
        cls,
        title: str,
        artist: str,
        genre: Genre,
        duration: int,
        media: CanonicalMediaReference,
        track_id: TrackId | None = None,
    ) -> "Track":
        """Build a track from validated metadata and a canonical media reference."""
        return cls(
            id=track_id or TrackId.generate(),
            title=title.strip(),
            artist=artist.strip(),
            genre=genre,
            duration=duration,
            audio_url=media.primary_url,
            youtube_url=media.youtube_url,
            spotify_url=media.spotify_url,
        )


@dataclass
class Playlist:
    """A user-owned, named playlist. Its tracks live in PlaylistMembership rows."""

    id: PlaylistId
    name: str
    user_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate and trim the playlist name."""
        self.name = self._validate_name(self.name)
        if not self.user_id:
            raise ValueError("Playlist owner cannot be empty")

    @staticmethod
    def _validate_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValueError("Playlist name is required")
        if len(name) > MAX_PLAYLIST_NAME_LENGTH:
            raise ValueError(
                f"Playlist name cannot exceed {MAX_PLAYLIST_NAME_LENGTH} characters"
            )
        return name

    def rename(self, name: str) -> None:
        """Rename the playlist."""
        self.name = self._validate_name(name)
        self.updated_at = datetime.now(UTC)

    def is_owned_by(self, user_id: str) -> bool:
        """Check playlist ownership."""
        return self.user_id == user_id


# Yo, TrackSubmission is the moderation queue entry! Users submit, admins review. Status goes
# PENDING -> APPROVED or REJECTED, and an admin may flip it again later. Approving publishes a
# Track ONCE - published_track_id remembers it so a second approve doesn't duplicate the track.
@dataclass
class TrackSubmission:
    """User-submitted track waiting for (or after) admin review."""

    id: SubmissionId
    title: str
    artist: str
    genre: Genre
    duration: int
    description: str
    submitted_by: str
    youtube_url: str | None = None
    spotify_url: str | None = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    admin_notes: str | None = None
    published_track_id: TrackId | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate submission data."""
        if not self.youtube_url and not self.spotify_url:
            raise ValueError("At least one URL (YouTube or Spotify) is required")
        if not self.submitted_by:
            raise ValueError("Submitter cannot be empty")

    def review(self, status: SubmissionStatus, admin_notes: str | None = None) -> None:
        """Set moderation status and notes."""
        if admin_notes is not None and len(admin_notes) > MAX_ADMIN_NOTES_LENGTH:
            raise ValueError(
                f"Admin notes cannot exceed {MAX_ADMIN_NOTES_LENGTH} characters"
            )
        self.status = status
        if admin_notes is not None:
            self.admin_notes = admin_notes
        self.updated_at = datetime.now(UTC)

    @property
    def needs_publishing(self) -> bool:
        """Approved but not yet turned into a catalog track."""
        return (
            self.status == SubmissionStatus.APPROVED and self.published_track_id is None
        )

    def mark_published(self, track_id: TrackId) -> None:
        """Remember which catalog track this submission became."""
        self.published_track_id = track_id
        self.updated_at = datetime.now(UTC)


__all__ = [
    "MAX_ADMIN_NOTES_LENGTH",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_PLAYLIST_NAME_LENGTH",
    "MIN_DESCRIPTION_LENGTH",
    "Playlist",
    "PlaylistMembership",
    "Track",
    "TrackSubmission",
    "apply_positions",
    "clamp_position",
    "is_dense",
    "next_position",
    "plan_move",
    "plan_removal",
    "plan_renumber",
    "sort_by_position",
]
