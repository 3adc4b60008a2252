"""Domain value objects."""

from dataclasses import dataclass
from enum import Enum
from typing import Self
from uuid import UUID, uuid4

from focustracks.domain.value_objects.media_urls import (
    CanonicalMediaReference,
    MediaPlatform,
    MediaUrlError,
    MediaUrlErrorCode,
    NormalizationResult,
    RawMediaFields,
    detect_platform,
    normalize,
    validate_spotify_url,
    validate_youtube_url,
)
from focustracks.domain.value_objects.track_metadata import (
    ALL_GENRES,
    MAX_DURATION_SECONDS,
    Genre,
    parse_genre_filter,
    validate_duration,
    validate_track_metadata,
)


# Hey future me, all IDs are random UUIDs wrapped in tiny frozen dataclasses. Random (not
# max-plus-one) because two concurrent inserts must never collide. The wrapper types stop
# you from passing a TrackId where a PlaylistId is expected - mypy catches it.
@dataclass(frozen=True)
class _UUIDIdentifier:
    value: UUID

    @classmethod
    def generate(cls) -> Self:
        """Create a new random identifier."""
        return cls(uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse an identifier from its string form.

        Raises:
            ValueError: If value is not a valid UUID
        """
        return cls(UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PlaylistId(_UUIDIdentifier):
    """Playlist identifier."""


@dataclass(frozen=True)
class TrackId(_UUIDIdentifier):
    """Track identifier."""


@dataclass(frozen=True)
class MembershipId(_UUIDIdentifier):
    """Playlist membership identifier."""


@dataclass(frozen=True)
class SubmissionId(_UUIDIdentifier):
    """Track submission identifier."""


class SubmissionStatus(str, Enum):
    """Moderation state of a track submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    """Role forwarded by the identity provider."""

    USER = "user"
    ADMIN = "admin"


__all__ = [
    "ALL_GENRES",
    "CanonicalMediaReference",
    "Genre",
    "MAX_DURATION_SECONDS",
    "MediaPlatform",
    "MediaUrlError",
    "MediaUrlErrorCode",
    "MembershipId",
    "NormalizationResult",
    "PlaylistId",
    "RawMediaFields",
    "SubmissionId",
    "SubmissionStatus",
    "TrackId",
    "UserRole",
    "detect_platform",
    "normalize",
    "parse_genre_filter",
    "validate_duration",
    "validate_spotify_url",
    "validate_track_metadata",
    "validate_youtube_url",
]
