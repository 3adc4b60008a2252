"""Media URL validation and normalization.

Hey future me - this is THE single place where submitted media URLs get checked!
Route handlers call normalize() once at the boundary and then only deal with the
canonical result. Don't sprinkle ad-hoc "is this a YouTube link" checks downstream.

Two platforms are supported side by side:
- YouTube (video): 11-char video ID, canonical form https://www.youtube.com/watch?v=ID
- Spotify (audio streaming): 22-char track ID, canonical form https://open.spotify.com/track/ID

Plus the legacy single `audio_url` field from old submissions. It is only consulted when
neither typed field produced a valid URL, and its platform is detected by host substring.

Precedence for the playback URL is fixed: YouTube first, then Spotify. The player embeds
the YouTube player by default.

Usage:
    result = normalize(RawMediaFields(youtube_url="https://youtu.be/dQw4w9WgXcQ"))
    if result.ok:
        track.audio_url = result.canonical.primary_url
    else:
        report(result.errors)
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from focustracks.domain.exceptions import NoValidMediaUrlException

YOUTUBE_ID_LENGTH = 11
SPOTIFY_ID_LENGTH = 22

_YOUTUBE_PATTERNS = (
    re.compile(r"^https?://(?:www\.)?youtube\.com/watch\?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"^https?://(?:www\.)?youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"^https?://(?:www\.)?youtube\.com/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"^https?://(?:www\.)?youtube\.com/v/([a-zA-Z0-9_-]{11})"),
)

_SPOTIFY_PATTERNS = (
    re.compile(r"^https?://open\.spotify\.com/track/([a-zA-Z0-9]{22})"),
    re.compile(r"^https?://spotify\.com/track/([a-zA-Z0-9]{22})"),
    re.compile(r"^spotify:track:([a-zA-Z0-9]{22})$"),
)


class MediaPlatform(str, Enum):
    """External media platforms a track can link to."""

    YOUTUBE = "youtube"
    SPOTIFY = "spotify"
    UNKNOWN = "unknown"


class MediaUrlErrorCode(str, Enum):
    """Kinds of problems the normalizer reports."""

    INVALID_URL_FORMAT = "invalid_url_format"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    MISSING_MEDIA_URL = "missing_media_url"


# Field names as they appear in request payloads and error reports.
YOUTUBE_FIELD = "youtube_url"
SPOTIFY_FIELD = "spotify_url"
LEGACY_FIELD = "audio_url"


@dataclass(frozen=True)
class MediaUrlError:
    """One validation problem, tied to the field that caused it."""

    field: str | None
    code: MediaUrlErrorCode
    message: str
    value: str | None = None


@dataclass(frozen=True)
class RawMediaFields:
    """Media URL fields exactly as submitted. Blank values count as absent."""

    youtube_url: str | None = None
    spotify_url: str | None = None
    audio_url: str | None = None


@dataclass(frozen=True)
class CanonicalMediaReference:
    """Validated media URLs plus the single URL used for playback.

    primary_url is always one of the present source URLs, chosen YouTube-first.
    A reference without any valid source URL cannot be constructed.
    """

    primary_url: str
    youtube_url: str | None = None
    spotify_url: str | None = None

    def __post_init__(self) -> None:
        """Validate the precedence invariant."""
        sources = [url for url in (self.youtube_url, self.spotify_url) if url]
        if not sources:
            raise ValueError("Canonical media reference needs at least one source URL")
        expected = self.youtube_url or self.spotify_url
        if self.primary_url != expected:
            raise ValueError(
                f"primary_url must be the preferred source URL ({expected}), "
                f"got {self.primary_url}"
            )

    @property
    def platform(self) -> MediaPlatform:
        """Platform of the playback URL."""
        return MediaPlatform.YOUTUBE if self.youtube_url else MediaPlatform.SPOTIFY

    @property
    def source_urls(self) -> dict[MediaPlatform, str]:
        """All validated per-platform URLs."""
        urls: dict[MediaPlatform, str] = {}
        if self.youtube_url:
            urls[MediaPlatform.YOUTUBE] = self.youtube_url
        if self.spotify_url:
            urls[MediaPlatform.SPOTIFY] = self.spotify_url
        return urls


@dataclass(frozen=True)
class NormalizationResult:
    """Outcome of normalize(): a canonical reference, every problem found, or both.

    canonical can be set while errors is non-empty (e.g. valid YouTube URL next to a
    malformed Spotify URL). Boundary code that must reject partially bad input checks
    `errors`, not just `ok`.
    """

    canonical: CanonicalMediaReference | None
    errors: list[MediaUrlError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when a playable URL was found."""
        return self.canonical is not None

    @property
    def is_clean(self) -> bool:
        """True when a playable URL was found and nothing was wrong."""
        return self.ok and not self.errors

    @property
    def failure(self) -> "NoValidMediaUrlException | None":
        """The NoValidMediaUrl failure when no field yielded a usable URL, else None."""
        from focustracks.domain.exceptions import NoValidMediaUrlException

        if self.canonical is not None:
            return None
        return NoValidMediaUrlException(self.errors)

    def raise_for_errors(
        self, other_errors: list[str] | None = None
    ) -> CanonicalMediaReference:
        """Return the canonical reference or raise with every collected problem.

        Args:
            other_errors: Problems found elsewhere in the same request (e.g. track
                metadata), reported together with the URL errors

        Raises:
            NoValidMediaUrlException: If no field yielded a valid URL
            ValidationException: If a reference exists but some supplied field was
                bad, or other_errors is non-empty
        """
        from focustracks.domain.exceptions import (
            NoValidMediaUrlException,
            ValidationException,
        )

        if self.canonical is None:
            raise NoValidMediaUrlException(self.errors, other_errors=other_errors)
        errors = [*(other_errors or []), *(error.message for error in self.errors)]
        if errors:
            raise ValidationException("Invalid track data", errors=errors)
        return self.canonical


def _match_id(url: str, patterns: tuple[re.Pattern[str], ...], length: int) -> str | None:
    for pattern in patterns:
        match = pattern.match(url)
        if match and len(match.group(1)) == length:
            return match.group(1)
    return None


def validate_youtube_url(url: str | None) -> str | None:
    """Return the canonical YouTube URL, or None if url is not a YouTube video link.

    Accepts watch?v=, youtu.be/, /embed/ and /v/ forms with or without www.
    """
    if not url:
        return None
    video_id = _match_id(url.strip(), _YOUTUBE_PATTERNS, YOUTUBE_ID_LENGTH)
    if video_id is None:
        return None
    return f"https://www.youtube.com/watch?v={video_id}"


def validate_spotify_url(url: str | None) -> str | None:
    """Return the canonical Spotify track URL, or None if url is not a Spotify track link.

    Accepts open.spotify.com/track/, spotify.com/track/ and spotify:track: URIs.
    """
    if not url:
        return None
    track_id = _match_id(url.strip(), _SPOTIFY_PATTERNS, SPOTIFY_ID_LENGTH)
    if track_id is None:
        return None
    return f"https://open.spotify.com/track/{track_id}"


def detect_platform(url: str | None) -> MediaPlatform:
    """Guess the platform of a URL by host substring."""
    if not url:
        return MediaPlatform.UNKNOWN
    if "youtube.com" in url or "youtu.be" in url:
        return MediaPlatform.YOUTUBE
    if "spotify.com" in url:
        return MediaPlatform.SPOTIFY
    return MediaPlatform.UNKNOWN


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize(raw: RawMediaFields) -> NormalizationResult:
    """Validate all supplied media URL fields and pick the playback URL.

    Pure function: no I/O, same input -> same output. Never raises for bad input;
    every problem is collected into the result so callers can report them at once.

    Args:
        raw: Fields as submitted

    Returns:
        NormalizationResult with the canonical reference (or None) and all errors
    """
    errors: list[MediaUrlError] = []
    youtube_input = _clean(raw.youtube_url)
    spotify_input = _clean(raw.spotify_url)
    legacy_input = _clean(raw.audio_url)

    youtube_url: str | None = None
    spotify_url: str | None = None

    if youtube_input is not None:
        youtube_url = validate_youtube_url(youtube_input)
        if youtube_url is None:
            errors.append(
                MediaUrlError(
                    field=YOUTUBE_FIELD,
                    code=MediaUrlErrorCode.INVALID_URL_FORMAT,
                    message=f"Invalid YouTube URL: {youtube_input}",
                    value=youtube_input,
                )
            )

    if spotify_input is not None:
        spotify_url = validate_spotify_url(spotify_input)
        if spotify_url is None:
            errors.append(
                MediaUrlError(
                    field=SPOTIFY_FIELD,
                    code=MediaUrlErrorCode.INVALID_URL_FORMAT,
                    message=f"Invalid Spotify URL: {spotify_input}",
                    value=spotify_input,
                )
            )

    # Legacy field only fills in when the typed fields gave us nothing usable.
    if legacy_input is not None and youtube_url is None and spotify_url is None:
        platform = detect_platform(legacy_input)
        if platform is MediaPlatform.YOUTUBE:
            youtube_url = validate_youtube_url(legacy_input)
            if youtube_url is None:
                errors.append(
                    MediaUrlError(
                        field=LEGACY_FIELD,
                        code=MediaUrlErrorCode.INVALID_URL_FORMAT,
                        message=f"Invalid YouTube URL in audio_url: {legacy_input}",
                        value=legacy_input,
                    )
                )
        elif platform is MediaPlatform.SPOTIFY:
            spotify_url = validate_spotify_url(legacy_input)
            if spotify_url is None:
                errors.append(
                    MediaUrlError(
                        field=LEGACY_FIELD,
                        code=MediaUrlErrorCode.INVALID_URL_FORMAT,
                        message=f"Invalid Spotify URL in audio_url: {legacy_input}",
                        value=legacy_input,
                    )
                )
        else:
            errors.append(
                MediaUrlError(
                    field=LEGACY_FIELD,
                    code=MediaUrlErrorCode.UNSUPPORTED_PLATFORM,
                    message=f"Unsupported platform in audio_url: {legacy_input}",
                    value=legacy_input,
                )
            )

    primary_url = youtube_url or spotify_url
    if primary_url is None:
        if not errors:
            # Nothing was supplied at all - still report why it failed.
            errors.append(
                MediaUrlError(
                    field=None,
                    code=MediaUrlErrorCode.MISSING_MEDIA_URL,
                    message="At least one URL (YouTube, Spotify, or audio_url) is required",
                )
            )
        return NormalizationResult(canonical=None, errors=errors)

    canonical = CanonicalMediaReference(
        primary_url=primary_url,
        youtube_url=youtube_url,
        spotify_url=spotify_url,
    )
    return NormalizationResult(canonical=canonical, errors=errors)
