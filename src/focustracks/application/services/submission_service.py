"""Track submission and moderation service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from focustracks.domain.entities import (
    MAX_DESCRIPTION_LENGTH,
    MIN_DESCRIPTION_LENGTH,
    Track,
    TrackSubmission,
)
from focustracks.domain.exceptions import EntityNotFoundException, ValidationException
from focustracks.domain.value_objects import (
    CanonicalMediaReference,
    Genre,
    RawMediaFields,
    SubmissionId,
    SubmissionStatus,
    normalize,
    validate_track_metadata,
)
from focustracks.infrastructure.persistence.repositories import (
    SubmissionRepository,
    TrackRepository,
)

logger = logging.getLogger(__name__)


def validate_description(description: object) -> str | None:
    """Return an error message for a bad submission description, or None."""
    if not isinstance(description, str) or not description.strip():
        return "Description is required"
    length = len(description.strip())
    if length < MIN_DESCRIPTION_LENGTH:
        return f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
    if length > MAX_DESCRIPTION_LENGTH:
        return f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
    return None


class SubmissionService:
    """Users submit tracks, admins moderate them."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize submission service.

        Args:
            session: Database session
        """
        self._session = session
        self._submissions = SubmissionRepository(session)
        self._tracks = TrackRepository(session)

    # Yo, submissions only take the TYPED url fields. The legacy audio_url is for old
    # catalog data, new submitters never see it.
    async def submit(
        self,
        user_id: str,
        title: str,
        artist: str,
        genre: str,
        duration: int,
        description: str,
        youtube_url: str | None = None,
        spotify_url: str | None = None,
    ) -> TrackSubmission:
        """Queue a track for admin review.

        Raises:
            NoValidMediaUrlException: If neither URL field holds a valid URL
            ValidationException: For any other metadata, description or URL problem
        """
        errors = validate_track_metadata(title, artist, genre, duration)
        description_error = validate_description(description)
        if description_error:
            errors.append(description_error)

        media = normalize(
            RawMediaFields(youtube_url=youtube_url, spotify_url=spotify_url)
        ).raise_for_errors(other_errors=errors)

        submission = TrackSubmission(
            id=SubmissionId.generate(),
            title=title.strip(),
            artist=artist.strip(),
            genre=Genre(genre),
            duration=int(duration),
            description=description.strip(),
            submitted_by=user_id,
            youtube_url=media.youtube_url,
            spotify_url=media.spotify_url,
        )
        await self._submissions.add(submission)
        logger.info(
            "submission.created",
            extra={"submission_id": str(submission.id), "user_id": user_id},
        )
        return submission

    async def list_submissions(
        self, status: SubmissionStatus | None = None
    ) -> list[TrackSubmission]:
        """List all submissions (admin view)."""
        return await self._submissions.list_submissions(status=status)

    async def list_own_submissions(self, user_id: str) -> list[TrackSubmission]:
        """List the caller's own submissions."""
        return await self._submissions.list_submissions(submitted_by=user_id)

    # Listen, approval publishes into the catalog exactly once. published_track_id is the
    # idempotency key: approve -> reject -> approve keeps the first published track.
    async def review(
        self,
        submission_id: SubmissionId,
        status: SubmissionStatus,
        admin_notes: str | None = None,
    ) -> TrackSubmission:
        """Set moderation status; approving publishes the track.

        Raises:
            EntityNotFoundException: If the submission does not exist
            ValidationException: If admin notes are too long
        """
        submission = await self._submissions.get_by_id(submission_id)
        if submission is None:
            raise EntityNotFoundException("TrackSubmission", submission_id)

        try:
            submission.review(status, admin_notes)
        except ValueError as e:
            raise ValidationException(str(e)) from e

        if submission.needs_publishing:
            track = Track.from_media(
                title=submission.title,
                artist=submission.artist,
                genre=submission.genre,
                duration=submission.duration,
                media=CanonicalMediaReference(
                    primary_url=submission.youtube_url or submission.spotify_url or "",
                    youtube_url=submission.youtube_url,
                    spotify_url=submission.spotify_url,
                ),
            )
            await self._tracks.add(track)
            submission.mark_published(track.id)
            logger.info(
                "submission.published",
                extra={"submission_id": str(submission.id), "track_id": str(track.id)},
            )

        await self._submissions.update(submission)
        logger.info(
            "submission.reviewed",
            extra={"submission_id": str(submission.id), "status": status.value},
        )
        return submission
