"""API schemas for track submissions and moderation."""

from datetime import datetime

from pydantic import BaseModel, Field

from focustracks.domain.entities import TrackSubmission
from focustracks.domain.value_objects import SubmissionStatus


class SubmissionCreateRequest(BaseModel):
    """Request schema for submitting a track for review."""

    title: str
    artist: str
    genre: str
    duration: int = Field(..., description="Length in seconds (1-86400)")
    description: str = Field(..., description="Why this track helps focus (10-1000)")
    youtube_url: str | None = None
    spotify_url: str | None = None


class SubmissionReviewRequest(BaseModel):
    """Request schema for an admin decision."""

    status: SubmissionStatus
    admin_notes: str | None = Field(default=None, description="Up to 500 characters")


class SubmissionResponse(BaseModel):
    """Track submission."""

    id: str
    title: str
    artist: str
    genre: str
    duration: int
    description: str
    youtube_url: str | None
    spotify_url: str | None
    submitted_by: str
    status: SubmissionStatus
    admin_notes: str | None
    published_track_id: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, submission: TrackSubmission) -> "SubmissionResponse":
        return cls(
            id=str(submission.id),
            title=submission.title,
            artist=submission.artist,
            genre=submission.genre.value,
            duration=submission.duration,
            description=submission.description,
            youtube_url=submission.youtube_url,
            spotify_url=submission.spotify_url,
            submitted_by=submission.submitted_by,
            status=submission.status,
            admin_notes=submission.admin_notes,
            published_track_id=str(submission.published_track_id)
            if submission.published_track_id
            else None,
            created_at=submission.created_at,
            updated_at=submission.updated_at,
        )
