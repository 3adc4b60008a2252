"""SQLAlchemy ORM models for FocusTracks."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - SQLite drops tzinfo on the way out. Run every datetime read from the
# database through this before handing it to the domain, or comparisons with
# datetime.now(UTC) blow up with "can't compare offset-naive and offset-aware".
def ensure_utc_aware(dt: datetime) -> datetime:
    """Ensure datetime is UTC-aware, assuming naive datetimes are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class TrackModel(Base):
    """Published catalog track."""

    __tablename__ = "tracks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    artist: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    genre: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    # Canonical playback URL, always equal to youtube_url or spotify_url.
    audio_url: Mapped[str] = mapped_column(String(512), nullable=False)
    youtube_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    spotify_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)


# Listen, the playlist row doubles as the lock target for membership writes. Every
# add/remove/move does SELECT ... FOR UPDATE on this row before touching positions, so
# two writers on the same playlist queue up in PostgreSQL instead of racing.
class PlaylistModel(Base):
    """User-owned playlist."""

    __tablename__ = "playlists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )


# Hey future me - (playlist_id, track_id) is UNIQUE, (playlist_id, position) is only
# INDEXED. A unique position constraint looks tempting but a move shifts several rows
# one by one and would trip it mid-statement. Density is guaranteed by the
# single-writer transaction instead.
class PlaylistMembershipModel(Base):
    """One track at one position in one playlist."""

    __tablename__ = "playlist_memberships"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    playlist_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False
    )
    track_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tracks.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    added_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "playlist_id", "track_id", name="uq_playlist_memberships_playlist_track"
        ),
        Index("ix_playlist_memberships_position", "playlist_id", "position"),
    )


class TrackSubmissionModel(Base):
    """User submission awaiting moderation."""

    __tablename__ = "track_submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    genre: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    youtube_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    spotify_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    submitted_by: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # 'pending' | 'approved' | 'rejected' - plain string, not a DB enum (SQLite).
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )
    admin_notes: Mapped[str | None] = mapped_column(String(500), nullable=True)
    published_track_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("tracks.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utc_now, onupdate=utc_now, nullable=False
    )
