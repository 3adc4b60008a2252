"""SQLAlchemy repository implementations for domain entities."""

from __future__ import annotations

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from focustracks.domain.entities import (
    Playlist,
    PlaylistMembership,
    Track,
    TrackSubmission,
)
from focustracks.domain.exceptions import (
    DuplicateMembershipException,
    EntityNotFoundException,
    MembershipNotFoundException,
)
from focustracks.domain.ports import (
    IPlaylistMembershipRepository,
    IPlaylistRepository,
    ISubmissionRepository,
    ITrackRepository,
)
from focustracks.domain.value_objects import (
    Genre,
    MembershipId,
    PlaylistId,
    SubmissionId,
    SubmissionStatus,
    TrackId,
)

from .models import (
    PlaylistMembershipModel,
    PlaylistModel,
    TrackModel,
    TrackSubmissionModel,
    ensure_utc_aware,
)


# Hey future me, repositories never commit! They stage and flush inside the session they
# were handed. Commit/rollback belongs to Database.session_scope(), which is what makes a
# whole add/remove/move one all-or-nothing transaction.
class PlaylistMembershipRepository(IPlaylistMembershipRepository):
    """SQLAlchemy implementation of the membership persistence port."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    # Listen, with_for_update() compiles to SELECT ... FOR UPDATE on PostgreSQL and is
    # silently dropped on SQLite (which locks the whole file on first write anyway). Either
    # way a second writer on this playlist waits here until we commit.
    async def lock_playlist(self, playlist_id: PlaylistId) -> None:
        stmt = (
            select(PlaylistModel.id)
            .where(PlaylistModel.id == str(playlist_id))
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        if result.scalar_one_or_none() is None:
            raise EntityNotFoundException("Playlist", playlist_id)

    async def list_for_playlist(
        self, playlist_id: PlaylistId
    ) -> list[PlaylistMembership]:
        stmt = (
            select(PlaylistMembershipModel)
            .where(PlaylistMembershipModel.playlist_id == str(playlist_id))
            .order_by(
                PlaylistMembershipModel.position, PlaylistMembershipModel.added_at
            )
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def insert(self, membership: PlaylistMembership) -> PlaylistMembership:
        """Insert a membership; the unique (playlist, track) constraint is the backstop."""
        model = PlaylistMembershipModel(
            id=str(membership.id),
            playlist_id=str(membership.playlist_id),
            track_id=str(membership.track_id),
            position=membership.position,
            added_at=membership.added_at,
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if "unique" not in str(e).lower():
                raise
            raise DuplicateMembershipException(
                membership.playlist_id, membership.track_id
            ) from e
        return membership

    async def delete(self, playlist_id: PlaylistId, track_id: TrackId) -> None:
        stmt = delete(PlaylistMembershipModel).where(
            PlaylistMembershipModel.playlist_id == str(playlist_id),
            PlaylistMembershipModel.track_id == str(track_id),
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise MembershipNotFoundException(playlist_id, track_id)

    async def update_position(self, membership_id: MembershipId, position: int) -> None:
        stmt = (
            update(PlaylistMembershipModel)
            .where(PlaylistMembershipModel.id == str(membership_id))
            .values(position=position)
        )
        await self.session.execute(stmt)

    async def delete_all_for_playlist(self, playlist_id: PlaylistId) -> int:
        stmt = delete(PlaylistMembershipModel).where(
            PlaylistMembershipModel.playlist_id == str(playlist_id)
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)  # type: ignore[attr-defined]

    @staticmethod
    def _to_entity(model: PlaylistMembershipModel) -> PlaylistMembership:
        return PlaylistMembership(
            id=MembershipId.from_string(model.id),
            playlist_id=PlaylistId.from_string(model.playlist_id),
            track_id=TrackId.from_string(model.track_id),
            position=model.position,
            added_at=ensure_utc_aware(model.added_at),
        )


class PlaylistRepository(IPlaylistRepository):
    """SQLAlchemy implementation of Playlist repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, playlist: Playlist) -> None:
        """Add a new playlist."""
        self.session.add(
            PlaylistModel(
                id=str(playlist.id),
                name=playlist.name,
                user_id=playlist.user_id,
                created_at=playlist.created_at,
                updated_at=playlist.updated_at,
            )
        )
        await self.session.flush()

    async def get_by_id(self, playlist_id: PlaylistId) -> Playlist | None:
        """Get a playlist by ID."""
        model = await self.session.get(PlaylistModel, str(playlist_id))
        return self._to_entity(model) if model else None

    async def list_for_user(self, user_id: str) -> list[Playlist]:
        """List a user's playlists, newest first."""
        stmt = (
            select(PlaylistModel)
            .where(PlaylistModel.user_id == user_id)
            .order_by(PlaylistModel.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def search(
        self, user_id: str, query: str, limit: int = 20, offset: int = 0
    ) -> list[Playlist]:
        """Search a user's playlists by name, newest first."""
        stmt = self._matching(select(PlaylistModel), user_id, query)
        stmt = (
            stmt.order_by(PlaylistModel.created_at.desc(), PlaylistModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def count_search(self, user_id: str, query: str) -> int:
        """Count a user's playlists whose name matches."""
        stmt = self._matching(select(func.count(PlaylistModel.id)), user_id, query)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    # Only the caller's own playlists are searchable, same as list_for_user.
    @staticmethod
    def _matching(
        stmt: Select, user_id: str, query: str  # type: ignore[type-arg]
    ) -> Select:  # type: ignore[type-arg]
        needle = query.strip().lower()
        return stmt.where(
            PlaylistModel.user_id == user_id,
            func.lower(PlaylistModel.name).contains(needle, autoescape=True),
        )

    async def update(self, playlist: Playlist) -> None:
        """Update an existing playlist."""
        model = await self.session.get(PlaylistModel, str(playlist.id))
        if not model:
            raise EntityNotFoundException("Playlist", playlist.id)
        model.name = playlist.name
        model.updated_at = playlist.updated_at
        await self.session.flush()

    async def delete(self, playlist_id: PlaylistId) -> None:
        """Delete a playlist."""
        stmt = delete(PlaylistModel).where(PlaylistModel.id == str(playlist_id))
        result = await self.session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise EntityNotFoundException("Playlist", playlist_id)

    @staticmethod
    def _to_entity(model: PlaylistModel) -> Playlist:
        return Playlist(
            id=PlaylistId.from_string(model.id),
            name=model.name,
            user_id=model.user_id,
            created_at=ensure_utc_aware(model.created_at),
            updated_at=ensure_utc_aware(model.updated_at),
        )


class TrackRepository(ITrackRepository):
    """SQLAlchemy implementation of Track repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, track: Track) -> None:
        """Add a new track."""
        self.session.add(
            TrackModel(
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
        )
        await self.session.flush()

    async def get_by_id(self, track_id: TrackId) -> Track | None:
        """Get a track by ID."""
        model = await self.session.get(TrackModel, str(track_id))
        return self._to_entity(model) if model else None

    async def get_by_ids(self, track_ids: list[TrackId]) -> dict[TrackId, Track]:
        """Get several tracks in one query."""
        if not track_ids:
            return {}
        stmt = select(TrackModel).where(
            TrackModel.id.in_([str(track_id) for track_id in track_ids])
        )
        result = await self.session.execute(stmt)
        tracks = [self._to_entity(model) for model in result.scalars().all()]
        return {track.id: track for track in tracks}

    async def list_tracks(
        self,
        genre: Genre | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Track]:
        """List tracks, newest first."""
        stmt = self._filtered(select(TrackModel), genre, search)
        stmt = (
            stmt.order_by(TrackModel.created_at.desc(), TrackModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def count_tracks(
        self, genre: Genre | None = None, search: str | None = None
    ) -> int:
        """Count tracks matching the filters."""
        stmt = self._filtered(select(func.count(TrackModel.id)), genre, search)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    def _filtered(
        stmt: Select, genre: Genre | None, search: str | None  # type: ignore[type-arg]
    ) -> Select:  # type: ignore[type-arg]
        if genre is not None:
            stmt = stmt.where(TrackModel.genre == genre.value)
        if search:
            needle = search.strip().lower()
            stmt = stmt.where(
                or_(
                    func.lower(TrackModel.title).contains(needle, autoescape=True),
                    func.lower(TrackModel.artist).contains(needle, autoescape=True),
                )
            )
        return stmt

    @staticmethod
    def _to_entity(model: TrackModel) -> Track:
        return Track(
            id=TrackId.from_string(model.id),
            title=model.title,
            artist=model.artist,
            genre=Genre(model.genre),
            duration=model.duration,
            audio_url=model.audio_url,
            youtube_url=model.youtube_url,
            spotify_url=model.spotify_url,
            created_at=ensure_utc_aware(model.created_at),
        )


class SubmissionRepository(ISubmissionRepository):
    """SQLAlchemy implementation of TrackSubmission repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, submission: TrackSubmission) -> None:
        """Add a new submission."""
        self.session.add(
            TrackSubmissionModel(
                id=str(submission.id),
                title=submission.title,
                artist=submission.artist,
                genre=submission.genre.value,
                duration=submission.duration,
                description=submission.description,
                youtube_url=submission.youtube_url,
                spotify_url=submission.spotify_url,
                submitted_by=submission.submitted_by,
                status=submission.status.value,
                admin_notes=submission.admin_notes,
                created_at=submission.created_at,
                updated_at=submission.updated_at,
            )
        )
        await self.session.flush()

    async def get_by_id(self, submission_id: SubmissionId) -> TrackSubmission | None:
        """Get a submission by ID."""
        model = await self.session.get(TrackSubmissionModel, str(submission_id))
        return self._to_entity(model) if model else None

    async def list_submissions(
        self,
        status: SubmissionStatus | None = None,
        submitted_by: str | None = None,
    ) -> list[TrackSubmission]:
        """List submissions, newest first."""
        stmt = select(TrackSubmissionModel)
        if status is not None:
            stmt = stmt.where(TrackSubmissionModel.status == status.value)
        if submitted_by is not None:
            stmt = stmt.where(TrackSubmissionModel.submitted_by == submitted_by)
        stmt = stmt.order_by(TrackSubmissionModel.created_at.desc())
        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def update(self, submission: TrackSubmission) -> None:
        """Persist moderation state."""
        model = await self.session.get(TrackSubmissionModel, str(submission.id))
        if not model:
            raise EntityNotFoundException("TrackSubmission", submission.id)
        model.status = submission.status.value
        model.admin_notes = submission.admin_notes
        model.published_track_id = (
            str(submission.published_track_id)
            if submission.published_track_id
            else None
        )
        model.updated_at = submission.updated_at
        await self.session.flush()

    @staticmethod
    def _to_entity(model: TrackSubmissionModel) -> TrackSubmission:
        return TrackSubmission(
            id=SubmissionId.from_string(model.id),
            title=model.title,
            artist=model.artist,
            genre=Genre(model.genre),
            duration=model.duration,
            description=model.description,
            submitted_by=model.submitted_by,
            youtube_url=model.youtube_url,
            spotify_url=model.spotify_url,
            status=SubmissionStatus(model.status),
            admin_notes=model.admin_notes,
            published_track_id=TrackId.from_string(model.published_track_id)
            if model.published_track_id
            else None,
            created_at=ensure_utc_aware(model.created_at),
            updated_at=ensure_utc_aware(model.updated_at),
        )
