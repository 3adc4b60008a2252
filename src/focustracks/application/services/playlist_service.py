"""Playlist service: user-facing playlist CRUD plus membership edits.

Hey future me - this service takes the Database, NOT a request session. Membership writes
run in the transaction runner's own short transactions; holding a request-scoped SQLite
read transaction open around them would make the writer wait on ourselves. So every method
here opens its own session_scope() and closes it before returning.

Playlist-row writes (create, rename) own their transaction, so they are retried whole on
SQLite lock errors via with_db_retry. Membership writes get the same from the runner.
"""

import logging
from dataclasses import dataclass

from focustracks.application.services.playlist_transactions import (
    MembershipTransactionRunner,
    PlaylistWriteContext,
    WriteGuard,
)
from focustracks.domain.entities import Playlist, PlaylistMembership, Track
from focustracks.domain.exceptions import EntityNotFoundException, ValidationException
from focustracks.domain.value_objects import PlaylistId, TrackId
from focustracks.infrastructure.persistence.database import Database
from focustracks.infrastructure.persistence.repositories import (
    PlaylistMembershipRepository,
    PlaylistRepository,
    TrackRepository,
)
from focustracks.infrastructure.persistence.retry import with_db_retry

logger = logging.getLogger(__name__)


@dataclass
class PlaylistEntry:
    """A track as it appears in a playlist."""

    membership: PlaylistMembership
    track: Track

    @property
    def position(self) -> int:
        return self.membership.position


@dataclass
class PlaylistDetail:
    """A playlist with its tracks in position order."""

    playlist: Playlist
    entries: list[PlaylistEntry]


def _owned_playlist_guard(user_id: str, playlist_id: PlaylistId) -> WriteGuard:
    # Someone else's playlist is reported exactly like a missing one.
    async def guard(context: PlaylistWriteContext) -> None:
        if context.playlists is None:
            return
        playlist = await context.playlists.get_by_id(playlist_id)
        if playlist is None or not playlist.is_owned_by(user_id):
            raise EntityNotFoundException("Playlist", playlist_id)

    return guard


class PlaylistService:
    """Playlist operations on behalf of one authenticated user."""

    def __init__(self, database: Database, runner: MembershipTransactionRunner) -> None:
        """Initialize playlist service.

        Args:
            database: Database for read and playlist-row transactions
            runner: Process-wide membership transaction runner
        """
        self._db = database
        self._runner = runner

    @with_db_retry(max_attempts=3)
    async def create_playlist(self, user_id: str, name: str) -> Playlist:
        """Create an empty playlist.

        Raises:
            ValidationException: If the name is blank or longer than 100 characters
        """
        try:
            playlist = Playlist(id=PlaylistId.generate(), name=name, user_id=user_id)
        except ValueError as e:
            raise ValidationException(str(e)) from e

        async with self._db.session_scope() as session:
            await PlaylistRepository(session).add(playlist)
        logger.info(
            "playlist.created",
            extra={"playlist_id": str(playlist.id), "user_id": user_id},
        )
        return playlist

    async def list_playlists(self, user_id: str) -> list[Playlist]:
        """List the user's playlists, newest first."""
        async with self._db.session_scope() as session:
            return await PlaylistRepository(session).list_for_user(user_id)

    async def get_playlist(self, user_id: str, playlist_id: PlaylistId) -> PlaylistDetail:
        """Get a playlist with its tracks ordered by position.

        Raises:
            EntityNotFoundException: If the playlist does not exist or is not the user's
        """
        async with self._db.session_scope() as session:
            playlist = await self._get_owned(
                PlaylistRepository(session), user_id, playlist_id
            )
            memberships = await PlaylistMembershipRepository(session).list_for_playlist(
                playlist_id
            )
            tracks = await TrackRepository(session).get_by_ids(
                [m.track_id for m in memberships]
            )

        entries = [
            PlaylistEntry(membership=m, track=tracks[m.track_id])
            for m in memberships
            if m.track_id in tracks
        ]
        return PlaylistDetail(playlist=playlist, entries=entries)

    @with_db_retry(max_attempts=3)
    async def rename_playlist(
        self, user_id: str, playlist_id: PlaylistId, name: str
    ) -> Playlist:
        """Rename a playlist.

        Raises:
            EntityNotFoundException: If the playlist does not exist or is not the user's
            ValidationException: If the new name is invalid
        """
        async with self._db.session_scope() as session:
            repository = PlaylistRepository(session)
            playlist = await self._get_owned(repository, user_id, playlist_id)
            try:
                playlist.rename(name)
            except ValueError as e:
                raise ValidationException(str(e)) from e
            await repository.update(playlist)
        return playlist

    async def delete_playlist(self, user_id: str, playlist_id: PlaylistId) -> int:
        """Delete a playlist and all its memberships in one transaction.

        Returns:
            Number of memberships removed
        """
        removed = await self._runner.remove_playlist(
            playlist_id, guard=_owned_playlist_guard(user_id, playlist_id)
        )
        logger.info(
            "playlist.deleted",
            extra={"playlist_id": str(playlist_id), "memberships_removed": removed},
        )
        return removed

    async def add_track(
        self, user_id: str, playlist_id: PlaylistId, track_id: TrackId
    ) -> PlaylistMembership:
        """Append a track to the user's playlist."""
        return await self._runner.add_track(
            playlist_id, track_id, guard=_owned_playlist_guard(user_id, playlist_id)
        )

    async def remove_track(
        self, user_id: str, playlist_id: PlaylistId, track_id: TrackId
    ) -> None:
        """Remove a track from the user's playlist."""
        await self._runner.remove_track(
            playlist_id, track_id, guard=_owned_playlist_guard(user_id, playlist_id)
        )

    async def move_track(
        self,
        user_id: str,
        playlist_id: PlaylistId,
        track_id: TrackId,
        new_position: int,
    ) -> list[PlaylistMembership]:
        """Move a track inside the user's playlist; returns the new order."""
        return await self._runner.move_track(
            playlist_id,
            track_id,
            new_position,
            guard=_owned_playlist_guard(user_id, playlist_id),
        )

    @staticmethod
    async def _get_owned(
        repository: PlaylistRepository, user_id: str, playlist_id: PlaylistId
    ) -> Playlist:
        playlist = await repository.get_by_id(playlist_id)
        if playlist is None or not playlist.is_owned_by(user_id):
            raise EntityNotFoundException("Playlist", playlist_id)
        return playlist
