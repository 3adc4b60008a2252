"""Scope factories binding playlist write contexts to a storage backend."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from focustracks.application.services.playlist_transactions import (
    PlaylistWriteContext,
    WriteScopeFactory,
)
from focustracks.domain.ports import IPlaylistMembershipRepository
from focustracks.infrastructure.persistence.database import Database
from focustracks.infrastructure.persistence.repositories import (
    PlaylistMembershipRepository,
    PlaylistRepository,
    TrackRepository,
)


def sqlalchemy_write_scope(database: Database) -> WriteScopeFactory:
    """Each scope is one session_scope(): commit on success, rollback on any error."""

    @asynccontextmanager
    async def scope() -> AsyncIterator[PlaylistWriteContext]:
        async with database.session_scope() as session:
            yield PlaylistWriteContext(
                memberships=PlaylistMembershipRepository(session),
                playlists=PlaylistRepository(session),
                tracks=TrackRepository(session),
            )

    return scope


def memory_write_scope(repository: IPlaylistMembershipRepository) -> WriteScopeFactory:
    """Scope over a shared in-memory store. No rollback: tests only."""

    @asynccontextmanager
    async def scope() -> AsyncIterator[PlaylistWriteContext]:
        yield PlaylistWriteContext(memberships=repository)

    return scope
