"""Serialized, all-or-nothing execution of playlist membership writes.

Listen up - add/remove/move are read-modify-write: read every membership of the playlist,
compute new positions, write them back. Two of those interleaving on the same playlist
produce duplicate positions. So every write goes through run(), which

1. takes a per-playlist asyncio.Lock (single writer per playlist inside this process),
2. opens ONE transaction via the scope factory,
3. lets the manager row-lock the playlist (SELECT ... FOR UPDATE, covers other processes
   on PostgreSQL), read, compute and write,
4. commits - or rolls back everything if anything raised.

If SQLite reports "database is locked", steps 2-4 are retried as a whole with backoff. The
asyncio lock stays held across retries so nobody from this process sneaks in between.
Domain errors (duplicate, not found) are never retried.
"""

import asyncio
import logging
import time
import weakref
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import TypeVar

from focustracks.application.services.membership_service import (
    PlaylistMembershipManager,
)
from focustracks.domain.entities import PlaylistMembership
from focustracks.domain.exceptions import EntityNotFoundException
from focustracks.domain.ports import (
    IPlaylistMembershipRepository,
    IPlaylistRepository,
    ITrackRepository,
)
from focustracks.domain.value_objects import PlaylistId, TrackId
from focustracks.infrastructure.observability.logger_template import (
    log_slow_operation,
)
from focustracks.infrastructure.persistence.retry import execute_with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

SLOW_WRITE_THRESHOLD_MS = 250


@dataclass
class PlaylistWriteContext:
    """Repositories sharing one transaction for a single playlist write.

    playlists/tracks are optional so the manager can run against a bare
    membership store (in-memory tests).
    """

    memberships: IPlaylistMembershipRepository
    playlists: IPlaylistRepository | None = None
    tracks: ITrackRepository | None = None

    @property
    def manager(self) -> PlaylistMembershipManager:
        return PlaylistMembershipManager(self.memberships)


WriteScopeFactory = Callable[[], AbstractAsyncContextManager[PlaylistWriteContext]]
# Runs first inside the transaction, e.g. an ownership check. Raises to abort.
WriteGuard = Callable[[PlaylistWriteContext], Awaitable[None]]


class PlaylistLockRegistry:
    """One asyncio.Lock per playlist ID, created on demand.

    Weak values: a lock disappears once nobody holds or waits on it, so the
    registry does not grow with every playlist ever touched.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[PlaylistId, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, playlist_id: PlaylistId) -> asyncio.Lock:
        lock = self._locks.get(playlist_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[playlist_id] = lock
        return lock


class MembershipTransactionRunner:
    """Runs membership manager operations one playlist-writer at a time.

    Create ONE runner per process (it lives on app.state) - the locks only
    serialize callers that share the registry.
    """

    def __init__(
        self,
        scope_factory: WriteScopeFactory,
        locks: PlaylistLockRegistry | None = None,
        max_attempts: int = 3,
        initial_delay: float = 0.2,
    ) -> None:
        """Initialize the runner.

        Args:
            scope_factory: Returns an async context manager that opens a transaction
                and yields the repositories bound to it. Commits on clean exit.
            locks: Lock registry (shared between runners only in tests)
            max_attempts: Whole-unit attempts on database lock errors
            initial_delay: First backoff delay in seconds
        """
        self._scope_factory = scope_factory
        self._locks = locks or PlaylistLockRegistry()
        self._max_attempts = max_attempts
        self._initial_delay = initial_delay

    async def run(
        self,
        playlist_id: PlaylistId,
        operation_name: str,
        operation: Callable[[PlaylistWriteContext], Awaitable[T]],
    ) -> T:
        """Execute operation inside the playlist's lock and a fresh transaction.

        operation may be invoked more than once (lock retries); it must not keep
        state between invocations.
        """

        async def attempt() -> T:
            async with self._scope_factory() as context:
                return await operation(context)

        async with self._locks.lock_for(playlist_id):
            started = time.monotonic()
            result = await execute_with_retry(
                attempt,
                max_attempts=self._max_attempts,
                initial_delay=self._initial_delay,
                operation_name=operation_name,
            )
            log_slow_operation(
                logger,
                operation_name,
                int((time.monotonic() - started) * 1000),
                threshold_ms=SLOW_WRITE_THRESHOLD_MS,
                playlist_id=str(playlist_id),
            )
            return result

    async def add_track(
        self,
        playlist_id: PlaylistId,
        track_id: TrackId,
        guard: WriteGuard | None = None,
    ) -> PlaylistMembership:
        """Append a catalog track to the playlist."""

        async def operation(context: PlaylistWriteContext) -> PlaylistMembership:
            if guard is not None:
                await guard(context)
            if context.tracks is not None:
                if await context.tracks.get_by_id(track_id) is None:
                    raise EntityNotFoundException("Track", track_id)
            return await context.manager.add_track(playlist_id, track_id)

        return await self.run(playlist_id, "playlist.add_track", operation)

    async def remove_track(
        self,
        playlist_id: PlaylistId,
        track_id: TrackId,
        guard: WriteGuard | None = None,
    ) -> None:
        """Remove a track and close the gap."""

        async def operation(context: PlaylistWriteContext) -> None:
            if guard is not None:
                await guard(context)
            await context.manager.remove_track(playlist_id, track_id)

        await self.run(playlist_id, "playlist.remove_track", operation)

    async def move_track(
        self,
        playlist_id: PlaylistId,
        track_id: TrackId,
        new_position: int,
        guard: WriteGuard | None = None,
    ) -> list[PlaylistMembership]:
        """Move a track; returns the reordered playlist."""

        async def operation(
            context: PlaylistWriteContext,
        ) -> list[PlaylistMembership]:
            if guard is not None:
                await guard(context)
            return await context.manager.move_track(playlist_id, track_id, new_position)

        return await self.run(playlist_id, "playlist.move_track", operation)

    async def remove_playlist(
        self, playlist_id: PlaylistId, guard: WriteGuard | None = None
    ) -> int:
        """Delete all memberships and, when a playlist repository is bound, the playlist row.

        Both deletes share one transaction.
        """

        async def operation(context: PlaylistWriteContext) -> int:
            if guard is not None:
                await guard(context)
            removed = await context.manager.remove_playlist(playlist_id)
            if context.playlists is not None:
                await context.playlists.delete(playlist_id)
            return removed

        return await self.run(playlist_id, "playlist.remove", operation)
