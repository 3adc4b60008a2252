"""In-memory membership store.

Used by unit tests and by anything that wants the membership manager without a
database. Every primitive yields to the event loop once, like a real round trip
would, so unserialized concurrent writers actually interleave and races show up.
"""

import asyncio
from dataclasses import replace

from focustracks.domain.entities import PlaylistMembership, sort_by_position
from focustracks.domain.exceptions import (
    DuplicateMembershipException,
    MembershipNotFoundException,
)
from focustracks.domain.ports import IPlaylistMembershipRepository
from focustracks.domain.value_objects import MembershipId, PlaylistId, TrackId


class InMemoryPlaylistMembershipRepository(IPlaylistMembershipRepository):
    """Dict-backed membership store. Hands out copies, never its own rows."""

    def __init__(self) -> None:
        self._rows: dict[MembershipId, PlaylistMembership] = {}

    async def lock_playlist(self, playlist_id: PlaylistId) -> None:
        # Nothing to lock: one process, and the transaction runner holds the asyncio lock.
        await asyncio.sleep(0)

    async def list_for_playlist(
        self, playlist_id: PlaylistId
    ) -> list[PlaylistMembership]:
        await asyncio.sleep(0)
        return sort_by_position(
            replace(m) for m in self._rows.values() if m.playlist_id == playlist_id
        )

    async def insert(self, membership: PlaylistMembership) -> PlaylistMembership:
        await asyncio.sleep(0)
        for existing in self._rows.values():
            if (
                existing.playlist_id == membership.playlist_id
                and existing.track_id == membership.track_id
            ):
                raise DuplicateMembershipException(
                    membership.playlist_id, membership.track_id
                )
        self._rows[membership.id] = replace(membership)
        return membership

    async def delete(self, playlist_id: PlaylistId, track_id: TrackId) -> None:
        await asyncio.sleep(0)
        for membership_id, existing in self._rows.items():
            if existing.playlist_id == playlist_id and existing.track_id == track_id:
                del self._rows[membership_id]
                return
        raise MembershipNotFoundException(playlist_id, track_id)

    async def update_position(self, membership_id: MembershipId, position: int) -> None:
        await asyncio.sleep(0)
        self._rows[membership_id].position = position

    async def delete_all_for_playlist(self, playlist_id: PlaylistId) -> int:
        await asyncio.sleep(0)
        doomed = [mid for mid, m in self._rows.items() if m.playlist_id == playlist_id]
        for membership_id in doomed:
            del self._rows[membership_id]
        return len(doomed)

    def positions(self, playlist_id: PlaylistId) -> list[tuple[TrackId, int]]:
        """Synchronous (track_id, position) view of one playlist, sorted by position."""
        return [
            (m.track_id, m.position)
            for m in sort_by_position(
                m for m in self._rows.values() if m.playlist_id == playlist_id
            )
        ]
