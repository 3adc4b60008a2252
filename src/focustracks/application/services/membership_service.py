"""Playlist membership manager: add, remove and move tracks with dense positions.

Hey future me - this is the only code that writes membership positions. The ordering math
is in domain.entities.playlist_membership (pure, property-tested); this class reads the
playlist's memberships through the repository port, asks the planner what changes, and
writes exactly those rows back.

The manager itself does not serialize anything. It MUST run inside one transaction per
call with writers on the same playlist serialized - MembershipTransactionRunner does that.
Calling it directly with a shared store from concurrent requests is a read-modify-write race.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from focustracks.domain.entities import (
    PlaylistMembership,
    apply_positions,
    is_dense,
    next_position,
    plan_move,
    plan_removal,
    plan_renumber,
)
from focustracks.domain.exceptions import (
    DomainException,
    DuplicateMembershipException,
    MembershipNotFoundException,
    ValidationException,
)
from focustracks.domain.ports import IPlaylistMembershipRepository
from focustracks.domain.value_objects import MembershipId, PlaylistId, TrackId
from focustracks.infrastructure.observability.logger_template import (
    end_operation,
    start_operation,
)

logger = logging.getLogger(__name__)


class PlaylistMembershipManager:
    """Maintains the ordered, gap-free track list of each playlist."""

    def __init__(self, repository: IPlaylistMembershipRepository) -> None:
        self._repository = repository

    @contextmanager
    def _observe(self, operation: str, **context: Any) -> Iterator[None]:
        # Domain rule violations are expected outcomes (stale client, double click) - WARNING.
        # Anything else is a bug or an infrastructure fault - ERROR with traceback.
        start_time, op_id = start_operation(logger, operation, **context)
        try:
            yield
        except DomainException as e:
            end_operation(
                logger,
                operation,
                start_time,
                op_id,
                success=False,
                error=e,
                log_level=logging.WARNING,
                **context,
            )
            raise
        except Exception as e:
            end_operation(
                logger,
                operation,
                start_time,
                op_id,
                success=False,
                error=e,
                log_level=logging.ERROR,
                **context,
            )
            raise
        end_operation(logger, operation, start_time, op_id, **context)

    async def list_tracks(self, playlist_id: PlaylistId) -> list[PlaylistMembership]:
        """Get the playlist's memberships sorted by position."""
        return await self._repository.list_for_playlist(playlist_id)

    async def add_track(
        self, playlist_id: PlaylistId, track_id: TrackId
    ) -> PlaylistMembership:
        """Append a track at position max + 1 (1 for an empty playlist).

        Raises:
            DuplicateMembershipException: If the track is already in the playlist.
                Not retryable.
        """
        with self._observe(
            "playlist.add_track", playlist_id=str(playlist_id), track_id=str(track_id)
        ):
            await self._repository.lock_playlist(playlist_id)
            memberships = await self._repository.list_for_playlist(playlist_id)
            if any(m.track_id == track_id for m in memberships):
                raise DuplicateMembershipException(playlist_id, track_id)

            membership = PlaylistMembership.create(
                playlist_id=playlist_id,
                track_id=track_id,
                position=next_position(memberships),
            )
            return await self._repository.insert(membership)

    async def remove_track(self, playlist_id: PlaylistId, track_id: TrackId) -> None:
        """Delete a membership and renumber the rest to 1..N, keeping their order.

        Raises:
            MembershipNotFoundException: If the track is not in the playlist
        """
        with self._observe(
            "playlist.remove_track", playlist_id=str(playlist_id), track_id=str(track_id)
        ):
            await self._repository.lock_playlist(playlist_id)
            memberships = await self._repository.list_for_playlist(playlist_id)
            removed = self._find(memberships, playlist_id, track_id)

            await self._repository.delete(playlist_id, track_id)
            await self._write_positions(plan_removal(memberships, removed))

    async def move_track(
        self, playlist_id: PlaylistId, track_id: TrackId, new_position: int
    ) -> list[PlaylistMembership]:
        """Move a track to new_position, shifting the tracks in between by one.

        new_position beyond the end is clamped to the last position.

        Returns:
            All memberships of the playlist sorted by their new position

        Raises:
            ValidationException: If new_position is not a positive integer
            MembershipNotFoundException: If the track is not in the playlist
        """
        with self._observe(
            "playlist.move_track",
            playlist_id=str(playlist_id),
            track_id=str(track_id),
            new_position=new_position,
        ):
            if (
                isinstance(new_position, bool)
                or not isinstance(new_position, int)
                or new_position < 1
            ):
                raise ValidationException("Position must be a positive integer")

            await self._repository.lock_playlist(playlist_id)
            memberships = await self._repository.list_for_playlist(playlist_id)
            moved = self._find(memberships, playlist_id, track_id)

            # Rows written before positions were kept dense get repaired first,
            # otherwise the shift rule would carry the gap along.
            if not is_dense(memberships):
                repair = plan_renumber(memberships)
                logger.warning(
                    "playlist.positions_repaired",
                    extra={"playlist_id": str(playlist_id), "rows": len(repair)},
                )
                await self._write_positions(repair)
                memberships = apply_positions(memberships, repair)

            changes = plan_move(memberships, moved, new_position)
            await self._write_positions(changes)
            return apply_positions(memberships, changes)

    async def remove_playlist(self, playlist_id: PlaylistId) -> int:
        """Delete every membership of the playlist. Returns how many were removed."""
        with self._observe("playlist.remove_memberships", playlist_id=str(playlist_id)):
            await self._repository.lock_playlist(playlist_id)
            return await self._repository.delete_all_for_playlist(playlist_id)

    @staticmethod
    def _find(
        memberships: list[PlaylistMembership],
        playlist_id: PlaylistId,
        track_id: TrackId,
    ) -> PlaylistMembership:
        for membership in memberships:
            if membership.track_id == track_id:
                return membership
        raise MembershipNotFoundException(playlist_id, track_id)

    async def _write_positions(self, changes: dict[MembershipId, int]) -> None:
        for membership_id, position in changes.items():
            await self._repository.update_position(membership_id, position)
