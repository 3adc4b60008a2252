"""Playlist membership entity and the dense-position ordering rules.

Hey future me - positions inside one playlist are ALWAYS exactly 1..N. No gaps, no
duplicates, no zero. Clients render a playlist by sorting on position and nothing else,
so every mutation below has to leave the playlist dense again.

The planners here are pure: they take the current memberships of ONE playlist and
return {membership_id: new_position} for the rows that change. The manager writes
those through the repository. Keeping the math storage-free means the shift rules
can be hammered with randomized sequences in tests without a database.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from focustracks.domain.value_objects import MembershipId, PlaylistId, TrackId


@dataclass
class PlaylistMembership:
    """One track inside one playlist at a 1-based position."""

    id: MembershipId
    playlist_id: PlaylistId
    track_id: TrackId
    position: int
    added_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate membership data."""
        if self.position < 1:
            raise ValueError("Membership position must be positive")

    @classmethod
    def create(
        cls, playlist_id: PlaylistId, track_id: TrackId, position: int
    ) -> "PlaylistMembership":
        """Create a membership with a fresh random ID."""
        return cls(
            id=MembershipId.generate(),
            playlist_id=playlist_id,
            track_id=track_id,
            position=position,
        )


def sort_by_position(
    memberships: Iterable[PlaylistMembership],
) -> list[PlaylistMembership]:
    """Sort by (playlist, position). Stable, so ties keep their incoming order."""
    return sorted(memberships, key=lambda m: (str(m.playlist_id), m.position))


def is_dense(memberships: Sequence[PlaylistMembership]) -> bool:
    """Check the 1..N invariant for memberships of a single playlist."""
    return sorted(m.position for m in memberships) == list(
        range(1, len(memberships) + 1)
    )


def next_position(memberships: Sequence[PlaylistMembership]) -> int:
    """Position for an appended track: current max + 1, or 1 for an empty playlist."""
    return max((m.position for m in memberships), default=0) + 1


def plan_renumber(
    memberships: Sequence[PlaylistMembership],
) -> dict[MembershipId, int]:
    """Close gaps: positions become 1..N keeping the relative order.

    Returns only the memberships whose position actually changes.
    """
    changes: dict[MembershipId, int] = {}
    for new_position, membership in enumerate(sort_by_position(memberships), start=1):
        if membership.position != new_position:
            changes[membership.id] = new_position
    return changes


def plan_removal(
    memberships: Sequence[PlaylistMembership], removed: PlaylistMembership
) -> dict[MembershipId, int]:
    """Renumber what is left after `removed` is deleted."""
    remaining = [m for m in memberships if m.id != removed.id]
    return plan_renumber(remaining)


def clamp_position(requested: int, count: int) -> int:
    """Clamp a requested 1-based position into 1..count.

    Raises:
        ValueError: If requested is not a positive integer
    """
    if isinstance(requested, bool) or not isinstance(requested, int) or requested < 1:
        raise ValueError("Position must be a positive integer")
    return min(requested, max(count, 1))


def plan_move(
    memberships: Sequence[PlaylistMembership],
    moved: PlaylistMembership,
    new_position: int,
) -> dict[MembershipId, int]:
    """Compute the position changes for moving one track.

    Items strictly after the old slot up to and including the new slot shift down by
    one (old < p <= new). Items from the new slot up to but excluding the old slot shift
    up by one (new <= p < old). Mixing up those half-open bounds double-shifts or skips
    an item - the tests cover both directions.

    new_position beyond the playlist length is clamped to the last slot.

    Args:
        memberships: All memberships of the playlist (dense)
        moved: The membership being moved (must be in memberships)
        new_position: Requested 1-based target position

    Returns:
        {membership_id: new_position} for every membership that changes,
        including the moved one. Empty dict for a no-op move.
    """
    target = clamp_position(new_position, len(memberships))
    old = moved.position
    if target == old:
        return {}

    changes: dict[MembershipId, int] = {moved.id: target}
    for membership in memberships:
        if membership.id == moved.id:
            continue
        if old < membership.position <= target:
            changes[membership.id] = membership.position - 1
        elif target <= membership.position < old:
            changes[membership.id] = membership.position + 1
    return changes


def apply_positions(
    memberships: Iterable[PlaylistMembership], changes: Mapping[MembershipId, int]
) -> list[PlaylistMembership]:
    """Apply planned positions in place and return the memberships sorted."""
    result = list(memberships)
    for membership in result:
        if membership.id in changes:
            membership.position = changes[membership.id]
    return sort_by_position(result)
