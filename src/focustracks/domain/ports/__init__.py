"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod

from focustracks.domain.entities import (
    Playlist,
    PlaylistMembership,
    Track,
    TrackSubmission,
)
from focustracks.domain.value_objects import (
    Genre,
    MembershipId,
    PlaylistId,
    SubmissionId,
    SubmissionStatus,
    TrackId,
)


# Hey future me - the membership manager only needs these six primitives. Ordering
# math stays in the domain, so keep SQL out of here; the in-memory store implements
# the same port.
class IPlaylistMembershipRepository(ABC):
    """Persistence primitives for playlist memberships."""

    @abstractmethod
    async def lock_playlist(self, playlist_id: PlaylistId) -> None:
        """Serialize writers on this playlist until the current transaction ends.

        Raises:
            EntityNotFoundException: If the playlist does not exist
        """

    @abstractmethod
    async def list_for_playlist(
        self, playlist_id: PlaylistId
    ) -> list[PlaylistMembership]:
        """Get all memberships of a playlist ordered by position."""

    @abstractmethod
    async def insert(self, membership: PlaylistMembership) -> PlaylistMembership:
        """Insert a membership.

        Raises:
            DuplicateMembershipException: If (playlist_id, track_id) already exists
        """

    @abstractmethod
    async def delete(self, playlist_id: PlaylistId, track_id: TrackId) -> None:
        """Delete a membership.

        Raises:
            MembershipNotFoundException: If the pair does not exist
        """

    @abstractmethod
    async def update_position(self, membership_id: MembershipId, position: int) -> None:
        """Set the position of one membership."""

    @abstractmethod
    async def delete_all_for_playlist(self, playlist_id: PlaylistId) -> int:
        """Delete every membership of a playlist. Returns the number deleted."""


class IPlaylistRepository(ABC):
    """Repository interface for Playlist entities."""

    @abstractmethod
    async def add(self, playlist: Playlist) -> None:
        """Add a new playlist."""

    @abstractmethod
    async def get_by_id(self, playlist_id: PlaylistId) -> Playlist | None:
        """Get a playlist by ID."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[Playlist]:
        """List a user's playlists, newest first."""

    @abstractmethod
    async def search(
        self, user_id: str, query: str, limit: int = 20, offset: int = 0
    ) -> list[Playlist]:
        """Search a user's playlists by name, case-insensitively, newest first."""

    @abstractmethod
    async def count_search(self, user_id: str, query: str) -> int:
        """Count the playlists search() would match across all pages."""

    @abstractmethod
    async def update(self, playlist: Playlist) -> None:
        """Update an existing playlist."""

    @abstractmethod
    async def delete(self, playlist_id: PlaylistId) -> None:
        """Delete a playlist row (memberships must already be gone)."""


class ITrackRepository(ABC):
    """Repository interface for catalog tracks."""

    @abstractmethod
    async def add(self, track: Track) -> None:
        """Add a new track."""

    @abstractmethod
    async def get_by_id(self, track_id: TrackId) -> Track | None:
        """Get a track by ID."""

    @abstractmethod
    async def get_by_ids(self, track_ids: list[TrackId]) -> dict[TrackId, Track]:
        """Get several tracks at once, keyed by ID. Missing IDs are simply absent."""

    @abstractmethod
    async def list_tracks(
        self,
        genre: Genre | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Track]:
        """List tracks, newest first.

        Args:
            genre: Only tracks of this genre
            search: Case-insensitive substring of title or artist
            limit: Page size
            offset: Rows to skip
        """

    @abstractmethod
    async def count_tracks(
        self, genre: Genre | None = None, search: str | None = None
    ) -> int:
        """Count tracks matching the same filters as list_tracks."""


class ISubmissionRepository(ABC):
    """Repository interface for track submissions."""

    @abstractmethod
    async def add(self, submission: TrackSubmission) -> None:
        """Add a new submission."""

    @abstractmethod
    async def get_by_id(self, submission_id: SubmissionId) -> TrackSubmission | None:
        """Get a submission by ID."""

    @abstractmethod
    async def list_submissions(
        self,
        status: SubmissionStatus | None = None,
        submitted_by: str | None = None,
    ) -> list[TrackSubmission]:
        """List submissions, newest first, optionally filtered."""

    @abstractmethod
    async def update(self, submission: TrackSubmission) -> None:
        """Persist status, notes and publication of a submission."""


__all__ = [
    "IPlaylistMembershipRepository",
    "IPlaylistRepository",
    "ISubmissionRepository",
    "ITrackRepository",
]
