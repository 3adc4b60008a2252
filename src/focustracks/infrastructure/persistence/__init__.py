"""Infrastructure persistence layer."""

from .database import Database
from .memory import InMemoryPlaylistMembershipRepository
from .models import (
    Base,
    PlaylistMembershipModel,
    PlaylistModel,
    TrackModel,
    TrackSubmissionModel,
)
from .repositories import (
    PlaylistMembershipRepository,
    PlaylistRepository,
    SubmissionRepository,
    TrackRepository,
)
from .retry import (
    DatabaseLockMetrics,
    execute_with_retry,
    is_lock_error,
    with_db_retry,
)

# write_scopes is not re-exported: it imports the application layer, which imports
# this package.

__all__ = [
    "Base",
    "Database",
    "DatabaseLockMetrics",
    "InMemoryPlaylistMembershipRepository",
    "PlaylistMembershipModel",
    "PlaylistMembershipRepository",
    "PlaylistModel",
    "PlaylistRepository",
    "SubmissionRepository",
    "TrackModel",
    "TrackRepository",
    "TrackSubmissionModel",
    "execute_with_retry",
    "is_lock_error",
    "with_db_retry",
]
