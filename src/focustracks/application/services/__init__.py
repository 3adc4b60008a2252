"""Application services - catalog, moderation and playlist use cases."""

from focustracks.application.services.membership_service import (
    PlaylistMembershipManager,
)
from focustracks.application.services.playlist_service import (
    PlaylistDetail,
    PlaylistEntry,
    PlaylistService,
)
from focustracks.application.services.playlist_transactions import (
    MembershipTransactionRunner,
    PlaylistLockRegistry,
    PlaylistWriteContext,
)
from focustracks.application.services.submission_service import SubmissionService
from focustracks.application.services.track_service import TrackPage, TrackService

__all__ = [
    "MembershipTransactionRunner",
    "PlaylistDetail",
    "PlaylistEntry",
    "PlaylistLockRegistry",
    "PlaylistMembershipManager",
    "PlaylistService",
    "PlaylistWriteContext",
    "SubmissionService",
    "TrackPage",
    "TrackService",
]
