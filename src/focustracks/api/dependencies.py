"""Dependency injection for API endpoints."""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import TypeVar, cast

from fastapi import Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from focustracks.application.services.playlist_service import PlaylistService
from focustracks.application.services.playlist_transactions import (
    MembershipTransactionRunner,
)
from focustracks.application.services.search_service import SearchService
from focustracks.application.services.submission_service import SubmissionService
from focustracks.application.services.track_service import TrackService
from focustracks.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ValidationException,
)
from focustracks.domain.value_objects import (
    Genre,
    PlaylistId,
    SubmissionId,
    TrackId,
    UserRole,
    parse_genre_filter,
)
from focustracks.infrastructure.integrations.youtube_oembed_client import (
    YouTubeOEmbedClient,
)
from focustracks.infrastructure.persistence.database import Database

logger = logging.getLogger(__name__)

IdT = TypeVar("IdT", PlaylistId, TrackId, SubmissionId)


@dataclass(frozen=True)
class CurrentUser:
    """Caller identity forwarded by the upstream identity provider."""

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


def get_database(request: Request) -> Database:
    """Get the Database created by the lifespan."""
    return cast(Database, request.app.state.db)


# Hey future me, one session per request, committed when the endpoint returns and rolled
# back when it raises. Playlist endpoints do NOT use this - see PlaylistService for why.
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get a request-scoped database session."""
    db = get_database(request)
    async with db.session_scope() as session:
        yield session


# Listen, authentication happens upstream (gateway / identity provider). We only read the
# headers it forwards. No header, no identity: 401. Anything we don't recognise as a role
# is treated as a plain user, never as admin.
def get_current_user(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> CurrentUser:
    """Resolve the caller from X-User-Id / X-User-Role.

    Raises:
        AuthenticationError: If X-User-Id is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError("Authentication required")
    try:
        role = UserRole((x_user_role or UserRole.USER.value).strip().lower())
    except ValueError:
        logger.warning("Unknown role header ignored", extra={"role": x_user_role})
        role = UserRole.USER
    return CurrentUser(user_id=x_user_id.strip(), role=role)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require the admin role.

    Raises:
        AuthorizationError: If the caller is not an admin
    """
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user


def get_membership_runner(request: Request) -> MembershipTransactionRunner:
    """Get the process-wide membership transaction runner."""
    return cast(MembershipTransactionRunner, request.app.state.membership_runner)


def get_youtube_client(request: Request) -> YouTubeOEmbedClient:
    """Get the shared YouTube oEmbed client."""
    return cast(YouTubeOEmbedClient, request.app.state.youtube_client)


def get_playlist_service(
    db: Database = Depends(get_database),
    runner: MembershipTransactionRunner = Depends(get_membership_runner),
) -> PlaylistService:
    """Get playlist service instance."""
    return PlaylistService(db, runner)


def get_track_service(
    session: AsyncSession = Depends(get_db_session),
    youtube_client: YouTubeOEmbedClient = Depends(get_youtube_client),
) -> TrackService:
    """Get track service instance."""
    return TrackService(session, youtube_client)


def get_search_service(
    session: AsyncSession = Depends(get_db_session),
) -> SearchService:
    """Get search service instance."""
    return SearchService(session)


def get_submission_service(
    session: AsyncSession = Depends(get_db_session),
) -> SubmissionService:
    """Get submission service instance."""
    return SubmissionService(session)


def parse_id(id_type: type[IdT], value: str, label: str) -> IdT:
    """Parse a path identifier.

    Raises:
        HTTPException: 400 if value is not a UUID
    """
    try:
        return id_type.from_string(value)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID: {value}",
        ) from e


def get_genre_filter(
    genre: str | None = Query(None, description="Genre to filter by; All means any"),
) -> Genre | None:
    """Resolve the genre query parameter.

    Raises:
        ValidationException: 422 if the genre is unknown
    """
    try:
        return parse_genre_filter(genre)
    except ValueError as e:
        raise ValidationException(str(e)) from e
