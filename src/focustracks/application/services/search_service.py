"""Search across the catalog and the caller's playlists."""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from focustracks.domain.entities import Playlist, Track
from focustracks.domain.exceptions import ValidationException
from focustracks.domain.value_objects import Genre
from focustracks.infrastructure.persistence.repositories import (
    PlaylistRepository,
    TrackRepository,
)

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 255
MAX_SEARCH_LIMIT = 100


class SearchScope(str, Enum):
    """What a search looks at."""

    TRACKS = "tracks"
    PLAYLISTS = "playlists"
    ALL = "all"

    @property
    def includes_tracks(self) -> bool:
        return self in (SearchScope.TRACKS, SearchScope.ALL)

    @property
    def includes_playlists(self) -> bool:
        return self in (SearchScope.PLAYLISTS, SearchScope.ALL)


@dataclass
class SearchResults:
    """One page of search hits.

    tracks / playlists stay None when the scope excluded them, so callers can tell
    "not searched" from "no hits". total sums the matches of every searched kind.
    """

    limit: int
    offset: int
    total: int = 0
    tracks: list[Track] | None = None
    playlists: list[Playlist] | None = None

    @property
    def has_more(self) -> bool:
        return self.total > self.offset + self.limit


class SearchService:
    """Case-insensitive substring search over tracks and the user's playlists."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize search service.

        Args:
            session: Database session
        """
        self._tracks = TrackRepository(session)
        self._playlists = PlaylistRepository(session)

    # Hey future me - limit and offset apply to each kind separately, just like a
    # second query would. So with scope=all a page can hold up to 2*limit rows, and
    # has_more compares the COMBINED total against offset+limit.
    async def search(
        self,
        user_id: str,
        query: str,
        scope: SearchScope = SearchScope.ALL,
        genre: Genre | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> SearchResults:
        """Search track titles/artists and playlist names.

        Args:
            user_id: Caller; only their own playlists are searched
            query: Text to look for (1-255 characters)
            scope: tracks, playlists or all
            genre: Narrows track hits; ignored for playlists
            limit: Page size per kind (1-100)
            offset: Rows to skip per kind

        Raises:
            ValidationException: If the query or paging values are out of range
        """
        needle = (query or "").strip()
        if not needle:
            raise ValidationException("Search query is required")
        if len(needle) > MAX_QUERY_LENGTH:
            raise ValidationException(
                f"Search query cannot exceed {MAX_QUERY_LENGTH} characters"
            )
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            raise ValidationException(
                f"Limit must be between 1 and {MAX_SEARCH_LIMIT}"
            )
        if offset < 0:
            raise ValidationException("Offset cannot be negative")

        results = SearchResults(limit=limit, offset=offset)

        if scope.includes_tracks:
            results.tracks = await self._tracks.list_tracks(
                genre=genre, search=needle, limit=limit, offset=offset
            )
            results.total += await self._tracks.count_tracks(genre=genre, search=needle)

        if scope.includes_playlists:
            results.playlists = await self._playlists.search(
                user_id, needle, limit=limit, offset=offset
            )
            results.total += await self._playlists.count_search(user_id, needle)

        logger.debug(
            "search.completed",
            extra={
                "scope": scope.value,
                "total": results.total,
                "tracks": len(results.tracks or []),
                "playlists": len(results.playlists or []),
            },
        )
        return results
