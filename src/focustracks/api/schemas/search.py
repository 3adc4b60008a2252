"""API schemas for catalog and playlist search."""

from pydantic import BaseModel, Field

from focustracks.api.schemas.playlists import PlaylistResponse
from focustracks.api.schemas.tracks import TrackResponse
from focustracks.application.services.search_service import SearchResults


class SearchPagination(BaseModel):
    """Paging info; total counts every searched kind together."""

    total: int
    limit: int
    offset: int
    has_more: bool


class SearchResponse(BaseModel):
    """Search hits. A list is null when its kind was not searched."""

    tracks: list[TrackResponse] | None = Field(
        default=None, description="Matching tracks (title or artist)"
    )
    playlists: list[PlaylistResponse] | None = Field(
        default=None, description="Caller's playlists whose name matches"
    )
    pagination: SearchPagination

    @classmethod
    def from_results(cls, results: SearchResults) -> "SearchResponse":
        return cls(
            tracks=(
                [TrackResponse.from_entity(t) for t in results.tracks]
                if results.tracks is not None
                else None
            ),
            playlists=(
                [PlaylistResponse.from_entity(p) for p in results.playlists]
                if results.playlists is not None
                else None
            ),
            pagination=SearchPagination(
                total=results.total,
                limit=results.limit,
                offset=results.offset,
                has_more=results.has_more,
            ),
        )
