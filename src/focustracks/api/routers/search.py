"""Search endpoint over the catalog and the caller's playlists."""

import logging

from fastapi import APIRouter, Depends, Query

from focustracks.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_genre_filter,
    get_search_service,
)
from focustracks.api.schemas.search import SearchResponse
from focustracks.application.services.search_service import (
    MAX_SEARCH_LIMIT,
    SearchScope,
    SearchService,
)
from focustracks.domain.value_objects import Genre

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SearchResponse)
async def search(
    q: str = Query(..., description="Text to find in titles, artists or playlist names"),
    scope: SearchScope = Query(
        SearchScope.ALL, alias="type", description="tracks, playlists or all"
    ),
    genre: Genre | None = Depends(get_genre_filter),
    limit: int = Query(20, description=f"Page size per kind (1-{MAX_SEARCH_LIMIT})"),
    offset: int = Query(0, description="Rows to skip per kind"),
    user: CurrentUser = Depends(get_current_user),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search catalog tracks and the caller's own playlists.

    Playlists of other users never show up, matching GET /playlists.
    """
    results = await service.search(
        user.user_id, q, scope=scope, genre=genre, limit=limit, offset=offset
    )
    return SearchResponse.from_results(results)
