"""API router initialization."""

# Hey future me, this is the API router aggregator. It gets mounted at /api in main.py, so
# these prefixes become /api/tracks, /api/playlists, /api/submissions and /api/search.
# The health router is NOT in here: probes live at /health, outside /api and without auth.

from fastapi import APIRouter

from focustracks.api.routers import playlists, search, submissions, tracks

api_router = APIRouter()

api_router.include_router(tracks.router, prefix="/tracks", tags=["Tracks"])
api_router.include_router(playlists.router, prefix="/playlists", tags=["Playlists"])
api_router.include_router(
    submissions.router, prefix="/submissions", tags=["Submissions"]
)
api_router.include_router(search.router, prefix="/search", tags=["Search"])

__all__ = ["api_router"]
