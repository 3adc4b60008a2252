"""Shared fixtures: temporary SQLite database, app client and a track publisher."""

from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from focustracks.config import DatabaseSettings, MembershipSettings, Settings
from focustracks.domain.entities import Playlist, Track
from focustracks.domain.value_objects import (
    Genre,
    PlaylistId,
    RawMediaFields,
    normalize,
)
from focustracks.infrastructure.persistence.database import Database
from focustracks.infrastructure.persistence.repositories import (
    PlaylistRepository,
    TrackRepository,
)
from focustracks.infrastructure.persistence.retry import DatabaseLockMetrics
from focustracks.main import create_app


@pytest.fixture(autouse=True)
def reset_lock_metrics() -> Iterator[None]:
    """Lock metrics are a process-wide singleton."""
    DatabaseLockMetrics.get_instance().reset()
    yield
    DatabaseLockMetrics.get_instance().reset()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database=DatabaseSettings(
            url=f"sqlite+aiosqlite:///{tmp_path / 'focustracks-test.db'}"
        ),
        membership=MembershipSettings(retry_initial_delay=0.01),
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncIterator[Database]:
    """Database with all tables created."""
    db = Database(settings)
    await db.create_tables()
    yield db
    await db.close()


@pytest.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    """One session_scope() for the whole test; committed at teardown."""
    async with database.session_scope() as session:
        yield session


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


# Hey future me - entering TestClient as a context manager runs the lifespan, which
# creates the tables, the membership runner and the oEmbed client on app.state.
@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def publish_track(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Factory publishing a catalog track through the admin API; returns its JSON."""

    def _publish(
        title: str = "Deep Focus",
        artist: str = "Lofi Lab",
        genre: str = "Ambient",
        youtube_url: str | None = "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        spotify_url: str | None = None,
    ) -> dict[str, Any]:
        response = client.post(
            "/api/tracks",
            headers={"X-User-Id": "admin-1", "X-User-Role": "admin"},
            json={
                "title": title,
                "artist": artist,
                "genre": genre,
                "duration": 180,
                "youtube_url": youtube_url,
                "spotify_url": spotify_url,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _publish


@pytest.fixture
def make_track() -> Callable[..., Track]:
    """Factory for valid catalog track entities (YouTube-backed)."""

    def _make(
        title: str = "Deep Focus",
        artist: str = "Lofi Lab",
        genre: Genre = Genre.AMBIENT,
        duration: int = 180,
    ) -> Track:
        media = normalize(
            RawMediaFields(youtube_url="https://youtu.be/dQw4w9WgXcQ")
        ).raise_for_errors()
        return Track.from_media(title, artist, genre, duration, media)

    return _make


@pytest.fixture
def seed_playlist(
    database: Database, make_track: Callable[..., Track]
) -> Callable[..., Any]:
    """Persist a playlist and `track_count` tracks; returns (playlist, tracks)."""

    async def _seed(
        track_count: int = 3, user_id: str = "user-1"
    ) -> tuple[Playlist, list[Track]]:
        playlist = Playlist(id=PlaylistId.generate(), name="Focus", user_id=user_id)
        tracks = [make_track(title=f"Track {n}") for n in range(track_count)]
        async with database.session_scope() as session:
            await PlaylistRepository(session).add(playlist)
            track_repo = TrackRepository(session)
            for track in tracks:
                await track_repo.add(track)
        return playlist, tracks

    return _seed
