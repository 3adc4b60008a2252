"""Tests for PlaylistMembershipManager against the in-memory store."""

import logging
import random

import pytest

from focustracks.application.services.membership_service import (
    PlaylistMembershipManager,
)
from focustracks.domain.entities import PlaylistMembership
from focustracks.domain.exceptions import (
    DuplicateMembershipException,
    MembershipNotFoundException,
    ValidationException,
)
from focustracks.domain.value_objects import PlaylistId, TrackId
from focustracks.infrastructure.persistence.memory import (
    InMemoryPlaylistMembershipRepository,
)


@pytest.fixture
def store() -> InMemoryPlaylistMembershipRepository:
    return InMemoryPlaylistMembershipRepository()


@pytest.fixture
def manager(store: InMemoryPlaylistMembershipRepository) -> PlaylistMembershipManager:
    return PlaylistMembershipManager(store)


@pytest.fixture
def playlist_id() -> PlaylistId:
    return PlaylistId.generate()


def assert_dense(
    store: InMemoryPlaylistMembershipRepository, playlist_id: PlaylistId
) -> None:
    positions = [position for _, position in store.positions(playlist_id)]
    assert positions == list(range(1, len(positions) + 1))


def track_order(
    store: InMemoryPlaylistMembershipRepository, playlist_id: PlaylistId
) -> list[TrackId]:
    return [track_id for track_id, _ in store.positions(playlist_id)]


class TestAddTrack:
    async def test_appends_in_order(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        tracks = [TrackId.generate() for _ in range(3)]
        added = [await manager.add_track(playlist_id, t) for t in tracks]

        assert [m.position for m in added] == [1, 2, 3]
        assert track_order(store, playlist_id) == tracks

    async def test_duplicate_is_rejected_and_count_unchanged(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        track = TrackId.generate()
        await manager.add_track(playlist_id, track)
        await manager.add_track(playlist_id, TrackId.generate())

        with pytest.raises(DuplicateMembershipException):
            await manager.add_track(playlist_id, track)

        assert len(store.positions(playlist_id)) == 2
        assert_dense(store, playlist_id)

    async def test_same_track_in_two_playlists(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
    ) -> None:
        track = TrackId.generate()
        first, second = PlaylistId.generate(), PlaylistId.generate()

        await manager.add_track(first, track)
        membership = await manager.add_track(second, track)

        assert membership.position == 1

    async def test_duplicate_logged_as_warning(
        self,
        manager: PlaylistMembershipManager,
        playlist_id: PlaylistId,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        track = TrackId.generate()
        await manager.add_track(playlist_id, track)

        with caplog.at_level(logging.INFO), pytest.raises(DuplicateMembershipException):
            await manager.add_track(playlist_id, track)

        failed = [
            r for r in caplog.records if r.getMessage() == "playlist.add_track.failed"
        ]
        assert len(failed) == 1
        assert failed[0].levelno == logging.WARNING
        assert not failed[0].exc_info


class TestRemoveTrack:
    async def test_closes_gap(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        a, b, c, d = (TrackId.generate() for _ in range(4))
        for track in (a, b, c, d):
            await manager.add_track(playlist_id, track)

        await manager.remove_track(playlist_id, b)

        assert store.positions(playlist_id) == [(a, 1), (c, 2), (d, 3)]

    async def test_remove_then_add_goes_to_end(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        a, b, c = (TrackId.generate() for _ in range(3))
        for track in (a, b, c):
            await manager.add_track(playlist_id, track)

        await manager.remove_track(playlist_id, a)
        membership = await manager.add_track(playlist_id, a)

        assert membership.position == 3
        assert track_order(store, playlist_id) == [b, c, a]

    async def test_missing_membership(
        self, manager: PlaylistMembershipManager, playlist_id: PlaylistId
    ) -> None:
        await manager.add_track(playlist_id, TrackId.generate())

        with pytest.raises(MembershipNotFoundException):
            await manager.remove_track(playlist_id, TrackId.generate())


class TestMoveTrack:
    async def test_add_move_remove_scenario(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        a, b, c = (TrackId.generate() for _ in range(3))
        for track in (a, b, c):
            await manager.add_track(playlist_id, track)

        reordered = await manager.move_track(playlist_id, c, 1)

        assert [(m.track_id, m.position) for m in reordered] == [(c, 1), (a, 2), (b, 3)]
        assert store.positions(playlist_id) == [(c, 1), (a, 2), (b, 3)]

        await manager.remove_track(playlist_id, a)

        assert store.positions(playlist_id) == [(c, 1), (b, 2)]

    async def test_noop_move_changes_nothing(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        tracks = [TrackId.generate() for _ in range(4)]
        for track in tracks:
            await manager.add_track(playlist_id, track)
        before = store.positions(playlist_id)

        await manager.move_track(playlist_id, tracks[2], 3)

        assert store.positions(playlist_id) == before

    async def test_beyond_end_moves_to_last(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
    ) -> None:
        a, b, c = (TrackId.generate() for _ in range(3))
        for track in (a, b, c):
            await manager.add_track(playlist_id, track)

        await manager.move_track(playlist_id, a, 42)

        assert store.positions(playlist_id) == [(b, 1), (c, 2), (a, 3)]

    @pytest.mark.parametrize("position", [0, -3, True])
    async def test_invalid_position(
        self,
        manager: PlaylistMembershipManager,
        playlist_id: PlaylistId,
        position: int,
    ) -> None:
        track = TrackId.generate()
        await manager.add_track(playlist_id, track)

        with pytest.raises(ValidationException):
            await manager.move_track(playlist_id, track, position)

    async def test_missing_membership(
        self, manager: PlaylistMembershipManager, playlist_id: PlaylistId
    ) -> None:
        with pytest.raises(MembershipNotFoundException):
            await manager.move_track(playlist_id, TrackId.generate(), 1)

    async def test_repairs_gaps_before_moving(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
        playlist_id: PlaylistId,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        a, b, c = (TrackId.generate() for _ in range(3))
        for track, position in ((a, 2), (b, 5), (c, 9)):
            await store.insert(PlaylistMembership.create(playlist_id, track, position))

        with caplog.at_level(logging.WARNING):
            await manager.move_track(playlist_id, c, 1)

        assert store.positions(playlist_id) == [(c, 1), (a, 2), (b, 3)]
        assert "playlist.positions_repaired" in caplog.messages


class TestRemovePlaylist:
    async def test_removes_only_that_playlist(
        self,
        manager: PlaylistMembershipManager,
        store: InMemoryPlaylistMembershipRepository,
    ) -> None:
        doomed, kept = PlaylistId.generate(), PlaylistId.generate()
        for _ in range(3):
            await manager.add_track(doomed, TrackId.generate())
        await manager.add_track(kept, TrackId.generate())

        removed = await manager.remove_playlist(doomed)

        assert removed == 3
        assert store.positions(doomed) == []
        assert len(store.positions(kept)) == 1


@pytest.mark.parametrize("seed", range(10))
async def test_random_sequences_keep_positions_dense(
    manager: PlaylistMembershipManager,
    store: InMemoryPlaylistMembershipRepository,
    playlist_id: PlaylistId,
    seed: int,
) -> None:
    rng = random.Random(seed)
    present: list[TrackId] = []

    for _ in range(40):
        action = rng.choice(["add", "add", "remove", "move", "move", "duplicate"])
        if action == "add" or not present:
            track = TrackId.generate()
            await manager.add_track(playlist_id, track)
            present.append(track)
        elif action == "remove":
            track = present.pop(rng.randrange(len(present)))
            await manager.remove_track(playlist_id, track)
        elif action == "duplicate":
            with pytest.raises(DuplicateMembershipException):
                await manager.add_track(playlist_id, rng.choice(present))
        else:
            before = sorted(map(str, track_order(store, playlist_id)))
            await manager.move_track(
                playlist_id, rng.choice(present), rng.randint(1, len(present) + 2)
            )
            assert sorted(map(str, track_order(store, playlist_id))) == before

        assert_dense(store, playlist_id)
        assert len(store.positions(playlist_id)) == len(present)
