"""Tests for the dense-position ordering rules.

Hey future me - the randomized tests use a seeded random.Random per case, so a failure
always reproduces with the same seed. Each step checks the 1..N invariant.
"""

import random
from collections import Counter

import pytest

from focustracks.domain.entities import (
    PlaylistMembership,
    apply_positions,
    clamp_position,
    is_dense,
    next_position,
    plan_move,
    plan_removal,
    plan_renumber,
    sort_by_position,
)
from focustracks.domain.value_objects import PlaylistId, TrackId

PLAYLIST = PlaylistId.generate()


def build(count: int) -> list[PlaylistMembership]:
    return [
        PlaylistMembership.create(PLAYLIST, TrackId.generate(), position)
        for position in range(1, count + 1)
    ]


def order(memberships: list[PlaylistMembership]) -> list[TrackId]:
    return [m.track_id for m in sort_by_position(memberships)]


def positions(memberships: list[PlaylistMembership]) -> list[int]:
    return [m.position for m in sort_by_position(memberships)]


class TestPlanMove:
    """Shift rules for moving one track."""

    def test_move_forward_shifts_in_between_down(self) -> None:
        memberships = build(5)
        a, b, c, d, e = order(memberships)

        result = apply_positions(memberships, plan_move(memberships, memberships[1], 4))

        assert order(result) == [a, c, d, b, e]
        assert positions(result) == [1, 2, 3, 4, 5]

    def test_move_backward_shifts_in_between_up(self) -> None:
        memberships = build(5)
        a, b, c, d, e = order(memberships)

        result = apply_positions(memberships, plan_move(memberships, memberships[3], 2))

        assert order(result) == [a, d, b, c, e]
        assert positions(result) == [1, 2, 3, 4, 5]

    def test_move_to_first_and_last(self) -> None:
        memberships = build(3)
        a, b, c = order(memberships)

        first = apply_positions(memberships, plan_move(memberships, memberships[2], 1))
        assert order(first) == [c, a, b]

        last = apply_positions(first, plan_move(first, first[0], 3))
        assert order(last) == [a, b, c]

    def test_only_changed_rows_are_planned(self) -> None:
        memberships = build(6)

        changes = plan_move(memberships, memberships[1], 3)

        assert set(changes) == {memberships[1].id, memberships[2].id}
        assert changes == {memberships[1].id: 3, memberships[2].id: 2}

    @pytest.mark.parametrize("current", [1, 3, 5])
    def test_move_to_current_position_is_noop(self, current: int) -> None:
        memberships = build(5)
        before = positions(memberships)

        changes = plan_move(memberships, memberships[current - 1], current)

        assert changes == {}
        assert positions(apply_positions(memberships, changes)) == before

    @pytest.mark.parametrize("requested", [6, 7, 1000])
    def test_beyond_end_is_clamped_to_last(self, requested: int) -> None:
        memberships = build(5)
        moved = memberships[0]

        result = apply_positions(memberships, plan_move(memberships, moved, requested))

        assert order(result)[-1] == moved.track_id
        assert is_dense(result)

    @pytest.mark.parametrize("requested", [0, -1, True, 1.5, "2"])
    def test_rejects_non_positive_or_non_integer(self, requested: object) -> None:
        memberships = build(3)
        with pytest.raises(ValueError):
            plan_move(memberships, memberships[0], requested)  # type: ignore[arg-type]


class TestClampPosition:
    @pytest.mark.parametrize(
        ("requested", "count", "expected"),
        [(1, 3, 1), (3, 3, 3), (4, 3, 3), (99, 1, 1), (1, 0, 1)],
    )
    def test_clamps_into_range(self, requested: int, count: int, expected: int) -> None:
        assert clamp_position(requested, count) == expected


class TestRenumberAndRemoval:
    """Gap closing keeps the relative order."""

    def test_removal_closes_gap(self) -> None:
        memberships = build(4)
        a, b, c, d = order(memberships)

        changes = plan_removal(memberships, memberships[1])
        remaining = [m for m in memberships if m.track_id != b]
        result = apply_positions(remaining, changes)

        assert order(result) == [a, c, d]
        assert positions(result) == [1, 2, 3]

    def test_removing_last_changes_nothing(self) -> None:
        memberships = build(3)
        assert plan_removal(memberships, memberships[2]) == {}

    def test_renumber_repairs_gaps_in_order(self) -> None:
        memberships = [
            PlaylistMembership.create(PLAYLIST, TrackId.generate(), position)
            for position in (2, 5, 9)
        ]
        expected = order(memberships)

        result = apply_positions(memberships, plan_renumber(memberships))

        assert positions(result) == [1, 2, 3]
        assert order(result) == expected

    def test_renumber_of_dense_playlist_is_empty(self) -> None:
        assert plan_renumber(build(4)) == {}


class TestHelpers:
    def test_next_position(self) -> None:
        assert next_position([]) == 1
        assert next_position(build(4)) == 5

    def test_is_dense(self) -> None:
        memberships = build(3)
        assert is_dense(memberships)
        assert is_dense([])
        memberships[2].position = 4
        assert not is_dense(memberships)

    def test_membership_position_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            PlaylistMembership.create(PLAYLIST, TrackId.generate(), 0)


def test_add_move_remove_scenario() -> None:
    """A, B, C added; C moved to 1 gives C, A, B; removing A gives C, B."""
    memberships: list[PlaylistMembership] = []
    tracks = {name: TrackId.generate() for name in "ABC"}
    for name in "ABC":
        memberships.append(
            PlaylistMembership.create(PLAYLIST, tracks[name], next_position(memberships))
        )
    assert positions(memberships) == [1, 2, 3]

    c = next(m for m in memberships if m.track_id == tracks["C"])
    memberships = apply_positions(memberships, plan_move(memberships, c, 1))
    assert order(memberships) == [tracks["C"], tracks["A"], tracks["B"]]
    assert positions(memberships) == [1, 2, 3]

    a = next(m for m in memberships if m.track_id == tracks["A"])
    changes = plan_removal(memberships, a)
    memberships = apply_positions([m for m in memberships if m.id != a.id], changes)
    assert order(memberships) == [tracks["C"], tracks["B"]]
    assert positions(memberships) == [1, 2]


@pytest.mark.parametrize("seed", range(30))
def test_random_operation_sequences_stay_dense(seed: int) -> None:
    rng = random.Random(seed)
    memberships: list[PlaylistMembership] = []
    removed: list[TrackId] = []

    for _ in range(60):
        action = rng.choice(["add", "add", "remove", "move", "move"])

        if action == "add" or not memberships:
            # Re-adding a removed track must land at the end, not its old slot.
            if removed and rng.random() < 0.3:
                track_id = removed.pop()
            else:
                track_id = TrackId.generate()
            membership = PlaylistMembership.create(
                PLAYLIST, track_id, next_position(memberships)
            )
            memberships.append(membership)
            assert sort_by_position(memberships)[-1].track_id == track_id

        elif action == "remove":
            victim = rng.choice(memberships)
            changes = plan_removal(memberships, victim)
            memberships = apply_positions(
                [m for m in memberships if m.id != victim.id], changes
            )
            removed.append(victim.track_id)

        else:
            moved = rng.choice(memberships)
            target = rng.randint(1, len(memberships) + 3)
            tracks_before = Counter(m.track_id for m in memberships)
            old_position = moved.position

            changes = plan_move(memberships, moved, target)
            memberships = apply_positions(memberships, changes)

            assert Counter(m.track_id for m in memberships) == tracks_before
            assert moved.position == min(target, len(memberships))
            if min(target, len(memberships)) == old_position:
                assert changes == {}

        assert is_dense(memberships), f"seed={seed} positions={positions(memberships)}"
