"""Tests for track metadata rules."""

import pytest

from focustracks.domain.value_objects import (
    ALL_GENRES,
    MAX_DURATION_SECONDS,
    Genre,
    parse_genre_filter,
    validate_duration,
    validate_track_metadata,
)


class TestValidateDuration:
    """Duration is a positive number of seconds, at most 24 hours."""

    @pytest.mark.parametrize("duration", [1, 180, 2.5, MAX_DURATION_SECONDS])
    def test_valid(self, duration: float) -> None:
        assert validate_duration(duration) is None

    @pytest.mark.parametrize(
        ("duration", "message"),
        [
            (0, "Duration must be positive"),
            (-5, "Duration must be positive"),
            (MAX_DURATION_SECONDS + 1, "Duration cannot exceed 24 hours"),
            ("180", "Duration must be a number"),
            (None, "Duration must be a number"),
            (True, "Duration must be a number"),
            (float("nan"), "Duration must be a number"),
        ],
    )
    def test_invalid(self, duration: object, message: str) -> None:
        assert validate_duration(duration) == message


class TestValidateTrackMetadata:
    """All problems are collected in one pass."""

    def test_valid_metadata(self) -> None:
        assert validate_track_metadata("Deep Focus", "Lofi Lab", "Ambient", 180) == []

    def test_genre_enum_is_accepted(self) -> None:
        assert validate_track_metadata("T", "A", Genre.JAZZ, 60) == []

    def test_collects_every_error(self) -> None:
        errors = validate_track_metadata("", None, "Rock", 0)

        assert errors == [
            "Title is required and must be a string",
            "Artist is required and must be a string",
            "Genre must be one of: Ambient, Classical, Electronic, Jazz, Other",
            "Duration must be positive",
        ]

    def test_blank_and_overlong_text(self) -> None:
        errors = validate_track_metadata("   ", "x" * 256, "Other", 60)

        assert errors == [
            "Title cannot be empty",
            "Artist cannot exceed 255 characters",
        ]

    def test_genre_is_case_sensitive(self) -> None:
        assert validate_track_metadata("T", "A", "ambient", 60) == [
            "Genre must be one of: Ambient, Classical, Electronic, Jazz, Other"
        ]


class TestParseGenreFilter:
    """The genre picker's "All" entry means no filter."""

    @pytest.mark.parametrize("value", [None, "", "  ", ALL_GENRES, "all", " ALL "])
    def test_no_filter(self, value: str | None) -> None:
        assert parse_genre_filter(value) is None

    def test_known_genre(self) -> None:
        assert parse_genre_filter("Jazz") is Genre.JAZZ

    def test_unknown_genre(self) -> None:
        with pytest.raises(ValueError, match="Genre must be All or one of: Ambient"):
            parse_genre_filter("Rock")
