"""Track metadata rules shared by track creation and submissions."""

from enum import Enum
from typing import Any

MAX_TEXT_LENGTH = 255
MAX_DURATION_SECONDS = 86_400  # 24 hours

# Genre picker value meaning "no filter". Never stored on a track.
ALL_GENRES = "All"


class Genre(str, Enum):
    """Catalog genres."""

    AMBIENT = "Ambient"
    CLASSICAL = "Classical"
    ELECTRONIC = "Electronic"
    JAZZ = "Jazz"
    OTHER = "Other"

    @classmethod
    def choices(cls) -> list[str]:
        """Genre values in declaration order."""
        return [genre.value for genre in cls]


def validate_duration(duration: Any) -> str | None:
    """Return an error message for a bad duration (seconds), or None if it is fine."""
    # bool is an int subclass - True is not a duration.
    if isinstance(duration, bool) or not isinstance(duration, int | float):
        return "Duration must be a number"
    if duration != duration:  # NaN
        return "Duration must be a number"
    if duration <= 0:
        return "Duration must be positive"
    if duration > MAX_DURATION_SECONDS:
        return "Duration cannot exceed 24 hours"
    return None


def _validate_text(label: str, value: Any) -> str | None:
    if not value or not isinstance(value, str):
        return f"{label} is required and must be a string"
    if not value.strip():
        return f"{label} cannot be empty"
    if len(value) > MAX_TEXT_LENGTH:
        return f"{label} cannot exceed {MAX_TEXT_LENGTH} characters"
    return None


def validate_track_metadata(
    title: Any, artist: Any, genre: Any, duration: Any
) -> list[str]:
    """Collect every metadata problem instead of stopping at the first one.

    Args:
        title: Track title (1..255 chars, not blank)
        artist: Artist name (1..255 chars, not blank)
        genre: One of Genre values
        duration: Length in seconds (0 < duration <= 86400)

    Returns:
        List of error messages, empty when valid
    """
    errors: list[str] = []

    for label, value in (("Title", title), ("Artist", artist)):
        error = _validate_text(label, value)
        if error:
            errors.append(error)

    genre_value = genre.value if isinstance(genre, Genre) else genre
    if genre_value not in Genre.choices():
        errors.append(f"Genre must be one of: {', '.join(Genre.choices())}")

    duration_error = validate_duration(duration)
    if duration_error:
        errors.append(duration_error)

    return errors


def parse_genre_filter(value: str | None) -> Genre | None:
    """Turn a genre query value into a filter.

    Missing, blank and "All" (any case) mean no filter.

    Raises:
        ValueError: If the value names no known genre
    """
    if value is None or not value.strip():
        return None
    value = value.strip()
    if value.lower() == ALL_GENRES.lower():
        return None
    try:
        return Genre(value)
    except ValueError:
        raise ValueError(
            f"Genre must be {ALL_GENRES} or one of: {', '.join(Genre.choices())}"
        ) from None
