"""Domain exceptions."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from focustracks.domain.value_objects.media_urls import MediaUrlError


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message lives on the instance so handlers can read it without
    # parsing str(exception). Never raise this directly - pick a subclass.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateEntityException(DomainException):
    """Raised when trying to create a duplicate entity."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} already exists")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationException(DomainException):
    """Raised when input or entity validation fails.

    `errors` carries every individual problem so a caller can report all of
    them at once instead of fixing one field per round trip.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class MembershipNotFoundException(EntityNotFoundException):
    """Raised on remove/move of a (playlist, track) pair that does not exist.

    Not retryable - it means the client acted on stale playlist state.
    """

    def __init__(self, playlist_id: Any, track_id: Any) -> None:
        super().__init__("PlaylistMembership", f"{playlist_id}/{track_id}")
        self.message = f"Track {track_id} is not in playlist {playlist_id}"
        self.args = (self.message,)
        self.playlist_id = playlist_id
        self.track_id = track_id


class DuplicateMembershipException(DuplicateEntityException):
    """Raised when adding a track that is already in the playlist.

    A logical conflict, not a transient fault: callers must not retry.
    """

    def __init__(self, playlist_id: Any, track_id: Any) -> None:
        super().__init__("PlaylistMembership", f"{playlist_id}/{track_id}")
        self.message = f"Track {track_id} is already in playlist {playlist_id}"
        self.args = (self.message,)
        self.playlist_id = playlist_id
        self.track_id = track_id


class NoValidMediaUrlException(ValidationException):
    """Raised when none of the supplied media URL fields yields a playable URL.

    The normalizer itself never raises; this is produced by
    NormalizationResult.raise_for_errors() at the request boundary.
    """

    def __init__(
        self,
        url_errors: "list[MediaUrlError]",
        other_errors: list[str] | None = None,
    ) -> None:
        super().__init__(
            "No valid media URL provided",
            errors=[*(other_errors or []), *(error.message for error in url_errors)],
        )
        self.url_errors = url_errors


class ConfigurationError(DomainException):
    """Application misconfiguration detected at startup (unwritable database path)."""


class AuthenticationError(DomainException):
    """Caller identity is missing.

    HTTP Status: 401
    """


class AuthorizationError(DomainException):
    """Caller is authenticated but not allowed to perform this action.

    HTTP Status: 403
    """


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "DomainException",
    "DuplicateEntityException",
    "DuplicateMembershipException",
    "EntityNotFoundException",
    "MembershipNotFoundException",
    "NoValidMediaUrlException",
    "ValidationException",
]
