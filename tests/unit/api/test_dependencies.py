"""Tests for API dependencies and exception handlers."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from focustracks.api.dependencies import (
    CurrentUser,
    get_current_user,
    parse_id,
    require_admin,
)
from focustracks.api.exception_handlers import register_exception_handlers
from focustracks.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateMembershipException,
    MembershipNotFoundException,
    ValidationException,
)
from focustracks.domain.value_objects import (
    PlaylistId,
    RawMediaFields,
    TrackId,
    UserRole,
    normalize,
)


class TestGetCurrentUser:
    """Identity comes from headers forwarded by the gateway."""

    def test_plain_user(self) -> None:
        user = get_current_user(x_user_id=" user-1 ", x_user_role=None)

        assert user == CurrentUser(user_id="user-1", role=UserRole.USER)
        assert not user.is_admin

    def test_admin_role_is_case_insensitive(self) -> None:
        assert get_current_user(x_user_id="a", x_user_role="Admin").is_admin

    def test_unknown_role_is_a_plain_user(self) -> None:
        user = get_current_user(x_user_id="a", x_user_role="superuser")
        assert user.role is UserRole.USER

    @pytest.mark.parametrize("user_id", [None, "", "   "])
    def test_missing_identity(self, user_id: str | None) -> None:
        with pytest.raises(AuthenticationError):
            get_current_user(x_user_id=user_id, x_user_role="admin")


class TestRequireAdmin:
    def test_admin_passes(self) -> None:
        admin = CurrentUser(user_id="a", role=UserRole.ADMIN)
        assert require_admin(admin) is admin

    def test_user_is_forbidden(self) -> None:
        with pytest.raises(AuthorizationError):
            require_admin(CurrentUser(user_id="u", role=UserRole.USER))


class TestParseId:
    def test_valid_uuid(self) -> None:
        playlist_id = PlaylistId.generate()
        assert parse_id(PlaylistId, str(playlist_id), "playlist") == playlist_id

    def test_malformed_id_is_400(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            parse_id(TrackId, "not-a-uuid", "track")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid track ID: not-a-uuid"


class TestExceptionHandlers:
    """Domain errors map to stable status codes and JSON bodies."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = FastAPI()
        register_exception_handlers(app)
        playlist_id, track_id = PlaylistId.generate(), TrackId.generate()

        @app.get("/duplicate")
        async def duplicate():
            raise DuplicateMembershipException(playlist_id, track_id)

        @app.get("/missing")
        async def missing():
            raise MembershipNotFoundException(playlist_id, track_id)

        @app.get("/invalid")
        async def invalid():
            raise ValidationException("Invalid track data", errors=["Bad title"])

        @app.get("/no-url")
        async def no_url():
            normalize(RawMediaFields(youtube_url="bad")).raise_for_errors()

        @app.get("/locked")
        async def locked():
            raise OperationalError("UPDATE", {}, Exception("database is locked"))

        @app.get("/broken")
        async def broken():
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        @app.get("/anonymous")
        async def anonymous():
            raise AuthenticationError("Authentication required")

        return TestClient(app, raise_server_exceptions=False)

    def test_duplicate_is_409(self, client: TestClient) -> None:
        response = client.get("/duplicate")
        assert response.status_code == 409
        assert "already in playlist" in response.json()["detail"]

    def test_missing_membership_is_404(self, client: TestClient) -> None:
        response = client.get("/missing")
        assert response.status_code == 404
        assert "is not in playlist" in response.json()["detail"]

    def test_validation_is_422_with_errors(self, client: TestClient) -> None:
        response = client.get("/invalid")
        assert response.status_code == 422
        assert response.json() == {
            "detail": "Invalid track data",
            "errors": ["Bad title"],
        }

    def test_no_valid_url_lists_fields(self, client: TestClient) -> None:
        response = client.get("/no-url")

        assert response.status_code == 422
        body = response.json()
        assert body["detail"] == "No valid media URL provided"
        assert body["url_errors"] == [
            {
                "field": "youtube_url",
                "code": "invalid_url_format",
                "message": "Invalid YouTube URL: bad",
            }
        ]

    def test_lock_error_is_503_with_retry_after(self, client: TestClient) -> None:
        response = client.get("/locked")
        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"

    def test_other_database_error_is_500(self, client: TestClient) -> None:
        response = client.get("/broken")
        assert response.status_code == 500
        assert response.json() == {"detail": "Database error"}

    def test_authentication_is_401(self, client: TestClient) -> None:
        assert client.get("/anonymous").status_code == 401
