"""Integration tests for the submission and moderation endpoints."""

from typing import Any

from fastapi.testclient import TestClient

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}
ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


def submit(client: TestClient, headers: dict[str, str], **overrides: Any) -> Any:
    payload: dict[str, Any] = {
        "title": "Forest Rain",
        "artist": "Field Recordings",
        "genre": "Ambient",
        "duration": 1200,
        "description": "Steady rain, no thunder, good for reading",
        "spotify_url": "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=x",
    }
    payload.update(overrides)
    return client.post("/api/submissions", json=payload, headers=headers)


class TestSubmissions:
    def test_submit_stores_canonical_url(self, client: TestClient) -> None:
        response = submit(client, ALICE)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["submitted_by"] == "alice"
        assert body["spotify_url"] == (
            "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"
        )

    def test_invalid_submission_lists_every_problem(self, client: TestClient) -> None:
        response = submit(client, ALICE, description="short", spotify_url="nope")

        assert response.status_code == 422
        assert response.json()["errors"] == [
            "Description must be at least 10 characters",
            "Invalid Spotify URL: nope",
        ]

    def test_users_see_only_their_own(self, client: TestClient) -> None:
        submit(client, ALICE)
        submit(client, BOB)

        own = client.get("/api/submissions", headers=ALICE).json()
        queue = client.get("/api/submissions", headers=ADMIN).json()

        assert [s["submitted_by"] for s in own] == ["alice"]
        assert len(queue) == 2


class TestModeration:
    def test_approval_publishes_to_catalog(self, client: TestClient) -> None:
        submission = submit(client, ALICE).json()

        reviewed = client.patch(
            f"/api/submissions/{submission['id']}",
            json={"status": "approved", "admin_notes": "Lovely"},
            headers=ADMIN,
        )

        assert reviewed.status_code == 200
        track_id = reviewed.json()["published_track_id"]
        assert track_id is not None

        track = client.get(f"/api/tracks/{track_id}", headers=ALICE).json()
        assert track["title"] == "Forest Rain"
        assert track["audio_url"] == submission["spotify_url"]

        pending = client.get(
            "/api/submissions", params={"status": "pending"}, headers=ADMIN
        ).json()
        assert pending == []

    def test_reapproval_does_not_publish_twice(self, client: TestClient) -> None:
        submission = submit(client, ALICE).json()
        url = f"/api/submissions/{submission['id']}"

        for status in ("approved", "rejected", "approved"):
            client.patch(url, json={"status": status}, headers=ADMIN)

        catalog = client.get("/api/tracks", headers=ALICE).json()
        assert catalog["total"] == 1

    def test_only_admins_review(self, client: TestClient) -> None:
        submission = submit(client, ALICE).json()

        response = client.patch(
            f"/api/submissions/{submission['id']}",
            json={"status": "approved"},
            headers=ALICE,
        )

        assert response.status_code == 403

    def test_unknown_status_is_422(self, client: TestClient) -> None:
        submission = submit(client, ALICE).json()

        response = client.patch(
            f"/api/submissions/{submission['id']}",
            json={"status": "maybe"},
            headers=ADMIN,
        )

        assert response.status_code == 422

    def test_missing_submission(self, client: TestClient) -> None:
        response = client.patch(
            "/api/submissions/00000000-0000-4000-8000-000000000000",
            json={"status": "approved"},
            headers=ADMIN,
        )
        assert response.status_code == 404
