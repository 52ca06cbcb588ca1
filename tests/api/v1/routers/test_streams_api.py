"""Router tests through the full app with in-memory services.

The lifespan (database, schema) is not entered: TestClient is used without a
context manager and `app.state.services` is set directly.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from press_connect.app_services import AppServices
from press_connect.domain.identity import IdentityService
from press_connect.domain.live.media import MediaRegistry
from press_connect.domain.live.session import BroadcastOrchestrator
from press_connect.main import create_app
from tests.fixtures.fake_provider import provider_error


@pytest.fixture
def test_app(settings, identity, credential_store, orchestrator, media_registry) -> FastAPI:
    app = create_app(settings)
    app.state.services = AppServices(
        settings=settings,
        identity=identity,
        credentials=credential_store,  # type: ignore[arg-type]
        orchestrator=orchestrator,
        media=media_registry,
    )

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return app


@pytest.fixture
def client(test_app: FastAPI) -> TestClient:
    return TestClient(test_app, raise_server_exceptions=False)


def register(client: TestClient, username: str = "alice") -> dict:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password": "s3cret!"},
    )
    assert response.status_code == 201, response.text
    return response.json()["results"]


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def store_youtube_token(client: TestClient, token: str) -> None:
    response = client.post(
        "/api/v1/auth/oauth/store",
        json={"provider": "youtube", "access_token": "ya29.token", "expires_in": 3600},
        headers=auth_headers(token),
    )
    assert response.status_code == 200, response.text


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["results"]["status"] == "OK"


class TestAuthRoutes:
    def test_register_and_login(self, client: TestClient):
        registered = register(client)

        response = client.post(
            "/api/v1/auth/login", json={"username": "alice@example.com", "password": "s3cret!"}
        )

        assert response.status_code == 200
        body = response.json()["results"]
        assert body["user"]["user_id"] == registered["user"]["user_id"]
        assert "password_hash" not in body["user"]
        assert body["token"]

    def test_duplicate_register(self, client: TestClient):
        register(client)

        response = client.post(
            "/api/v1/auth/register",
            json={"username": "alice", "email": "x@example.com", "password": "s3cret!"},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["errcode"] == "E_DUPLICATE_USER"
        assert body["errmesg"] == "Username already exists"
        assert body["erresid"]

    def test_bad_login(self, client: TestClient):
        register(client)

        response = client.post("/api/v1/auth/login", json={"username": "alice", "password": "nope!!"})

        assert response.status_code == 401
        assert response.json()["errmesg"] == "Invalid credentials"

    def test_schema_violation_is_422(self, client: TestClient):
        response = client.post("/api/v1/auth/register", json={"username": "alice"})

        assert response.status_code == 422
        assert response.json()["errcode"] == "E_INVALID_PARAMS"

    def test_oauth_store_requires_fields(self, client: TestClient):
        token = register(client)["token"]

        response = client.post(
            "/api/v1/auth/oauth/store", json={"provider": "youtube"}, headers=auth_headers(token)
        )

        assert response.status_code == 400
        assert response.json()["errcode"] == "E_VALIDATION"

    def test_oauth_store_requires_auth(self, client: TestClient):
        response = client.post(
            "/api/v1/auth/oauth/store", json={"provider": "youtube", "access_token": "x"}
        )

        assert response.status_code == 401
        assert response.json()["errcode"] == "E_UNAUTHENTICATED"


class TestStreamRoutes:
    def test_requires_bearer_token(self, client: TestClient):
        assert client.get("/api/v1/streams").status_code == 401
        response = client.get("/api/v1/streams", headers=auth_headers("garbage"))
        assert response.status_code == 401
        assert response.json()["errcode"] == "E_UNAUTHENTICATED"

    def test_create_without_youtube_token_requires_reauth(self, client: TestClient, provider):
        token = register(client)["token"]

        response = client.post("/api/v1/streams", json={}, headers=auth_headers(token))

        assert response.status_code == 401
        body = response.json()
        assert body["errcode"] == "E_PROVIDER_REAUTH_REQUIRED"
        assert body["requires_reauth"] is True
        assert provider.total_calls == 0

    def test_full_lifecycle(self, client: TestClient):
        # Arrange
        token = register(client)["token"]
        store_youtube_token(client, token)
        headers = auth_headers(token)

        # Create
        response = client.post(
            "/api/v1/streams", json={"title": "Town hall", "visibility": "unlisted"}, headers=headers
        )
        assert response.status_code == 201, response.text
        created = response.json()["results"]
        assert created["broadcast_url"] == "https://www.youtube.com/watch?v=B1"
        key = created["session_id"]

        # List
        listed = client.get("/api/v1/streams", headers=headers).json()["results"]
        assert listed["count"] == 1
        assert listed["sessions"][0]["session_key"] == key

        # Start
        started = client.patch(f"/api/v1/streams/{key}/start", headers=headers)
        assert started.status_code == 200
        assert started.json()["results"]["status"] == "active"
        assert started.json()["results"]["started_at"] is not None

        # End twice
        for _ in range(2):
            ended = client.post(f"/api/v1/streams/{key}/end", headers=headers)
            assert ended.status_code == 200
            assert ended.json()["results"]["status"] == "ended"

        # Get
        fetched = client.get(f"/api/v1/streams/{key}", headers=headers).json()["results"]
        assert fetched["status"] == "ended"
        assert fetched["ended_at"] is not None

        # Start after end is rejected
        restart = client.patch(f"/api/v1/streams/{key}/start", headers=headers)
        assert restart.status_code == 409
        assert restart.json()["errcode"] == "E_INVALID_STATE_TRANSITION"

        # Delete
        deleted = client.delete(f"/api/v1/streams/{key}", headers=headers)
        assert deleted.status_code == 200
        assert client.get(f"/api/v1/streams/{key}", headers=headers).status_code == 404

    def test_other_user_forbidden(self, client: TestClient):
        owner = register(client, "owner")["token"]
        intruder = register(client, "intruder")["token"]
        store_youtube_token(client, owner)
        key = client.post("/api/v1/streams", json={}, headers=auth_headers(owner)).json()["results"][
            "session_id"
        ]

        response = client.post(f"/api/v1/streams/{key}/end", headers=auth_headers(intruder))

        assert response.status_code == 403
        assert response.json()["errcode"] == "E_FORBIDDEN"

    def test_unknown_stream(self, client: TestClient):
        token = register(client)["token"]

        response = client.get("/api/v1/streams/se_missing", headers=auth_headers(token))

        assert response.status_code == 404
        assert response.json()["errcode"] == "E_SESSION_NOT_FOUND"

    def test_quota_error_is_429(self, client: TestClient, provider):
        token = register(client)["token"]
        store_youtube_token(client, token)
        provider.fail["create_broadcast"] = provider_error(403, "quota exceeded", "quotaExceeded")

        response = client.post("/api/v1/streams", json={}, headers=auth_headers(token))

        assert response.status_code == 429
        assert response.json()["errcode"] == "E_QUOTA_EXCEEDED"

    def test_invalid_visibility_is_422(self, client: TestClient):
        token = register(client)["token"]

        response = client.post(
            "/api/v1/streams", json={"visibility": "everyone"}, headers=auth_headers(token)
        )

        assert response.status_code == 422


class TestMediaRoutes:
    def test_recordings_and_snapshots(self, client: TestClient):
        token = register(client)["token"]
        store_youtube_token(client, token)
        headers = auth_headers(token)
        key = client.post("/api/v1/streams", json={}, headers=headers).json()["results"]["session_id"]

        added = client.post(
            f"/api/v1/streams/{key}/recordings",
            json={"filename": "a.mp4", "file_path": "/rec/a.mp4", "duration": 30},
            headers=headers,
        )
        assert added.status_code == 201
        recordings = client.get(f"/api/v1/streams/{key}/recordings", headers=headers).json()
        assert recordings["results"]["count"] == 1

        snap = client.post(
            f"/api/v1/streams/{key}/snapshots",
            json={"filename": "f.jpg", "file_path": "/snap/f.jpg"},
            headers=headers,
        )
        assert snap.status_code == 201
        snapshots = client.get(f"/api/v1/streams/{key}/snapshots", headers=headers).json()
        assert snapshots["results"]["snapshots"][0]["filename"] == "f.jpg"

    def test_media_on_unknown_stream(self, client: TestClient):
        token = register(client)["token"]

        response = client.get("/api/v1/streams/se_missing/recordings", headers=auth_headers(token))

        assert response.status_code == 404


class TestUnhandledErrors:
    def test_unhandled_exception_hides_internals(self, client: TestClient):
        response = client.get("/boom")

        assert response.status_code == 500
        assert "secret internals" not in response.text
