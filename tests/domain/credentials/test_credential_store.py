"""Tests for CredentialStore validity and replace-on-put semantics."""

from datetime import datetime, timedelta, timezone

import pytest

from press_connect.domain.credentials import CredentialStore, is_valid
from press_connect.schemas import ProviderCredential


def make_credential(expires_at: datetime | None) -> ProviderCredential:
    now = datetime.now(timezone.utc)
    return ProviderCredential(
        credential_id="oc_1",
        user_id="us_1",
        provider="youtube",
        access_token="token",
        expires_at=expires_at,
        created_at=now,
        updated_at=now,
    )


class TestIsValid:
    def test_none_is_invalid(self):
        assert is_valid(None) is False

    def test_no_expiry_is_valid(self):
        assert is_valid(make_credential(None)) is True

    def test_past_expiry_is_invalid(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        assert is_valid(make_credential(past)) is False

    def test_future_expiry_is_valid(self):
        future = datetime.now(timezone.utc) + timedelta(hours=1)
        assert is_valid(make_credential(future)) is True

    def test_expiry_boundary_is_invalid(self):
        expires_at = datetime(2030, 1, 1, tzinfo=timezone.utc)
        credential = make_credential(expires_at)

        assert is_valid(credential, now=expires_at - timedelta(microseconds=1)) is True
        assert is_valid(credential, now=expires_at) is False

    def test_naive_now_treated_as_utc(self):
        expires_at = datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert is_valid(make_credential(expires_at), now=datetime(2029, 12, 31)) is True

    def test_static_method_matches_function(self):
        assert CredentialStore.is_valid(None) is False
        assert CredentialStore.is_valid(make_credential(None)) is True


class _RecordingClient:
    def __init__(self, log: list[str]):
        self.log = log

    async def execute(self, query: str, *args) -> str:
        self.log.append(query.split()[0].upper())
        return "DELETE 1"

    async def fetchrow(self, query: str, *args):
        self.log.append(query.split()[0].upper())
        credential_id, user_id, provider, access_token, refresh_token, expires_at, scope, now = args
        return {
            "credential_id": credential_id,
            "user_id": user_id,
            "provider": provider,
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "Bearer",
            "expires_at": expires_at,
            "scope": scope,
            "created_at": now,
            "updated_at": now,
        }


class _RecordingTx:
    def __init__(self, log: list[str]):
        self.log = log

    async def __aenter__(self):
        self.log.append("BEGIN")
        return _RecordingClient(self.log)

    async def __aexit__(self, exc_type, exc, tb):
        self.log.append("COMMIT" if exc_type is None else "ROLLBACK")
        return False


class _RecordingDb:
    def __init__(self):
        self.log: list[str] = []

    def transaction(self):
        return _RecordingTx(self.log)

    def session(self):
        raise AssertionError("put must run inside a transaction")


class TestPut:
    async def test_delete_and_insert_share_one_transaction(self):
        # Arrange
        db = _RecordingDb()
        store = CredentialStore(db)  # type: ignore[arg-type]

        # Act
        credential = await store.put("us_1", "youtube", "ya29.a", ttl_seconds=3600)

        # Assert
        assert db.log == ["BEGIN", "DELETE", "INSERT", "COMMIT"]
        assert credential.access_token == "ya29.a"
        assert credential.expires_at is not None
        assert credential.credential_id.startswith("oc_")

    async def test_put_without_ttl_never_expires(self):
        store = CredentialStore(_RecordingDb())  # type: ignore[arg-type]

        credential = await store.put("us_1", "youtube", "ya29.a")

        assert credential.expires_at is None
        assert is_valid(credential) is True


@pytest.mark.integration
class TestCredentialStorePostgres:
    async def _make_user(self, pg_manager) -> str:
        async with pg_manager.session() as client:
            await client.execute(
                "INSERT INTO users (user_id, username, email, password_hash) VALUES ($1, $2, $3, $4)",
                "us_cred",
                "cred",
                "cred@example.com",
                "x",
            )
        return "us_cred"

    async def test_put_twice_leaves_one_row(self, pg_manager):
        # Arrange
        user_id = await self._make_user(pg_manager)
        store = CredentialStore(pg_manager)

        # Act
        await store.put(user_id, "youtube", "first", refresh_token="r1")
        await store.put(user_id, "youtube", "second", ttl_seconds=60)

        # Assert
        async with pg_manager.session() as client:
            count = await client.fetchval(
                "SELECT count(*) FROM oauth_tokens WHERE user_id = $1 AND provider = $2",
                user_id,
                "youtube",
            )
        assert count == 1
        stored = await store.get(user_id, "youtube")
        assert stored is not None
        assert stored.access_token == "second"
        assert stored.refresh_token is None
        assert stored.expires_at is not None

    async def test_get_missing_returns_none(self, pg_manager):
        store = CredentialStore(pg_manager)
        assert await store.get("us_missing", "youtube") is None
