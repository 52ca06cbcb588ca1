"""Provider OAuth credentials, one row per (user, provider)."""

from datetime import datetime, timedelta

from loguru import logger

from press_connect.domain.utils.idgen import new_credential_id
from press_connect.schemas import ProviderCredential
from press_connect.shared.timeutil import as_utc, utc_now
from press_connect.storage.postgres import PostgresManager

_CREDENTIAL_COLUMNS = (
    "credential_id, user_id, provider, access_token, refresh_token, token_type, "
    "expires_at, scope, created_at, updated_at"
)


def is_valid(credential: ProviderCredential | None, now: datetime | None = None) -> bool:
    """A credential without expiry never expires; otherwise valid strictly before expires_at."""
    if credential is None:
        return False
    if credential.expires_at is None:
        return True
    now = as_utc(now) if now is not None else utc_now()
    return now < as_utc(credential.expires_at)


class CredentialStore:
    def __init__(self, db: PostgresManager):
        self.db = db

    async def get(self, user_id: str, provider: str) -> ProviderCredential | None:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"SELECT {_CREDENTIAL_COLUMNS} FROM oauth_tokens WHERE user_id = $1 AND provider = $2",
                user_id,
                provider,
            )
        return ProviderCredential.from_record(row) if row else None

    async def put(
        self,
        user_id: str,
        provider: str,
        access_token: str,
        refresh_token: str | None = None,
        ttl_seconds: int | None = None,
        scope: str | None = None,
    ) -> ProviderCredential:
        """Replace the user's credential for `provider`.

        Delete and insert run in one transaction, so concurrent readers see
        either the old row or the new one, never none.
        """
        now = utc_now()
        expires_at = now + timedelta(seconds=ttl_seconds) if ttl_seconds is not None else None

        async with self.db.transaction() as client:
            await client.execute(
                "DELETE FROM oauth_tokens WHERE user_id = $1 AND provider = $2",
                user_id,
                provider,
            )
            row = await client.fetchrow(
                f"""
                INSERT INTO oauth_tokens
                    (credential_id, user_id, provider, access_token, refresh_token,
                     token_type, expires_at, scope, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, 'Bearer', $6, $7, $8, $8)
                RETURNING {_CREDENTIAL_COLUMNS}
                """,
                new_credential_id(),
                user_id,
                provider,
                access_token,
                refresh_token,
                expires_at,
                scope,
                now,
            )

        logger.info("Stored {} credential for user {} (expires_at={})", provider, user_id, expires_at)
        return ProviderCredential.from_record(row)  # type: ignore[arg-type]

    @staticmethod
    def is_valid(credential: ProviderCredential | None, now: datetime | None = None) -> bool:
        return is_valid(credential, now)
