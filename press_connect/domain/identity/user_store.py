"""Postgres-backed user rows."""

import asyncpg
from loguru import logger

from press_connect.domain.utils.idgen import new_user_id
from press_connect.schemas import UserRecord
from press_connect.shared.timeutil import utc_now
from press_connect.storage.postgres import PostgresManager
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

_USER_COLUMNS = "user_id, username, email, password_hash, is_active, created_at, updated_at"


def duplicate_user(errmesg: str = "User already exists") -> AppError:
    return AppError(
        errcode=AppErrorCode.E_DUPLICATE_USER,
        errmesg=errmesg,
        status_code=HttpStatusCode.CONFLICT,
    )


def _duplicate_message(exc: asyncpg.UniqueViolationError) -> str:
    constraint = getattr(exc, "constraint_name", "") or ""
    if "email" in constraint:
        return "Email already exists"
    if "username" in constraint:
        return "Username already exists"
    return "User already exists"


class UserStore:
    """Lookups ignore deactivated users."""

    def __init__(self, db: PostgresManager):
        self.db = db

    async def get_by_username(self, username: str) -> UserRecord | None:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"SELECT {_USER_COLUMNS} FROM users WHERE username = $1 AND is_active = true",
                username,
            )
        return UserRecord.from_record(row) if row else None

    async def get_by_email(self, email: str) -> UserRecord | None:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"SELECT {_USER_COLUMNS} FROM users WHERE email = $1 AND is_active = true",
                email,
            )
        return UserRecord.from_record(row) if row else None

    async def get_by_id(self, user_id: str) -> UserRecord | None:
        async with self.db.session() as client:
            row = await client.fetchrow(
                f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = $1 AND is_active = true",
                user_id,
            )
        return UserRecord.from_record(row) if row else None

    async def create(self, username: str, email: str, password_hash: str) -> UserRecord:
        now = utc_now()
        try:
            async with self.db.session() as client:
                row = await client.fetchrow(
                    f"""
                    INSERT INTO users (user_id, username, email, password_hash, is_active, created_at, updated_at)
                    VALUES ($1, $2, $3, $4, true, $5, $5)
                    RETURNING {_USER_COLUMNS}
                    """,
                    new_user_id(),
                    username,
                    email,
                    password_hash,
                    now,
                )
        except asyncpg.UniqueViolationError as exc:
            logger.info("User insert rejected by unique constraint: {}", exc.constraint_name)
            raise duplicate_user(_duplicate_message(exc)) from exc

        return UserRecord.from_record(row)  # type: ignore[arg-type]

    async def deactivate(self, user_id: str) -> bool:
        async with self.db.session() as client:
            status = await client.execute(
                "UPDATE users SET is_active = false, updated_at = $2 WHERE user_id = $1 AND is_active = true",
                user_id,
                utc_now(),
            )
        # asyncpg returns the command tag, e.g. "UPDATE 1"
        return status.endswith(" 1")
