"""Identity service: registration, password login, and bearer session tokens."""

from datetime import timedelta
from typing import Any, Protocol

import jwt
from loguru import logger
from pydantic import BaseModel

from press_connect.app_config import AppSettings
from press_connect.schemas import UserIdentity, UserRecord
from press_connect.shared.timeutil import utc_now
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .passwords import hash_password_async, verify_password_async
from .user_store import duplicate_user

MIN_PASSWORD_LENGTH = 6
REQUIRED_CLAIMS = ("user_id", "username", "email", "iat", "exp")


class UserStoreProtocol(Protocol):
    async def get_by_username(self, username: str) -> UserRecord | None: ...

    async def get_by_email(self, email: str) -> UserRecord | None: ...

    async def get_by_id(self, user_id: str) -> UserRecord | None: ...

    async def create(self, username: str, email: str, password_hash: str) -> UserRecord: ...

    async def deactivate(self, user_id: str) -> bool: ...


class SessionClaims(BaseModel):
    """Decoded bearer-token claims; the authenticated caller."""

    user_id: str
    username: str
    email: str
    iat: int
    exp: int


class AuthResult(BaseModel):
    user: UserIdentity
    token: str


def invalid_credentials() -> AppError:
    # Same message for unknown user and wrong password
    return AppError(
        errcode=AppErrorCode.E_INVALID_CREDENTIALS,
        errmesg="Invalid credentials",
        status_code=HttpStatusCode.UNAUTHORIZED,
    )


def validation_error(errmesg: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_VALIDATION,
        errmesg=errmesg,
        status_code=HttpStatusCode.BAD_REQUEST,
    )


class IdentityService:
    def __init__(self, settings: AppSettings, user_store: UserStoreProtocol):
        self.settings = settings
        self.users = user_store

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        """
        Create a user and issue a session token.

        Raises:
            AppError(E_VALIDATION): empty field or password shorter than 6 characters
            AppError(E_DUPLICATE_USER): username taken (checked first) or email taken
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username or not email or not password:
            raise validation_error("Username, email, and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise validation_error(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )

        if await self.users.get_by_username(username):
            raise duplicate_user("Username already exists")
        if await self.users.get_by_email(email):
            raise duplicate_user("Email already exists")

        password_hash = await hash_password_async(password, self.settings.PASSWORD_HASH_ROUNDS)
        # A concurrent register can still win the race; the store maps that to E_DUPLICATE_USER
        record = await self.users.create(username, email, password_hash)
        logger.info("Registered user {} ({})", record.user_id, record.username)

        user = record.to_identity()
        return AuthResult(user=user, token=self.issue_token(user.user_id, user.username, user.email))

    async def authenticate(self, identifier: str, password: str) -> AuthResult:
        """Log in by username or email."""
        identifier = (identifier or "").strip()
        if not identifier or not password:
            raise validation_error("Username and password are required")

        record = await self.users.get_by_username(identifier)
        if record is None:
            record = await self.users.get_by_email(identifier)

        rounds = self.settings.PASSWORD_HASH_ROUNDS
        if record is None:
            await verify_password_async(password, None, rounds)
            logger.info("Login failed: unknown identifier")
            raise invalid_credentials()

        if not await verify_password_async(password, record.password_hash, rounds):
            logger.info("Login failed: bad password for {}", record.user_id)
            raise invalid_credentials()

        user = record.to_identity()
        return AuthResult(user=user, token=self.issue_token(user.user_id, user.username, user.email))

    def issue_token(self, user_id: str, username: str, email: str) -> str:
        now = utc_now()
        payload = {
            "user_id": user_id,
            "username": username,
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(seconds=self.settings.JWT_TTL_SECONDS)).timestamp()),
        }
        return jwt.encode(payload, self.settings.jwt_secret, algorithm=self.settings.JWT_ALGORITHM)

    def verify_token(self, token: str | None) -> SessionClaims | None:
        """Decode and check a bearer token. Never raises; any failure is None."""
        if not token:
            return None
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.JWT_ALGORITHM],
                options={"require": list(REQUIRED_CLAIMS)},
            )
            return SessionClaims.model_validate(payload)
        except jwt.PyJWTError as e:
            logger.debug("Rejected session token: {}", e)
            return None
        except ValueError as e:
            # pydantic ValidationError subclasses ValueError
            logger.debug("Rejected session token claims: {}", e)
            return None

    async def deactivate_user(self, user_id: str) -> bool:
        deactivated = await self.users.deactivate(user_id)
        if deactivated:
            logger.info("Deactivated user {}", user_id)
        return deactivated
