import secrets
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_validator

from press_connect.config import EnvironConfig


class AppSettings(BaseModel):
    """Typed settings built once at process start and passed to constructors."""

    model_config = ConfigDict(frozen=True)

    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str | None = None

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    API_WORKERS: int = 1
    API_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:8080", "http://localhost:3000"]
    )

    # Session credential signing; required in production
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"
    JWT_TTL_SECONDS: int = 24 * 60 * 60
    PASSWORD_HASH_ROUNDS: int = 12

    # Postgres pool
    POSTGRES_URL: str = "postgresql://localhost:5432/press_connect"
    DB_POOL_MIN_SIZE: int = 1
    DB_POOL_MAX_SIZE: int = 20
    DB_ACQUIRE_TIMEOUT: float = 2.0
    DB_IDLE_TIMEOUT: float = 30.0
    DB_INIT_SCHEMA: bool = True

    # YouTube Live
    YOUTUBE_API_BASE_URL: str = "https://www.googleapis.com/youtube/v3"
    YOUTUBE_WATCH_BASE_URL: str = "https://www.youtube.com/watch"
    YOUTUBE_API_TIMEOUT: float = 30.0

    LOGFIRE_ENABLE: bool = False
    LOGFIRE_TOKEN: str | None = None

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def jwt_secret(self) -> str:
        # Guaranteed non-empty by the validator below
        return self.JWT_SECRET  # type: ignore[return-value]

    @model_validator(mode="before")
    @classmethod
    def _require_jwt_secret(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("JWT_SECRET"):
            return data
        if str(data.get("APP_ENV") or "development").lower() == "production":
            raise ValueError("JWT_SECRET must be set when APP_ENV=production")
        # Each granian worker builds its own settings, so a generated secret differs per worker
        if int(data.get("API_WORKERS") or 1) > 1:
            raise ValueError("JWT_SECRET must be set when API_WORKERS > 1")
        logger.warning(
            "JWT_SECRET not set; using a random per-process secret (tokens will not survive restarts)"
        )
        return {**data, "JWT_SECRET": secrets.token_urlsafe(48)}


def build_app_settings(config: EnvironConfig | None = None) -> AppSettings:
    """Build AppSettings from the layered environment."""
    config = config if config is not None else EnvironConfig()

    cors = config.get_str("API_CORS_ORIGINS")
    extra: dict = {}
    if cors:
        extra["API_CORS_ORIGINS"] = [x.strip() for x in cors.split(",") if x.strip()]

    return AppSettings(
        APP_ENV=config.get_str("APP_ENV", "development"),  # type: ignore[arg-type]
        DEBUG=config.get_bool("DEBUG", False),
        LOG_LEVEL=config.get_str("LOG_LEVEL"),
        API_HOST=config.get_str("API_HOST", "0.0.0.0"),  # type: ignore[arg-type]
        API_PORT=config.get_int("API_PORT", 3000),
        API_WORKERS=config.get_int("API_WORKERS", 1),
        JWT_SECRET=config.get_str("JWT_SECRET"),
        JWT_TTL_SECONDS=config.get_int("JWT_TTL_SECONDS", 24 * 60 * 60),
        PASSWORD_HASH_ROUNDS=config.get_int("PASSWORD_HASH_ROUNDS", 12),
        POSTGRES_URL=config.get_postgres_url(),
        DB_POOL_MIN_SIZE=config.get_int("DB_POOL_MIN_SIZE", 1),
        DB_POOL_MAX_SIZE=config.get_int("DB_POOL_MAX_SIZE", 20),
        DB_ACQUIRE_TIMEOUT=config.get_float("DB_ACQUIRE_TIMEOUT", 2.0),
        DB_IDLE_TIMEOUT=config.get_float("DB_IDLE_TIMEOUT", 30.0),
        DB_INIT_SCHEMA=config.get_bool("DB_INIT_SCHEMA", True),
        YOUTUBE_API_BASE_URL=config.get_str(
            "YOUTUBE_API_BASE_URL", "https://www.googleapis.com/youtube/v3"
        ),  # type: ignore[arg-type]
        YOUTUBE_WATCH_BASE_URL=config.get_str(
            "YOUTUBE_WATCH_BASE_URL", "https://www.youtube.com/watch"
        ),  # type: ignore[arg-type]
        YOUTUBE_API_TIMEOUT=config.get_float("YOUTUBE_API_TIMEOUT", 30.0),
        LOGFIRE_ENABLE=config.get_bool("LOGFIRE_ENABLE", False),
        LOGFIRE_TOKEN=config.get_str("LOGFIRE_TOKEN"),
        **extra,
    )
