"""
Environment configuration loading.

Values are layered from:
1) `env.example` (committed, safe placeholders)
2) `env.local` (optional, MUST NOT be committed)
3) System environment variables (highest priority)

This module only loads raw string values. Typed settings are built once at
process start by `press_connect.app_config.build_app_settings()` and passed
explicitly to the services that need them.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger

PROJECT_ROOT = Path(__file__).parent.parent


class EnvironConfig(Mapping):
    """
    Read-only mapping over the layered environment.

    Unlike a process-wide singleton, each instance snapshots the environment at
    construction time, so tests can build one from an explicit dict.
    """

    def __init__(self, values: Mapping[str, str | None] | None = None, root: Path | None = None):
        self._config: dict[str, str | None] = {}
        if values is not None:
            self._config.update(values)
        else:
            self._load_config(root or PROJECT_ROOT)

    def _load_config(self, root: Path):
        """
        Load configuration from env files and system environment.

        Priority order (later overrides earlier):
        1. env.example (committed placeholders)
        2. env.local (developer-local, not committed)
        3. System environment variables (highest priority)
        """
        example_path = root / "env.example"
        if example_path.exists():
            self._config.update(dotenv_values(example_path))
            logger.info("Loaded environment variables from {}", example_path)

        local_path = root / "env.local"
        if local_path.exists():
            self._config.update(dotenv_values(local_path))
            logger.info("Loaded and overrode environment variables from {}", local_path)

        self._config.update(os.environ)

    def __getitem__(self, key):
        if key not in self._config:
            raise KeyError(f"Configuration key '{key}' not found")
        return self._config[key]

    def __iter__(self):
        return iter(self._config)

    def __len__(self):
        return len(self._config)

    def get_str(self, key: str, default: str | None = None) -> str | None:
        """Stripped string value; blank values fall back to `default`."""
        value = (self._config.get(key) or "").strip()
        return value or default

    def get_int(self, key: str, default: int) -> int:
        raw = self.get_str(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid integer for {}: '{}', defaulting to {}", key, raw, default)
            return default

    def get_float(self, key: str, default: float) -> float:
        raw = self.get_str(key)
        if raw is None:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning("Invalid number for {}: '{}', defaulting to {}", key, raw, default)
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        raw = self.get_str(key)
        if raw is None:
            return default
        return raw.lower() in {"true", "1", "yes", "on"}

    def get_postgres_url(self) -> str:
        """
        Get the Postgres connection URL.

        Priority: POSTGRES_URL, then DB_* parts, then a localhost fallback.
        """
        url = self.get_str("POSTGRES_URL")
        if url:
            return url

        db_name = self.get_str("DB_NAME")
        if db_name:
            user = self.get_str("DB_USER", "postgres")
            password = self.get_str("DB_PASSWORD", "")
            host = self.get_str("DB_HOST", "localhost")
            port = self.get_str("DB_PORT", "5432")
            auth = f"{user}:{password}" if password else user
            return f"postgresql://{auth}@{host}:{port}/{db_name}"

        return "postgresql://localhost:5432/press_connect"


def hide_password_in_connection_string(url: str) -> str:
    try:
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            at = rest.rfind("@")
            if at != -1:
                auth = rest[:at]
                host = rest[at + 1:]
                if ":" in auth:
                    user, pwd = auth.split(":", 1)
                    if user and pwd:
                        return f"{proto}://{user}:***@{host}"
        return url
    except Exception:
        return url
