import asyncio
import inspect
from contextvars import ContextVar
from typing import Any

import asyncpg
from asyncpg import Connection
from asyncpg.transaction import Transaction
from loguru import logger

from press_connect.app_config import AppSettings
from press_connect.config import hide_password_in_connection_string
from press_connect.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

_registered_logger_connections: set[int] = set()
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)
_query_context: ContextVar[dict[str, str] | None] = ContextVar("_pc_query_context", default=None)


def _connection_query_logger(record) -> None:
    """Log executed queries using loguru without assuming record internals."""
    try:
        query = getattr(record, "query", None)
        elapsed = getattr(record, "elapsed", None)
        exception = getattr(record, "exception", None)

        ctx = _query_context.get()

        parts = ["SQL: {}", query]
        if elapsed is not None:
            parts[0] += " | elapsed={}"
            parts.append(elapsed)
        if exception:
            parts[0] += " | exception={}"
            parts.append(exception)
        if ctx and ctx.get("call_site"):
            parts[0] += " | caller={}"
            parts.append(ctx["call_site"])

        logger.debug(*parts)
    except Exception as exc:  # pragma: no cover - safeguard against logging errors
        logger.debug("SQL: <unable to log query> ({})", exc)


def database_unavailable(detail: str = "Database temporarily unavailable") -> AppError:
    return AppError(
        errcode=AppErrorCode.E_DATABASE_UNAVAILABLE,
        errmesg=detail,
        status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
    )


class AsyncPGClient:
    """Thin wrapper over an asyncpg connection that tags query logs with the caller."""

    def __init__(self, conn: Connection):
        self.conn = conn
        self._ensure_query_logger()

    @staticmethod
    def _call_site() -> str:
        """Capture the first non-storage frame to pinpoint the query caller."""
        frame = inspect.currentframe()
        if not frame:
            return "unknown"

        while frame:
            module = frame.f_globals.get("__name__", "")
            if not module.startswith(__name__):
                return f"{module}:{frame.f_code.co_name}:{frame.f_lineno}"
            frame = frame.f_back

        return "unknown"

    async def _run_with_query_context(self, coro_factory):
        token = _query_context.set({"call_site": self._call_site()})
        try:
            return await coro_factory()
        finally:
            _query_context.reset(token)

    async def execute(self, query: str, *args, **kwargs) -> str:
        return await self._run_with_query_context(lambda: self.conn.execute(query, *args, **kwargs))

    async def fetch(self, query: str, *args, **kwargs) -> list[asyncpg.Record]:
        return await self._run_with_query_context(lambda: self.conn.fetch(query, *args, **kwargs))

    async def fetchrow(self, query: str, *args, **kwargs) -> asyncpg.Record | None:
        return await self._run_with_query_context(
            lambda: self.conn.fetchrow(query, *args, **kwargs)
        )

    async def fetchval(self, query: str, *args, **kwargs) -> Any:
        return await self._run_with_query_context(
            lambda: self.conn.fetchval(query, *args, **kwargs)
        )

    def _ensure_query_logger(self) -> None:
        if not hasattr(self.conn, "add_query_logger"):
            return

        conn_id = id(self.conn)
        if conn_id in _registered_logger_connections:
            return

        try:
            self.conn.add_query_logger(_connection_query_logger)
        except Exception as exc:  # pragma: no cover - log but do not break queries
            logger.debug("Failed to attach query logger: {}", exc)
            return

        _registered_logger_connections.add(conn_id)


class PgSession:
    """
    Async context that acquires a pooled connection and returns an AsyncPGClient.

    The connection is released on every exit path. When `transactional` is set
    the body runs inside one transaction that commits on success and rolls back
    on any exception. Driver errors from the body or from commit are reported as
    E_DATABASE_UNAVAILABLE; AppErrors and constraint violations pass through.
    """

    def __init__(self, manager: "PostgresManager", transactional: bool = False):
        self._manager = manager
        self._transactional = transactional
        self._conn: Connection | None = None
        self._tx: Transaction | None = None

    async def __aenter__(self) -> AsyncPGClient:
        self._conn = await self._manager.acquire()
        if self._transactional:
            try:
                self._tx = self._conn.transaction()
                await self._tx.start()
            except BaseException:
                await self._manager.release(self._conn)
                self._conn = None
                raise
        return AsyncPGClient(self._conn)

    async def __aexit__(self, exc_type, exc, tb):
        try:
            if self._tx is not None:
                if exc_type is None:
                    try:
                        await self._tx.commit()
                    except asyncpg.IntegrityConstraintViolationError:
                        raise
                    except _DRIVER_ERRORS as commit_exc:
                        logger.error(
                            "Commit failed: {}: {}", type(commit_exc).__name__, commit_exc
                        )
                        raise database_unavailable() from commit_exc
                else:
                    try:
                        await self._tx.rollback()
                    except _DRIVER_ERRORS as rollback_exc:
                        # The body's exception is the one reported
                        logger.error(
                            "Rollback failed: {}: {}", type(rollback_exc).__name__, rollback_exc
                        )
        finally:
            if self._conn is not None:
                await self._manager.release(self._conn)
                self._conn = None

        # Constraint violations are data outcomes; callers map them to their own errors
        if isinstance(exc, asyncpg.IntegrityConstraintViolationError):
            return False
        if isinstance(exc, _DRIVER_ERRORS):
            logger.error("Database error: {}: {}", type(exc).__name__, exc)
            raise database_unavailable() from exc
        return False


class PostgresManager:
    """
    PostgreSQL pool owner.

    - One bounded asyncpg pool per process (max size from settings)
    - Bounded wait on acquisition, then E_DATABASE_UNAVAILABLE
    - Context-managed session and transaction helpers
    """

    def __init__(self, settings: AppSettings):
        self._dsn = settings.POSTGRES_URL
        self._min_size = settings.DB_POOL_MIN_SIZE
        self._max_size = settings.DB_POOL_MAX_SIZE
        self._acquire_timeout = settings.DB_ACQUIRE_TIMEOUT
        self._idle_timeout = settings.DB_IDLE_TIMEOUT
        self._pool: asyncpg.Pool | None = None
        self._lock = asyncio.Lock()

    @property
    def safe_dsn(self) -> str:
        return hide_password_in_connection_string(self._dsn)

    async def get_pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool

        async with self._lock:
            if self._pool is None:
                logger.info(
                    "Open Postgres pool {} (min={}, max={})",
                    self.safe_dsn,
                    self._min_size,
                    self._max_size,
                )
                try:
                    self._pool = await asyncpg.create_pool(
                        self._dsn,
                        min_size=self._min_size,
                        max_size=self._max_size,
                        max_inactive_connection_lifetime=self._idle_timeout,
                        timeout=self._acquire_timeout,
                    )
                except (OSError, asyncpg.PostgresError, asyncio.TimeoutError) as exc:
                    logger.error("Failed to open Postgres pool {}: {}", self.safe_dsn, exc)
                    raise database_unavailable() from exc
        return self._pool  # type: ignore[return-value]

    async def acquire(self) -> Connection:
        pool = await self.get_pool()
        try:
            return await pool.acquire(timeout=self._acquire_timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Timed out after {}s waiting for a Postgres connection", self._acquire_timeout)
            raise database_unavailable("Database connection timeout") from exc
        except (OSError, asyncpg.PostgresError) as exc:
            logger.error("Failed to acquire Postgres connection: {}", exc)
            raise database_unavailable() from exc

    async def release(self, conn: Connection) -> None:
        if self._pool is None:
            return
        try:
            await self._pool.release(conn)
        except Exception as e:
            logger.warning("Error releasing Postgres connection: {}", e)

    def session(self) -> PgSession:
        return PgSession(self)

    def transaction(self) -> PgSession:
        return PgSession(self, transactional=True)

    async def close(self) -> None:
        async with self._lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            try:
                await pool.close()
                logger.info("Closed Postgres pool {}", self.safe_dsn)
            except Exception as e:
                logger.error("Error closing Postgres pool {}: {}", self.safe_dsn, e)

    async def __aenter__(self) -> "PostgresManager":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
