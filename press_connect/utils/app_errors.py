"""Application error type shared by the domain and API layers."""

import inspect
from enum import Enum, IntEnum
from typing import Any
from uuid import uuid4


class HttpStatusCode(IntEnum):
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502


class AppErrorCode(str, Enum):
    E_VALIDATION = "E_VALIDATION"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_UNAUTHENTICATED = "E_UNAUTHENTICATED"
    E_INVALID_CREDENTIALS = "E_INVALID_CREDENTIALS"
    E_FORBIDDEN = "E_FORBIDDEN"
    E_SESSION_NOT_FOUND = "E_SESSION_NOT_FOUND"
    E_DUPLICATE_USER = "E_DUPLICATE_USER"
    E_CONFLICT = "E_CONFLICT"
    E_INVALID_STATE_TRANSITION = "E_INVALID_STATE_TRANSITION"
    E_PROVIDER_REAUTH_REQUIRED = "E_PROVIDER_REAUTH_REQUIRED"
    E_QUOTA_EXCEEDED = "E_QUOTA_EXCEEDED"
    E_REMOTE_ERROR = "E_REMOTE_ERROR"
    E_DATABASE_UNAVAILABLE = "E_DATABASE_UNAVAILABLE"
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Error raised by services and rendered into the API failure envelope.

    `errmesg` is shown to the end user, so it must stay human-readable and never
    carry raw provider or database internals. `extra` is merged into the
    failure body (e.g. `requires_reauth`).
    """

    def __init__(
        self,
        errcode: AppErrorCode | str,
        errmesg: str,
        status_code: int = HttpStatusCode.BAD_REQUEST,
        *,
        extra: dict[str, Any] | None = None,
    ):
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.extra = extra or {}
        self.erresid = uuid4().hex[:10]
        self.caller_info = self._capture_caller()
        super().__init__(errmesg)

    @staticmethod
    def _capture_caller() -> str:
        frame = inspect.currentframe()
        # current -> __init__ -> raise site
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            return "unknown"
        module = caller.f_globals.get("__name__", "")
        return f"{module}:{caller.f_code.co_name}:{caller.f_lineno}"

    def __repr__(self) -> str:
        return f"AppError({self.errcode}, {self.errmesg!r}, {self.status_code})"


def not_found(session_key: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_SESSION_NOT_FOUND,
        errmesg="Stream not found",
        status_code=HttpStatusCode.NOT_FOUND,
        extra={"session_key": session_key},
    )


def forbidden() -> AppError:
    return AppError(
        errcode=AppErrorCode.E_FORBIDDEN,
        errmesg="Access denied",
        status_code=HttpStatusCode.FORBIDDEN,
    )
