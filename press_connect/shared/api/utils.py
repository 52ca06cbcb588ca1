import inspect
from os import environ
from typing import Any, Literal
from uuid import uuid4

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from press_connect.utils.app_errors import AppErrorCode

E_INTERNAL = AppErrorCode.E_INTERNAL_ERROR.value
E_INVALID_PARAMS = AppErrorCode.E_INVALID_PARAMS.value


class ApiResponse(BaseModel):
    version: str | None = Field(default_factory=lambda: environ.get("BUILD_COMMIT", "dev"))


class ApiSuccess(ApiResponse):
    success: Literal[True] = True
    results: Any = "OK"


class ApiFailure(ApiResponse):
    model_config = {"extra": "allow"}

    success: Literal[False] = False
    errcode: str = E_INTERNAL
    erresid: str = Field(default_factory=lambda: uuid4().hex[:10])
    errmesg: str = "We are sorry, an error occurred."


def api_failure(errcode: str | None = None, errmesg: str | None = None, *, trace: Any = None):
    """Build an ApiFailure and log it with the caller's location."""
    failure = ApiFailure(
        errcode=errcode or E_INTERNAL,
        errmesg=errmesg or str(ApiFailure.model_fields["errmesg"].default),
    )

    caller_frame = inspect.stack()[1]
    module = inspect.getmodule(caller_frame.frame)
    module_name = (
        module.__name__ if module and getattr(module, "__name__", None) else caller_frame.filename
    )
    caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    logger.warning(
        f"{failure.errcode} {failure.erresid}\n{failure.errmesg} "
        f"caller={caller_info} trace={trace}"
    )

    return failure


def make_response(results: ApiSuccess | ApiFailure, *, status_code: int | None = None):
    if status_code is None:
        if isinstance(results, ApiFailure):
            status_code = 500 if results.errcode == E_INTERNAL else 400
        else:
            status_code = 200

    return ORJSONResponse(status_code=status_code, content=results.model_dump())


def log_routes(app: FastAPI) -> None:
    for route in app.routes:
        methods = getattr(route, "methods", None)
        if not methods:
            continue
        endpoint = getattr(route, "endpoint", None)
        endpoint_name = getattr(endpoint, "__name__", str(endpoint))
        logger.info(
            "Loaded route: {:<12} {:<60} {}",
            ",".join(sorted(methods)),
            getattr(route, "path", ""),
            endpoint_name,
        )
