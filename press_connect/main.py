import time
import traceback
import uuid
from contextlib import asynccontextmanager
from os import environ

import logfire
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from granian import Granian
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from press_connect.api.errors import app_error_handler, app_validation_exception_handler
from press_connect.api.v1.routers import auth, health, media, streams
from press_connect.app_config import AppSettings, build_app_settings
from press_connect.app_services import build_services
from press_connect.shared.api.utils import api_failure, log_routes
from press_connect.shared.logging import init_logger
from press_connect.storage.postgres import PostgresManager
from press_connect.storage.schema import init_schema
from press_connect.utils.app_errors import AppError, AppErrorCode


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore
        start_time = time.time()
        request_id = str(uuid.uuid4())[:8]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Duration: {process_time:.2f}ms"
            )

            return response

        except Exception as exc:
            process_time = (time.time() - start_time) * 1000

            logger.error(
                f"[{request_id}] Unhandled exception in {request.method} {request.url.path} - "
                f"Duration: {process_time:.2f}ms - "
                f"Error: {type(exc).__name__}: {exc}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            # No internals in the body; the request id links it to the log line above
            failure = api_failure(
                errcode=AppErrorCode.E_INTERNAL_ERROR.value,
                errmesg=f"Internal server error (request_id: {request_id})",
            )
            return ORJSONResponse(
                status_code=500,
                content=failure.model_dump(),
            )


def include_routers(server: FastAPI) -> None:
    server.include_router(health.router)
    for module in (auth, streams, media):
        server.include_router(module.router, prefix="/api/v1")


def configure_logfire(server: FastAPI, settings: AppSettings) -> None:
    logger.info("Logfire initializing")

    logfire.configure(
        token=settings.LOGFIRE_TOKEN,
        service_name="press-connect-backend",
        service_version=environ.get("BUILD_COMMIT") or "dev",
    )

    logger.info("Logfire instrument fastapi")
    logfire.instrument_fastapi(server, capture_headers=False)

    logger.info("Logfire instrument asyncpg")
    logfire.instrument_asyncpg()

    logger.info("Logfire instrument httpx")
    logfire.instrument_httpx()


@asynccontextmanager
async def lifespan(server: FastAPI):
    settings: AppSettings = server.state.settings
    init_logger(settings)

    logger.info("Application startup ({})...", settings.APP_ENV)

    db = PostgresManager(settings)
    server.state.db = db

    if settings.DB_INIT_SCHEMA:
        await init_schema(db)

    server.state.services = build_services(settings, db)

    log_routes(server)

    if settings.LOGFIRE_ENABLE:
        configure_logfire(server, settings)

    yield

    logger.info("Application shutdown...")

    await db.close()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or build_app_settings()

    server = FastAPI(
        version="1.0",
        title="Press Connect API",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    server.state.settings = settings

    server.add_middleware(HTTPLoggingMiddleware)

    server.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    server.add_exception_handler(RequestValidationError, app_validation_exception_handler)  # type: ignore
    server.add_exception_handler(AppError, app_error_handler)  # type: ignore

    include_routers(server)
    return server


def build_granian_kwargs(settings: AppSettings):
    kwargs = {
        "interface": "asgi",
        "address": settings.API_HOST,
        "port": settings.API_PORT,
        "workers": settings.API_WORKERS,
        "reload": settings.DEBUG,
        "factory": True,
    }

    return kwargs


if __name__ == "__main__":
    granian_kwargs = build_granian_kwargs(build_app_settings())
    Granian("press_connect.main:create_app", **granian_kwargs).serve()
